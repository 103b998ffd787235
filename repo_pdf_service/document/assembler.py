"""Ordered document section stream for one repository snapshot."""

import logging
from datetime import datetime
from typing import Callable, Iterator, List, Optional

from tqdm import tqdm

from repo_pdf_service.core.constants import (
    FILE_MARKER,
    FOLDER_MARKER,
    README_ANCHOR,
    STRUCTURE_ANCHOR,
)
from repo_pdf_service.core.models import (
    DirectoryNode,
    FileNode,
    Readme,
    RenderOptions,
    RepoMetadata,
    RepoRef,
    TreeNode,
)
from repo_pdf_service.document.anchors import AnchorRegistry
from repo_pdf_service.document.sections import (
    Cover,
    DocumentSection,
    FileSection,
    ReadmeSection,
    StructureEntry,
    StructureHeader,
    TableOfContentsEntry,
    TableOfContentsHeader,
)
from repo_pdf_service.processors.code_processor import CodeHighlighter
from repo_pdf_service.processors.content_resolver import ContentResolver
from repo_pdf_service.processors.file_filter import FileFilter
from repo_pdf_service.tree.builder import walk

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """
    Turns repository metadata, README and tree into document sections.

    Emission order:

    1. cover
    2. table of contents header
    3. README link (if requested and present)
    4. structure link, then one line per directory and selected file
       (if structure or files are requested; file lines only with files)
    5. README section
    6. structure section (whole tree, no extension filter)
    7. one section per selected file

    Steps 4, 6 and 7 share the same pre-order walk of the tree, and file
    anchors come from one registry per document, so every table of contents
    link resolves to the section emitted for that file.

    Sections are yielded lazily: file contents are fetched only when the
    consumer reaches the corresponding section.
    """

    def __init__(
        self,
        resolver: ContentResolver,
        highlighter: Optional[CodeHighlighter] = None,
        folder_marker: str = FOLDER_MARKER,
        file_marker: str = FILE_MARKER,
        show_progress: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the assembler.

        Args:
            resolver: Fetches file bodies (never raises)
            highlighter: Prepares bodies for highlighting
            folder_marker: Prefix of directory lines
            file_marker: Prefix of file lines in the structure section
            show_progress: Show a tqdm bar while file sections are produced
            clock: Source of the cover's generation date
        """
        self.resolver = resolver
        self.highlighter = highlighter or CodeHighlighter()
        self.folder_marker = folder_marker
        self.file_marker = file_marker
        self.show_progress = show_progress
        self.clock = clock

    def assemble(
        self,
        repo: RepoRef,
        repo_meta: RepoMetadata,
        readme: Optional[Readme],
        tree: List[TreeNode],
        options: RenderOptions,
    ) -> Iterator[DocumentSection]:
        """
        Yield the document sections in emission order.

        Args:
            repo: Repository the file contents are fetched from
            repo_meta: Cover page facts
            readme: Decoded README, or None if the repository has none
            tree: Repository tree (already depth bounded)
            options: Section switches and file selection rules

        Yields:
            DocumentSection instances
        """
        anchors = AnchorRegistry()
        file_filter = FileFilter(options)
        has_readme = options.include_readme and readme is not None

        yield self._cover(repo_meta)
        yield TableOfContentsHeader()

        if has_readme:
            yield TableOfContentsEntry(label="README", target_anchor=README_ANCHOR)

        if options.include_structure or options.include_files:
            yield TableOfContentsEntry(label="Repository Structure", target_anchor=STRUCTURE_ANCHOR)
            if options.include_files:
                yield from self._toc_entries(tree, file_filter, anchors)

        if has_readme:
            yield ReadmeSection(name=readme.name, content=readme.content)

        if options.include_structure:
            yield StructureHeader()
            yield from self._structure_entries(tree)

        if options.include_files:
            yield from self._file_sections(repo, tree, file_filter, anchors)

    def _cover(self, repo_meta: RepoMetadata) -> Cover:
        return Cover(
            title=repo_meta.name,
            subtitle=f"by {repo_meta.owner_login}",
            description=repo_meta.description,
            stats=f"Stars: {repo_meta.stargazers_count} | Forks: {repo_meta.forks_count}",
            generated_on=f"Generated on: {self.clock().strftime('%Y-%m-%d')}",
        )

    def _directory_label(self, node: DirectoryNode) -> str:
        return f"{self.folder_marker} {node.name}/"

    def _toc_entries(
        self, tree: List[TreeNode], file_filter: FileFilter, anchors: AnchorRegistry
    ) -> Iterator[TableOfContentsEntry]:
        for node, depth in walk(tree):
            if isinstance(node, DirectoryNode):
                yield TableOfContentsEntry(
                    label=self._directory_label(node), indent_level=depth, is_directory=True
                )
            elif file_filter.included(node):
                yield TableOfContentsEntry(
                    label=node.name,
                    target_anchor=anchors.anchor_for(node.path),
                    indent_level=depth,
                )

    def _structure_entries(self, tree: List[TreeNode]) -> Iterator[StructureEntry]:
        for node, depth in walk(tree):
            if isinstance(node, DirectoryNode):
                yield StructureEntry(
                    name=node.name,
                    label=self._directory_label(node),
                    indent_level=depth,
                    is_directory=True,
                )
            else:
                yield StructureEntry(
                    name=node.name, label=f"{self.file_marker} {node.name}", indent_level=depth
                )

    def _file_sections(
        self,
        repo: RepoRef,
        tree: List[TreeNode],
        file_filter: FileFilter,
        anchors: AnchorRegistry,
    ) -> Iterator[FileSection]:
        selected = [
            node
            for node, _ in walk(tree)
            if isinstance(node, FileNode) and file_filter.included(node)
        ]
        logger.info(f"Rendering {len(selected)} file sections")

        for node in tqdm(
            selected, desc="Rendering files", unit="file", disable=not self.show_progress
        ):
            anchor = anchors.anchor_for(node.path)

            if not file_filter.body_allowed(node):
                yield FileSection(
                    path=node.path,
                    anchor=anchor,
                    placeholder=FileFilter.too_large_placeholder(node),
                )
                continue

            content = self.resolver.fetch(repo, node.path)
            code = self.highlighter.highlight(content, node.name)
            yield FileSection(path=node.path, anchor=anchor, body=code.text, language=code.language)
