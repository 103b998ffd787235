"""Main PDF converter coordinating all components."""

import logging
import subprocess
import time
from pathlib import Path
from typing import List

from repo_pdf_service.converters import LaTeXGenerator, MarkdownDocumentWriter
from repo_pdf_service.core.config import AppConfig
from repo_pdf_service.core.constants import PANDOC_TIMEOUT
from repo_pdf_service.core.exceptions import ConversionError
from repo_pdf_service.core.models import RenderOptions, RepoMetadata, RepoRef, TreeNode
from repo_pdf_service.document import DocumentAssembler
from repo_pdf_service.explorer import RepositoryExplorer
from repo_pdf_service.processors import CodeHighlighter
from repo_pdf_service.tree import RepositorySource

logger = logging.getLogger(__name__)


class RepoPDFConverter:
    """
    Main converter coordinating all components to render a repository as PDF.

    This class orchestrates the entire conversion process:
    1. Fetch repository metadata, README and tree from the GitHub API
    2. Assemble the document sections
    3. Serialize them to pandoc Markdown with a LaTeX header
    4. Convert Markdown to PDF using Pandoc
    """

    MARKDOWN_FILE = "document.md"

    def __init__(self, config: AppConfig, source: RepositorySource):
        """
        Initialize the PDF converter.

        Args:
            config: Application configuration
            source: GitHub API capability (usually a GitHubClient)
        """
        self.config = config
        self.source = source
        self.explorer = RepositoryExplorer(source, max_workers=config.tree_workers)

        settings = config.pdf_settings
        self.assembler = DocumentAssembler(
            self.explorer.resolver,
            highlighter=CodeHighlighter(settings.max_line_length),
            folder_marker=settings.folder_marker,
            file_marker=settings.file_marker,
            show_progress=settings.show_progress,
        )

    def generate(self, repo: RepoRef, options: RenderOptions, output_dir: Path) -> Path:
        """
        Render a repository to a PDF inside ``output_dir``.

        Args:
            repo: Repository to render
            options: Section switches and file selection rules
            output_dir: Existing directory receiving intermediate files and the PDF

        Returns:
            Path to generated PDF file

        Raises:
            GitHubAPIError: If the repository metadata cannot be fetched
            ConversionError: If PDF conversion fails
        """
        repo_meta = RepoMetadata.from_api(self.source.get_repository(repo))
        logger.info(f"Rendering {repo.owner}/{repo.repo}")

        markdown_file = self.write_markdown(repo, repo_meta, options, output_dir)

        latex_generator = LaTeXGenerator(self.config.pdf_settings, output_dir)
        pandoc_config = latex_generator.generate_pandoc_config(repo_meta)

        output_pdf = output_dir / f"{repo_meta.name}-{int(time.time() * 1000)}.pdf"
        self._generate_pdf(markdown_file, pandoc_config, output_pdf)
        logger.info(f"✅ PDF generated successfully: {output_pdf}")
        return output_pdf

    def write_markdown(
        self, repo: RepoRef, repo_meta: RepoMetadata, options: RenderOptions, output_dir: Path
    ) -> Path:
        """
        Fetch README and tree as requested and write the pandoc Markdown document.

        Returns:
            Path to the Markdown file
        """
        readme = self.explorer.load_readme(repo) if options.include_readme else None

        tree: List[TreeNode] = []
        if options.include_structure or options.include_files:
            tree = self.explorer.full_structure(repo, options.max_depth)

        markdown_file = output_dir / self.MARKDOWN_FILE
        with open(markdown_file, "w", encoding="utf-8") as f:
            writer = MarkdownDocumentWriter(f, self.config.pdf_settings.indent_width)
            for section in self.assembler.assemble(repo, repo_meta, readme, tree, options):
                writer.write(section)
            writer.close()

        logger.info(f"Generated Markdown: {markdown_file}")
        return markdown_file

    def _generate_pdf(self, markdown_file: Path, pandoc_config: Path, output_pdf: Path) -> Path:
        """
        Generate PDF from Markdown using Pandoc.

        Args:
            markdown_file: Path to Markdown file
            pandoc_config: Path to Pandoc defaults file
            output_pdf: Target PDF path

        Returns:
            Path to generated PDF

        Raises:
            ConversionError: If PDF generation fails
        """
        cmd = [
            "pandoc",
            str(markdown_file),
            "-o",
            str(output_pdf),
            "--defaults",
            str(pandoc_config),
        ]

        logger.info(f"Running Pandoc: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=PANDOC_TIMEOUT,
                cwd=markdown_file.parent,
            )
        except subprocess.TimeoutExpired:
            raise ConversionError(f"Pandoc conversion timed out (>{PANDOC_TIMEOUT} seconds)")
        except OSError as e:
            raise ConversionError("Failed to run Pandoc", details=str(e))

        if result.returncode != 0:
            logger.error(f"Pandoc stderr: {result.stderr}")
            raise ConversionError("Pandoc conversion failed", details=result.stderr)

        if not output_pdf.exists():
            raise ConversionError("PDF file was not generated")

        return output_pdf
