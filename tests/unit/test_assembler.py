"""Unit tests for document assembly."""

from datetime import datetime

import pytest

from repo_pdf_service.core.models import (
    DirectoryNode,
    FileNode,
    Readme,
    RenderOptions,
    RepoMetadata,
)
from repo_pdf_service.document import DocumentAssembler
from repo_pdf_service.document.sections import (
    Cover,
    FileSection,
    ReadmeSection,
    StructureEntry,
    StructureHeader,
    TableOfContentsEntry,
    TableOfContentsHeader,
)
from repo_pdf_service.processors import ContentResolver
from repo_pdf_service.tree import TreeBuilder, TreeFetcher

LAYOUT = {
    "README.md": "Hello",
    "src": {"a.js": "console.log('a');", "util": {"c.js": "export {}"}},
    "b.py": "print('b')",
}


@pytest.fixture
def meta():
    return RepoMetadata(
        name="demo", owner_login="octocat", description="Demo", stargazers_count=5, forks_count=1
    )


@pytest.fixture
def github(fake_github):
    return fake_github(LAYOUT)


@pytest.fixture
def tree(repo, github):
    return TreeBuilder(TreeFetcher(github)).build(repo, "", 0, 3)


def _assemble(github, repo, meta, tree, readme=Readme("README.md", "Hello"), **options):
    assembler = DocumentAssembler(
        ContentResolver(github), clock=lambda: datetime(2024, 5, 17, 12, 0)
    )
    return list(assembler.assemble(repo, meta, readme, tree, RenderOptions(**options)))


def _of_type(sections, kind):
    return [section for section in sections if isinstance(section, kind)]


class TestDocumentAssembler:
    """Test section order and content."""

    def test_cover(self, github, repo, meta, tree):
        """Test cover facts and generation date."""
        cover = _assemble(github, repo, meta, tree)[0]
        assert isinstance(cover, Cover)
        assert cover.title == "demo"
        assert cover.subtitle == "by octocat"
        assert cover.stats == "Stars: 5 | Forks: 1"
        assert cover.generated_on == "Generated on: 2024-05-17"

    def test_section_order(self, github, repo, meta, tree):
        """Test cover, TOC, README, structure, then files."""
        kinds = [type(section) for section in _assemble(github, repo, meta, tree)]

        def first(kind):
            return kinds.index(kind)

        assert first(Cover) == 0
        assert first(TableOfContentsHeader) == 1
        assert first(TableOfContentsEntry) < first(ReadmeSection)
        assert first(ReadmeSection) < first(StructureHeader) < first(StructureEntry)
        assert max(i for i, k in enumerate(kinds) if k is StructureEntry) < first(FileSection)

    def test_toc_links(self, github, repo, meta, tree):
        """Test README and structure links precede the tree lines."""
        toc = _of_type(_assemble(github, repo, meta, tree), TableOfContentsEntry)
        assert (toc[0].label, toc[0].target_anchor) == ("README", "readme")
        assert (toc[1].label, toc[1].target_anchor) == ("Repository Structure", "structure")

    def test_toc_anchors_match_file_sections(self, github, repo, meta, tree):
        """Test every TOC file link resolves to a file section."""
        sections = _assemble(github, repo, meta, tree)
        toc_anchors = [
            entry.target_anchor
            for entry in _of_type(sections, TableOfContentsEntry)[2:]
            if entry.target_anchor
        ]
        file_anchors = [section.anchor for section in _of_type(sections, FileSection)]
        assert toc_anchors == file_anchors

    def test_orders_agree(self, github, repo, meta, tree):
        """Test TOC, structure and file sections share one traversal order."""
        sections = _assemble(github, repo, meta, tree)
        toc_files = [
            entry.label
            for entry in _of_type(sections, TableOfContentsEntry)[2:]
            if not entry.is_directory
        ]
        structure_files = [
            entry.name for entry in _of_type(sections, StructureEntry) if not entry.is_directory
        ]
        section_files = [s.path.rsplit("/", 1)[-1] for s in _of_type(sections, FileSection)]

        assert toc_files == structure_files == section_files
        assert section_files == ["README.md", "a.js", "c.js", "b.py"]

    def test_indentation_follows_depth(self, github, repo, meta, tree):
        """Test indent level equals directory depth."""
        entries = _of_type(_assemble(github, repo, meta, tree), StructureEntry)
        levels = {entry.name: entry.indent_level for entry in entries}
        assert levels == {"README.md": 0, "src": 0, "a.js": 1, "util": 1, "c.js": 2, "b.py": 0}

    def test_markers(self, github, repo, meta, tree):
        """Test directory and file labels carry their markers."""
        sections = _assemble(github, repo, meta, tree)
        structure = {e.name: e.label for e in _of_type(sections, StructureEntry)}
        assert structure["src"] == "📁 src/"
        assert structure["b.py"] == "📄 b.py"

        toc_dirs = [e.label for e in _of_type(sections, TableOfContentsEntry) if e.is_directory]
        assert toc_dirs == ["📁 src/", "📁 util/"]

    def test_extension_filter(self, github, repo, meta, tree):
        """Test TOC and file sections only list allowed extensions; structure is complete."""
        sections = _assemble(github, repo, meta, tree, fileExtensions=["js"])

        toc_files = [
            e.label for e in _of_type(sections, TableOfContentsEntry)[2:] if not e.is_directory
        ]
        assert toc_files == ["a.js", "c.js"]
        assert [s.path for s in _of_type(sections, FileSection)] == ["src/a.js", "src/util/c.js"]

        structure = [e.name for e in _of_type(sections, StructureEntry)]
        assert structure == ["README.md", "src", "a.js", "util", "c.js", "b.py"]

        assert "b.py" not in github.fetched_files()

    def test_directories_never_filtered(self, github, repo, meta, tree):
        """Test directories stay in the TOC even without matching files."""
        sections = _assemble(github, repo, meta, tree, fileExtensions=["rs"])
        toc = _of_type(sections, TableOfContentsEntry)[2:]
        assert [e.label for e in toc] == ["📁 src/", "📁 util/"]
        assert _of_type(sections, FileSection) == []

    def test_large_file_placeholder_without_fetch(self, fake_github, repo, meta):
        """Test oversized files get a placeholder and are not fetched."""
        github = fake_github({"big.js": "x" * 10, "small.js": "y"}, sizes={"big.js": 2048})
        tree = TreeBuilder(TreeFetcher(github)).build(repo)

        sections = _assemble(github, repo, meta, tree, readme=None, maxFileSize=1000)
        big, small = _of_type(sections, FileSection)

        assert big.placeholder == "[File too large to include: 2KB]"
        assert big.body is None
        assert small.body == "y"
        assert github.fetched_files() == ["small.js"]

    def test_fetch_error_placeholder_in_body(self, fake_github, repo, meta):
        """Test content failures are rendered inline and do not stop assembly."""
        github = fake_github({"a.js": "a", "b.js": "b"}, failing_files=["a.js"])
        tree = TreeBuilder(TreeFetcher(github)).build(repo)

        a, b = _of_type(_assemble(github, repo, meta, tree, readme=None), FileSection)
        assert a.body.startswith("// Error fetching content for a.js:")
        assert b.body == "b"

    def test_highlighting_language(self, github, repo, meta, tree):
        """Test file sections carry the detected language."""
        sections = _of_type(_assemble(github, repo, meta, tree), FileSection)
        languages = {s.path: s.language for s in sections}
        assert languages["src/a.js"] == "javascript"
        assert languages["b.py"] == "python"

    def test_readme_disabled(self, github, repo, meta, tree):
        """Test README link and section are omitted when not requested."""
        sections = _assemble(github, repo, meta, tree, includeReadme=False)
        assert _of_type(sections, ReadmeSection) == []
        assert all(e.target_anchor != "readme" for e in _of_type(sections, TableOfContentsEntry))

    def test_missing_readme(self, github, repo, meta, tree):
        """Test no README section without a README."""
        sections = _assemble(github, repo, meta, tree, readme=None)
        assert _of_type(sections, ReadmeSection) == []
        assert _of_type(sections, TableOfContentsEntry)[0].target_anchor == "structure"

    def test_files_only(self, github, repo, meta, tree):
        """Test structure link stays when only files are requested."""
        sections = _assemble(github, repo, meta, tree, includeStructure=False)
        assert _of_type(sections, StructureHeader) == []
        assert _of_type(sections, StructureEntry) == []
        assert any(e.target_anchor == "structure" for e in _of_type(sections, TableOfContentsEntry))
        assert _of_type(sections, FileSection)

    def test_structure_only(self, github, repo, meta, tree):
        """Test no file lines or sections when files are disabled."""
        sections = _assemble(github, repo, meta, tree, includeFiles=False)
        toc = _of_type(sections, TableOfContentsEntry)
        assert [e.label for e in toc] == ["README", "Repository Structure"]
        assert _of_type(sections, FileSection) == []
        assert github.fetched_files() == []

    def test_nothing_requested(self, github, repo, meta, tree):
        """Test only the cover and TOC header remain."""
        sections = _assemble(
            github,
            repo,
            meta,
            tree,
            includeReadme=False,
            includeStructure=False,
            includeFiles=False,
        )
        assert [type(s) for s in sections] == [Cover, TableOfContentsHeader]

    def test_lazy_fetching(self, github, repo, meta, tree):
        """Test file contents are fetched only as sections are consumed."""
        assembler = DocumentAssembler(ContentResolver(github))
        stream = assembler.assemble(repo, meta, None, tree, RenderOptions())

        for section in stream:
            if isinstance(section, StructureHeader):
                break
        assert github.fetched_files() == []

    def test_failed_directory_kept_in_listing(self, repo, meta):
        """Test a directory whose listing failed still appears."""
        tree = [DirectoryNode("broken", "broken", fetch_failed=True), FileNode("a.py", "a.py")]
        github_stub = type("Stub", (), {"get_file_text": lambda self, repo, path: "a"})()

        sections = _assemble(github_stub, repo, meta, tree, readme=None)
        assert [e.name for e in _of_type(sections, StructureEntry)] == ["broken", "a.py"]
