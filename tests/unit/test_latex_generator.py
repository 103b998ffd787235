"""Unit tests for LaTeX header and pandoc defaults generation."""

from unittest.mock import patch

import yaml

from repo_pdf_service.converters.latex_generator import LaTeXGenerator, get_system_fonts
from repo_pdf_service.core.config import PDFSettings
from repo_pdf_service.core.models import RepoMetadata

META = RepoMetadata(name="my_repo", owner_login="octocat", description="Tools & more")


class TestSystemFonts:
    """Test platform font detection."""

    def test_linux_fonts(self):
        """Test DejaVu fonts on Linux."""
        with patch(
            "repo_pdf_service.converters.latex_generator.platform.system", return_value="Linux"
        ):
            fonts = get_system_fonts()
        assert fonts["mono_font"] == "DejaVu Sans Mono"
        assert "Noto Emoji" in fonts["emoji_fonts"]

    def test_macos_fonts(self):
        """Test macOS fonts."""
        with patch(
            "repo_pdf_service.converters.latex_generator.platform.system", return_value="Darwin"
        ):
            fonts = get_system_fonts()
        assert fonts["mono_font"] == "Menlo"


class TestLaTeXGenerator:
    """Test generated files."""

    def test_pandoc_defaults(self, tmp_path):
        """Test defaults file carries engine, input format and header."""
        generator = LaTeXGenerator(PDFSettings(mono_font="Courier"), tmp_path)
        defaults_path = generator.generate_pandoc_config(META)

        defaults = yaml.safe_load(defaults_path.read_text(encoding="utf-8"))
        assert defaults["pdf-engine"] == "xelatex"
        assert defaults["from"].startswith("markdown")
        assert "-raw_tex" in defaults["from"]
        assert defaults["highlight-style"] == "tango"
        assert defaults["include-in-header"] == [str(tmp_path / "header.tex")]
        assert defaults["variables"]["monofont"] == "Courier"
        assert defaults["variables"]["geometry"] == "margin=50bp"

    def test_header_pdf_info(self, tmp_path):
        """Test title, author and subject are set and escaped."""
        generator = LaTeXGenerator(PDFSettings(), tmp_path)
        generator.generate_pandoc_config(META)

        header = (tmp_path / "header.tex").read_text(encoding="utf-8")
        assert "pdftitle={my\\_repo - GitHub Repository}" in header
        assert "pdfauthor={octocat}" in header
        assert "pdfsubject={Tools \\& more}" in header

    def test_header_subject_default(self, tmp_path):
        """Test subject falls back when there is no description."""
        generator = LaTeXGenerator(PDFSettings(), tmp_path)
        generator.generate_pandoc_config(RepoMetadata(name="r", owner_login="o"))

        header = (tmp_path / "header.tex").read_text(encoding="utf-8")
        assert "pdfsubject={GitHub Repository PDF Export}" in header

    def test_emoji_fallback(self, tmp_path):
        """Test configured emoji font is tried first and markers are mapped."""
        generator = LaTeXGenerator(PDFSettings(emoji_font="My Emoji"), tmp_path)
        generator.generate_pandoc_config(META)

        header = (tmp_path / "header.tex").read_text(encoding="utf-8")
        first_font = header.index("\\IfFontExistsTF{My Emoji}")
        assert first_font < header.index("\\IfFontExistsTF{", first_font + 1)
        assert '\\newunicodechar{📁}{{\\EmojiFont\\symbol{"1F4C1}}}' in header
        assert '\\newunicodechar{📄}{{\\EmojiFont\\symbol{"1F4C4}}}' in header

    def test_plain_markers_not_mapped(self, tmp_path):
        """Test ASCII markers need no emoji font mapping."""
        generator = LaTeXGenerator(PDFSettings(folder_marker="+", file_marker="-"), tmp_path)
        generator.generate_pandoc_config(META)

        header = (tmp_path / "header.tex").read_text(encoding="utf-8")
        assert "\\newunicodechar" not in header.split("\\usepackage{newunicodechar}")[1]
