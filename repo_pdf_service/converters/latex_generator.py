"""LaTeX header and pandoc configuration generation."""

import logging
import platform
from pathlib import Path
from typing import Dict, List, Union

import yaml

from repo_pdf_service.converters.markdown_writer import latex_escape
from repo_pdf_service.core.config import PDFSettings
from repo_pdf_service.core.constants import PANDOC_INPUT_FORMAT
from repo_pdf_service.core.models import RepoMetadata

logger = logging.getLogger(__name__)


def get_system_fonts() -> Dict[str, Union[str, List[str]]]:
    """
    Detect system fonts based on platform.

    Returns:
        Dictionary with font names for main_font, sans_font, mono_font, and emoji_fonts
    """
    system = platform.system()

    if system == "Darwin":  # macOS
        return {
            "main_font": "Times New Roman",
            "sans_font": "Helvetica",
            "mono_font": "Menlo",
            "emoji_fonts": ["Apple Color Emoji"],
        }
    else:  # Linux/WSL
        return {
            "main_font": "DejaVu Serif",
            "sans_font": "DejaVu Sans",
            "mono_font": "DejaVu Sans Mono",
            "emoji_fonts": ["Noto Emoji", "Symbola", "Noto Color Emoji"],
        }


class LaTeXGenerator:
    """Generates the LaTeX header and pandoc defaults for one document."""

    HEADER_FILE = "header.tex"
    DEFAULTS_FILE = "pandoc_defaults.yaml"

    def __init__(self, settings: PDFSettings, output_dir: Path):
        """
        Initialize the LaTeX generator.

        Args:
            settings: PDF settings
            output_dir: Directory where LaTeX files will be written
        """
        self.settings = settings
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_pandoc_config(self, repo_meta: RepoMetadata) -> Path:
        """
        Generate pandoc defaults YAML configuration.

        Args:
            repo_meta: Repository facts used for the PDF info dictionary

        Returns:
            Path to generated pandoc defaults file
        """
        system_fonts = get_system_fonts()

        main_font = self.settings.main_font or system_fonts["main_font"]
        sans_font = self.settings.sans_font or system_fonts["sans_font"]
        mono_font = self.settings.mono_font or system_fonts["mono_font"]

        header_tex_path = self.generate_latex_header(repo_meta, system_fonts)

        defaults = {
            "pdf-engine": self.settings.pdf_engine,
            "from": PANDOC_INPUT_FORMAT,
            "highlight-style": self.settings.highlight_style,
            "include-in-header": [str(header_tex_path)],
            "variables": {
                "documentclass": "article",
                "fontsize": self.settings.fontsize,
                "geometry": self.settings.margin,
                "mainfont": main_font,
                "sansfont": sans_font,
                "monofont": mono_font,
                "monofontoptions": ["Scale=0.85"],
                "colorlinks": True,
                "linkcolor": "blue",
                "urlcolor": "blue",
            },
        }

        yaml_path = self.output_dir / self.DEFAULTS_FILE
        content = yaml.safe_dump(defaults, allow_unicode=True, sort_keys=False)
        yaml_path.write_text("# Pandoc defaults file\n" + content, encoding="utf-8")

        logger.info(f"Generated pandoc config: {yaml_path}")
        return yaml_path

    def generate_latex_header(
        self, repo_meta: RepoMetadata, system_fonts: Dict[str, Union[str, List[str]]]
    ) -> Path:
        """
        Generate LaTeX header file (header.tex).

        Sets the PDF info dictionary, makes code blocks wrap instead of
        overflowing and routes the folder/file markers to an emoji font when
        one is installed.

        Args:
            repo_meta: Repository facts for title, author and subject
            system_fonts: System fonts dictionary

        Returns:
            Path to generated header.tex file
        """
        title = latex_escape(f"{repo_meta.name} - GitHub Repository")
        author = latex_escape(repo_meta.owner_login)
        subject = latex_escape(repo_meta.description or "GitHub Repository PDF Export")

        emoji_setup_tex = self._generate_emoji_fallback_setup(
            self._get_emoji_font_candidates(system_fonts)
        )

        header_content = f"""% LaTeX header for repo-pdf-service
% Generated automatically - do not edit manually

\\usepackage{{fontspec}}
\\usepackage{{fvextra}}
\\usepackage{{newunicodechar}}

% PDF info dictionary
\\AtBeginDocument{{\\hypersetup{{pdftitle={{{title}}}, pdfauthor={{{author}}}, pdfsubject={{{subject}}}}}}}

% Code blocks wrap long lines
\\DefineVerbatimEnvironment{{Highlighting}}{{Verbatim}}{{breaklines,breakanywhere,commandchars=\\\\\\{{\\}}}}
\\fvset{{breaklines=true, breakanywhere=true}}

{emoji_setup_tex}

% Overflow prevention
\\emergencystretch=5em
"""

        header_path = self.output_dir / self.HEADER_FILE
        header_path.write_text(header_content, encoding="utf-8")

        logger.info(f"Generated LaTeX header: {header_path}")
        return header_path

    def _get_emoji_font_candidates(
        self, system_fonts: Dict[str, Union[str, List[str]]]
    ) -> List[str]:
        """Configured emoji font first, then the platform's candidates."""
        emoji_candidates = []

        cfg_emoji = self.settings.emoji_font
        if cfg_emoji and cfg_emoji.strip():
            emoji_candidates.append(cfg_emoji.strip())

        for font in system_fonts.get("emoji_fonts", []):
            if font not in emoji_candidates:
                emoji_candidates.append(font)

        return emoji_candidates

    def _generate_emoji_fallback_setup(self, emoji_candidates: List[str]) -> str:
        """
        Generate LaTeX that typesets the markers with the first available emoji font.

        Args:
            emoji_candidates: List of emoji font names

        Returns:
            LaTeX code for emoji fallback setup
        """
        lines = [
            "% Emoji font fallback setup",
            "\\newif\\ifemojiavailable",
            "\\emojiavailablefalse",
        ]

        for font_name in emoji_candidates:
            safe_name = font_name.replace("\\", "").replace("{", "").replace("}", "")
            lines.append(
                f"\\ifemojiavailable\\else\\IfFontExistsTF{{{safe_name}}}"
                f"{{\\newfontfamily\\EmojiFont{{{safe_name}}}\\emojiavailabletrue}}{{}}\\fi"
            )

        markers = []
        for marker in (self.settings.folder_marker, self.settings.file_marker):
            if len(marker) == 1 and ord(marker) > 0x2000 and marker not in markers:
                markers.append(marker)

        for marker in markers:
            lines.append(
                f"\\ifemojiavailable\\newunicodechar{{{marker}}}"
                f"{{{{\\EmojiFont\\symbol{{\"{ord(marker):X}}}}}}}\\fi"
            )

        return "\n".join(lines)
