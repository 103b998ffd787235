"""Pandoc Markdown serialization of document sections."""

import logging
import re
from typing import Optional, TextIO

from repo_pdf_service.core.constants import INDENT_WIDTH
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

logger = logging.getLogger(__name__)

_MARKDOWN_PUNCTUATION = re.compile(r"([!-/:-@\[-`{-~])")
_BACKTICK_RUN = re.compile(r"`+")
_LANGUAGE_CLASS = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}

PAGE_BREAK = "```{=latex}\n\\newpage\n```\n\n"


def markdown_escape(text: str) -> str:
    """Backslash-escape every ASCII punctuation character so pandoc reads text literally."""
    return _MARKDOWN_PUNCTUATION.sub(r"\\\1", text)


def latex_escape(text: str) -> str:
    """Escape LaTeX special characters."""
    return "".join(_LATEX_SPECIALS.get(ch, ch) for ch in text)


def code_fence(content: str) -> str:
    """Return a backtick fence longer than any backtick run inside ``content``."""
    longest = max((len(run) for run in _BACKTICK_RUN.findall(content)), default=0)
    return "`" * max(5, longest + 1)


class MarkdownDocumentWriter:
    """
    Writes document sections to a pandoc Markdown stream.

    Layout choices:

    - page breaks and the cover are raw LaTeX blocks;
    - table of contents and structure lines are line blocks, which keep
      their leading indentation;
    - README text is a line block of fully escaped lines, so it is shown as
      plain text without Markdown interpretation;
    - file bodies are fenced code blocks carrying the highlighting language.

    Sections must be written in emission order; call ``close()`` after the
    last one.
    """

    def __init__(self, out: TextIO, indent_width: int = INDENT_WIDTH):
        """
        Initialize the writer.

        Args:
            out: Text stream receiving Markdown
            indent_width: Spaces per indent level in line blocks
        """
        self.out = out
        self.indent_width = indent_width
        self._in_line_block = False
        self.sections_written = 0

    def write(self, section: DocumentSection) -> None:
        """Serialize one section."""
        if isinstance(section, (TableOfContentsEntry, StructureEntry)):
            self._write_line_block_entry(section)
        else:
            self._end_line_block()
            if isinstance(section, Cover):
                self._write_cover(section)
            elif isinstance(section, TableOfContentsHeader):
                self._write_heading(section.title, None, page_break=False)
            elif isinstance(section, ReadmeSection):
                self._write_readme(section)
            elif isinstance(section, StructureHeader):
                self._write_heading(section.title, section.anchor, page_break=True)
            elif isinstance(section, FileSection):
                self._write_file(section)
            else:
                raise TypeError(f"Unknown document section: {type(section).__name__}")

        self.sections_written += 1
        self.out.flush()

    def close(self) -> None:
        self._end_line_block()
        self.out.flush()
        logger.debug(f"Wrote {self.sections_written} document sections")

    def _end_line_block(self) -> None:
        if self._in_line_block:
            self.out.write("\n")
            self._in_line_block = False

    @staticmethod
    def _line(text: str, indent: str = "") -> str:
        return f"| {indent}{text}\n" if (indent or text) else "|\n"

    def _write_line_block_entry(self, entry) -> None:
        label = markdown_escape(entry.label)
        target = getattr(entry, "target_anchor", None)
        if target:
            label = f"[{label}](#{target})"

        self.out.write(self._line(label, " " * (self.indent_width * entry.indent_level)))
        self._in_line_block = True

    def _write_heading(self, title: str, anchor: Optional[str], page_break: bool) -> None:
        if page_break:
            self.out.write(PAGE_BREAK)
        attributes = f"#{anchor} .unnumbered" if anchor else ".unnumbered"
        self.out.write(f"# {markdown_escape(title)} {{{attributes}}}\n\n")

    def _write_cover(self, cover: Cover) -> None:
        lines = [
            "```{=latex}",
            "\\begin{titlepage}",
            "\\centering",
            "\\vspace*{3cm}",
            f"{{\\Huge {latex_escape(cover.title)}\\par}}",
            "\\vspace{1.5em}",
            f"{{\\Large {latex_escape(cover.subtitle)}\\par}}",
            "\\vspace{1.5em}",
        ]
        if cover.description:
            lines += [f"{{\\large {latex_escape(cover.description)}\\par}}", "\\vspace{1.5em}"]
        lines += [
            f"{{\\small {latex_escape(cover.stats)}\\par}}",
            "\\vspace{1em}",
            f"{{\\small {latex_escape(cover.generated_on)}\\par}}",
            "\\end{titlepage}",
            "```",
        ]
        self.out.write("\n".join(lines) + "\n\n")

    def _write_readme(self, section: ReadmeSection) -> None:
        self._write_heading(section.title, section.anchor, page_break=True)
        for raw_line in section.content.splitlines():
            stripped = raw_line.lstrip(" \t")
            leading = len(raw_line) - len(stripped)
            self.out.write(self._line(markdown_escape(stripped.rstrip()), " " * leading))
        self.out.write("\n")

    def _write_file(self, section: FileSection) -> None:
        self._write_heading(section.path, section.anchor, page_break=True)

        if section.placeholder is not None:
            self.out.write(f"{markdown_escape(section.placeholder)}\n\n")
            return

        body = section.body or ""
        fence = code_fence(body)
        language = section.language
        info = f"{{.{language}}}" if language and _LANGUAGE_CLASS.match(language) else ""
        self.out.write(f"{fence}{info}\n{body}\n{fence}\n\n")
