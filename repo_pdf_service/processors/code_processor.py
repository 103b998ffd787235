"""Code processing utilities for syntax highlighting and formatting."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from pygments.lexers import guess_lexer_for_filename
from pygments.util import ClassNotFound

from repo_pdf_service.core.constants import (
    CODE_EXTENSIONS,
    MAX_LINE_LENGTH_DEFAULT,
    WRAP_WIDTH_RATIO,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighlightedCode:
    """Code prepared for a fenced block; ``language`` None means plain text."""

    language: Optional[str]
    text: str


class CodeHighlighter:
    """
    Prepares file content for syntax-highlighted rendering.

    The language is taken from the extension table first and otherwise
    guessed by Pygments from the file name and content. Pandoc performs the
    actual colouring from the fenced block's language class. Very long lines
    are hard wrapped so they cannot run off the page.
    """

    def __init__(self, max_line_length: int = MAX_LINE_LENGTH_DEFAULT):
        """
        Initialize the highlighter.

        Args:
            max_line_length: Lines longer than this are hard wrapped
        """
        self.max_line_length = max_line_length

    def highlight(self, content: str, filename: str) -> HighlightedCode:
        """
        Prepare ``content`` for rendering.

        Never raises: on any failure the content is returned unchanged as
        plain text.

        Args:
            content: File text
            filename: File name or path, used for language detection

        Returns:
            HighlightedCode with detected language and wrapped text
        """
        try:
            language = self.detect_language(filename, content)
            return HighlightedCode(language=language, text=self._hard_wrap_lines(content))
        except Exception as e:
            logger.warning(f"Highlighting failed for {filename}, using plain text: {e}")
            return HighlightedCode(language=None, text=content)

    def detect_language(self, filename: str, content: str) -> Optional[str]:
        """Return a language identifier for ``filename`` or None."""
        ext = os.path.splitext(filename)[1]
        language = CODE_EXTENSIONS.get(ext) or CODE_EXTENSIONS.get(ext.lower())
        if language:
            return language

        try:
            lexer = guess_lexer_for_filename(os.path.basename(filename), content)
        except ClassNotFound:
            return None

        return lexer.aliases[0] if lexer.aliases else None

    def _hard_wrap_lines(self, content: str) -> str:
        """Hard wrap extremely long lines to prevent overflow."""
        hard_wrap_threshold = max(40, self.max_line_length)
        wrap_width = max(40, min(160, int(self.max_line_length * WRAP_WIDTH_RATIO)))

        lines = []
        for ln in content.splitlines():
            if len(ln) > hard_wrap_threshold:
                wrapped = "\n".join(ln[i : i + wrap_width] for i in range(0, len(ln), wrap_width))
                lines.append(wrapped)
            else:
                lines.append(ln)

        return "\n".join(lines)
