"""File selection, content resolution and code highlighting."""

from repo_pdf_service.processors.code_processor import CodeHighlighter, HighlightedCode
from repo_pdf_service.processors.content_resolver import ContentResolver
from repo_pdf_service.processors.file_filter import FileFilter

__all__ = ["CodeHighlighter", "ContentResolver", "FileFilter", "HighlightedCode"]
