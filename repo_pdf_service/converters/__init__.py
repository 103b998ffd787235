"""Pandoc Markdown and LaTeX rendering helpers."""

from repo_pdf_service.converters.latex_generator import LaTeXGenerator
from repo_pdf_service.converters.markdown_writer import MarkdownDocumentWriter

__all__ = ["LaTeXGenerator", "MarkdownDocumentWriter"]
