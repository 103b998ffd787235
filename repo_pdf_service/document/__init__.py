"""Document section model and assembly."""

from repo_pdf_service.document.anchors import AnchorRegistry, file_anchor
from repo_pdf_service.document.assembler import DocumentAssembler

__all__ = ["AnchorRegistry", "DocumentAssembler", "file_anchor"]
