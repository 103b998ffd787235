"""
Document sections emitted by the assembler.

Sections are produced in a fixed order and consumed in that order by a
writer; nothing is re-ordered after emission.
"""

from dataclasses import dataclass
from typing import Optional, Union

from repo_pdf_service.core.constants import (
    README_ANCHOR,
    README_TITLE,
    STRUCTURE_ANCHOR,
    STRUCTURE_TITLE,
    TOC_TITLE,
)


@dataclass(frozen=True)
class Cover:
    title: str
    subtitle: str
    description: Optional[str]
    stats: str
    generated_on: str


@dataclass(frozen=True)
class TableOfContentsHeader:
    title: str = TOC_TITLE


@dataclass(frozen=True)
class TableOfContentsEntry:
    """
    One table of contents line.

    Directory lines have no ``target_anchor``; file and section lines link to
    the anchor of their section.
    """

    label: str
    target_anchor: Optional[str] = None
    indent_level: int = 0
    is_directory: bool = False


@dataclass(frozen=True)
class ReadmeSection:
    name: str
    content: str
    title: str = README_TITLE
    anchor: str = README_ANCHOR


@dataclass(frozen=True)
class StructureHeader:
    title: str = STRUCTURE_TITLE
    anchor: str = STRUCTURE_ANCHOR


@dataclass(frozen=True)
class StructureEntry:
    name: str
    label: str
    indent_level: int = 0
    is_directory: bool = False


@dataclass(frozen=True)
class FileSection:
    """
    Full-page section for one file.

    Exactly one of ``body`` and ``placeholder`` is set. ``language`` is the
    highlighting language of ``body`` (None for plain text).
    """

    path: str
    anchor: str
    body: Optional[str] = None
    language: Optional[str] = None
    placeholder: Optional[str] = None


DocumentSection = Union[
    Cover,
    TableOfContentsHeader,
    TableOfContentsEntry,
    ReadmeSection,
    StructureHeader,
    StructureEntry,
    FileSection,
]
