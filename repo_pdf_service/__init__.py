"""
repo_pdf_service - GitHub Repository to PDF Service
==================================================

Fetches a GitHub repository through the REST API and renders it as a PDF
with a cover page, linked table of contents, README, structure listing and
syntax-highlighted file sections.

Main Components:
    - core: Configuration, constants, models and exceptions
    - github: GitHub REST API client
    - tree: Depth-bounded tree fetching and traversal
    - processors: File selection, content resolution and highlighting
    - document: Section model, anchors and assembly
    - converters: Pandoc Markdown and LaTeX generation
    - service: FastAPI application and PDF delivery

Example:
    >>> from pathlib import Path
    >>> from repo_pdf_service import AppConfig, RepoPDFConverter
    >>> from repo_pdf_service.core.models import RenderOptions, RepoRef
    >>> from repo_pdf_service.github import GitHubClient
    >>>
    >>> config = AppConfig.from_yaml("config.yaml")
    >>> with GitHubClient(config.github) as client:
    ...     converter = RepoPDFConverter(config, client)
    ...     repo = RepoRef.from_url("https://github.com/octocat/Hello-World")
    ...     pdf_path = converter.generate(repo, RenderOptions(), Path("out"))
"""

__version__ = "1.0.0"

from repo_pdf_service.converter import RepoPDFConverter
from repo_pdf_service.core.config import AppConfig
from repo_pdf_service.core.exceptions import RepoPDFError

__all__ = [
    "AppConfig",
    "RepoPDFConverter",
    "RepoPDFError",
    "__version__",
]
