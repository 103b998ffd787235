"""GitHub API access."""

from repo_pdf_service.github.client import GitHubClient

__all__ = ["GitHubClient"]
