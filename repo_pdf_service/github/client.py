"""
GitHub REST API access.

This module wraps the handful of GitHub endpoints the service needs
(repository metadata, directory listings, file contents) behind a small
client with consistent error handling. Every failure is raised as a
GitHubAPIError; callers decide whether to swallow it.
"""

import base64
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from repo_pdf_service.core.config import GitHubSettings
from repo_pdf_service.core.constants import GITHUB_ACCEPT_HEADER, USER_AGENT
from repo_pdf_service.core.exceptions import GitHubAPIError
from repo_pdf_service.core.models import RepoRef

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Thin client over the GitHub contents and repository endpoints.

    The client holds a ``requests.Session`` and can be used as a context
    manager to close it.

    Example:
        >>> with GitHubClient(GitHubSettings(token="ghp_...")) as client:
        ...     entries = client.list_contents(RepoRef("octocat", "Hello-World"))
    """

    def __init__(
        self, settings: Optional[GitHubSettings] = None, session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            settings: API URL, token and timeout
            session: Preconfigured session (a new one is created if omitted)
        """
        self.settings = settings or GitHubSettings()
        self.session = session or requests.Session()
        self.session.headers.update(self._build_headers(self.settings.token))

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    @staticmethod
    def _build_headers(token: Optional[str]) -> Dict[str, str]:
        headers = {"Accept": GITHUB_ACCEPT_HEADER, "User-Agent": USER_AGENT}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def close(self) -> None:
        self.session.close()

    def _get(self, url: str) -> requests.Response:
        """
        Perform a GET and raise GitHubAPIError on any non-2xx or network error.
        """
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.settings.timeout)
        except requests.RequestException as e:
            raise GitHubAPIError(f"Request to GitHub failed: {url}", str(e))

        if not response.ok:
            message = response.reason or "error"
            try:
                message = response.json().get("message", message)
            except ValueError:
                pass
            raise GitHubAPIError(
                f"GitHub API returned {response.status_code}: {message}",
                details=url,
                status_code=response.status_code,
            )

        return response

    def _get_json(self, url: str) -> Any:
        response = self._get(url)
        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Invalid JSON from GitHub: {url}", str(e))

    def _contents_url(self, repo: RepoRef, path: str) -> str:
        quoted = quote(path.strip("/"), safe="/")
        return f"{self.settings.api_url}/repos/{repo.owner}/{repo.repo}/contents/{quoted}"

    def get_repository(self, repo: RepoRef) -> Dict[str, Any]:
        """Return the repository object (name, owner, description, counts)."""
        return self._get_json(f"{self.settings.api_url}/repos/{repo.owner}/{repo.repo}")

    def list_contents(self, repo: RepoRef, path: str = "") -> List[Dict[str, Any]]:
        """
        List the immediate children of a directory.

        Raises:
            GitHubAPIError: If the call fails or ``path`` is not a directory
        """
        data = self._get_json(self._contents_url(repo, path))
        if not isinstance(data, list):
            kind = data.get("type") if isinstance(data, dict) else type(data).__name__
            raise GitHubAPIError(f"Not a directory: {path or '/'}", details=f"type: {kind}")
        return data

    def get_file(self, repo: RepoRef, path: str) -> Dict[str, Any]:
        """
        Get a file object from the contents endpoint.

        Raises:
            GitHubAPIError: If the call fails or ``path`` is a directory
        """
        data = self._get_json(self._contents_url(repo, path))
        if not isinstance(data, dict):
            raise GitHubAPIError(f"Not a file: {path}")
        return data

    def get_file_text(self, repo: RepoRef, path: str) -> str:
        """
        Fetch and decode a file's text.

        Inline base64 content is decoded directly. Files larger than the
        contents API inline limit come back with ``encoding: "none"``; for
        those the ``download_url`` is fetched instead.
        """
        data = self.get_file(repo, path)

        if data.get("encoding") == "base64" and data.get("content") is not None:
            try:
                raw = base64.b64decode(data["content"])
            except (ValueError, TypeError) as e:
                raise GitHubAPIError(f"Could not decode content of {path}", str(e))
            return raw.decode("utf-8", errors="replace")

        download_url = data.get("download_url")
        if download_url:
            return self.download_text(download_url)

        raise GitHubAPIError(f"No content available for {path}")

    def download_text(self, url: str) -> str:
        """Fetch a raw file URL as text."""
        response = self._get(url)
        return response.content.decode("utf-8", errors="replace")
