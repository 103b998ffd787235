"""File content fetching that never aborts document assembly."""

import logging

from repo_pdf_service.core.constants import FETCH_ERROR_PLACEHOLDER
from repo_pdf_service.core.exceptions import GitHubAPIError
from repo_pdf_service.core.models import RepoRef
from repo_pdf_service.tree.fetcher import ContentsSource

logger = logging.getLogger(__name__)


class ContentResolver:
    """Fetches decoded file text, substituting a placeholder on failure."""

    def __init__(self, source: ContentsSource):
        self.source = source

    def fetch(self, repo: RepoRef, path: str) -> str:
        """
        Fetch the text of ``path``.

        Args:
            repo: Repository holding the file
            path: Repository-relative file path

        Returns:
            Decoded text, or ``// Error fetching content for {path}: {message}``
            if the fetch failed
        """
        try:
            return self.source.get_file_text(repo, path)
        except (GitHubAPIError, KeyError, TypeError) as e:
            message = e.message if isinstance(e, GitHubAPIError) else str(e)
            logger.error(f"Error fetching content for {path}: {message}")
            return FETCH_ERROR_PLACEHOLDER.format(path=path, message=message)
