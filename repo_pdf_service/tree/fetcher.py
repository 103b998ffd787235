"""Directory listing access for the tree builder and README lookup."""

import logging
from typing import Any, Dict, List, Optional, Protocol

from repo_pdf_service.core.constants import README_MARKER
from repo_pdf_service.core.models import RepoEntry, RepoRef

logger = logging.getLogger(__name__)


class ContentsSource(Protocol):
    """Capability offered by the hosting API (GitHubClient satisfies it)."""

    def list_contents(self, repo: RepoRef, path: str = "") -> List[Dict[str, Any]]: ...

    def get_file_text(self, repo: RepoRef, path: str) -> str: ...


class RepositorySource(ContentsSource, Protocol):
    """Contents access plus repository metadata."""

    def get_repository(self, repo: RepoRef) -> Dict[str, Any]: ...


class TreeFetcher:
    """Lists the immediate children of a repository path."""

    def __init__(self, source: ContentsSource):
        self.source = source

    def list_children(self, repo: RepoRef, path: str = "") -> List[RepoEntry]:
        """
        List entries directly under ``path`` in the order GitHub returns them.

        Raises:
            GitHubAPIError: If the listing fails
        """
        entries = [RepoEntry.from_api(item) for item in self.source.list_contents(repo, path)]
        logger.debug(f"Listed {len(entries)} entries under {repo.owner}/{repo.repo}:/{path}")
        return entries

    @staticmethod
    def find_readme(entries: List[RepoEntry]) -> Optional[RepoEntry]:
        """Return the first file whose lower-cased name contains "readme"."""
        for entry in entries:
            if entry.type == "file" and README_MARKER in entry.name.lower():
                return entry
        return None
