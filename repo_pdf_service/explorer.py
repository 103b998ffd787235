"""Repository listings served by the structure endpoints and used for PDFs."""

import logging
from typing import List, Optional, Tuple

from repo_pdf_service.core.exceptions import GitHubAPIError
from repo_pdf_service.core.models import Readme, RepoEntry, RepoRef, TreeNode
from repo_pdf_service.processors.content_resolver import ContentResolver
from repo_pdf_service.tree.builder import TreeBuilder
from repo_pdf_service.tree.fetcher import ContentsSource, TreeFetcher

logger = logging.getLogger(__name__)


class RepositoryExplorer:
    """
    Combines the tree fetcher, tree builder and content resolver.

    Example:
        >>> explorer = RepositoryExplorer(GitHubClient())
        >>> entries, readme = explorer.root_structure(RepoRef("octocat", "Hello-World"))
    """

    def __init__(self, source: ContentsSource, max_workers: int = 1):
        self.fetcher = TreeFetcher(source)
        self.builder = TreeBuilder(self.fetcher, max_workers=max_workers)
        self.resolver = ContentResolver(source)

    def root_structure(self, repo: RepoRef) -> Tuple[List[RepoEntry], Optional[Readme]]:
        """
        List the repository root and decode its README.

        Raises:
            GitHubAPIError: If the root listing fails
        """
        entries = self.fetcher.list_children(repo, "")
        return entries, self._read_readme(repo, entries)

    def full_structure(self, repo: RepoRef, max_depth: int) -> List[TreeNode]:
        """Depth-bounded tree; failed listings become empty directories."""
        return self.builder.build(repo, "", 0, max_depth)

    def load_readme(self, repo: RepoRef) -> Optional[Readme]:
        """Find and decode the README, returning None if the root cannot be listed."""
        try:
            entries = self.fetcher.list_children(repo, "")
        except GitHubAPIError as e:
            logger.error(f"Error finding README: {e.message}")
            return None
        return self._read_readme(repo, entries)

    def _read_readme(self, repo: RepoRef, entries: List[RepoEntry]) -> Optional[Readme]:
        entry = TreeFetcher.find_readme(entries)
        if entry is None:
            logger.debug(f"No README in {repo.owner}/{repo.repo}")
            return None
        return Readme(name=entry.name, content=self.resolver.fetch(repo, entry.path))
