"""Depth-bounded repository tree construction."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from repo_pdf_service.core.exceptions import GitHubAPIError
from repo_pdf_service.core.models import DirectoryNode, FileNode, RepoRef, TreeNode
from repo_pdf_service.tree.fetcher import TreeFetcher

logger = logging.getLogger(__name__)


@dataclass
class _PendingListing:
    """A directory whose children still have to be fetched."""

    path: str
    depth: int
    target: List[TreeNode]
    owner: Optional[DirectoryNode] = None


class TreeBuilder:
    """
    Builds the in-memory repository tree from directory listings.

    The walk uses an explicit work-list instead of recursion. Listings are
    fetched one at a time in pre-order by default; with ``max_workers > 1``
    each level of pending directories is fetched through a bounded thread
    pool. Either way every directory's children keep the order GitHub
    returned them in, so the resulting tree is identical.

    A listing that fails leaves its directory with no children and
    ``fetch_failed`` set; siblings are still processed.
    """

    def __init__(self, fetcher: TreeFetcher, max_workers: int = 1):
        """
        Initialize the tree builder.

        Args:
            fetcher: Source of directory listings
            max_workers: Concurrent listings per level (1 = sequential)
        """
        self.fetcher = fetcher
        self.max_workers = max(1, max_workers)

    def build(
        self, repo: RepoRef, path: str = "", depth: int = 0, max_depth: int = 3
    ) -> List[TreeNode]:
        """
        Build the tree below ``path``.

        Args:
            repo: Repository to walk
            path: Starting directory ("" for the root)
            depth: Depth of the entries listed at ``path`` (root level is 0)
            max_depth: Deepest level whose entries are included

        Returns:
            Ordered list of nodes at ``path``; empty when ``depth > max_depth``
            or when the listing failed
        """
        roots: List[TreeNode] = []
        if depth > max_depth:
            return roots

        pending = [_PendingListing(path=path, depth=depth, target=roots)]

        if self.max_workers == 1:
            while pending:
                listing = pending.pop()
                # Reversed so the next pop is the first subdirectory (pre-order).
                pending.extend(reversed(self._expand(repo, listing, max_depth)))
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                while pending:
                    level = pending
                    pending = []
                    for found in pool.map(lambda item: self._expand(repo, item, max_depth), level):
                        pending.extend(found)

        return roots

    def _expand(
        self, repo: RepoRef, listing: _PendingListing, max_depth: int
    ) -> List[_PendingListing]:
        """Fetch one listing, fill its target list and return new subdirectory work."""
        try:
            entries = self.fetcher.list_children(repo, listing.path)
        except (GitHubAPIError, KeyError, TypeError) as e:
            logger.error(f"Error fetching contents for {listing.path or '/'}: {e}")
            if listing.owner is not None:
                listing.owner.fetch_failed = True
            return []

        subdirectories: List[_PendingListing] = []
        for entry in entries:
            if entry.type == "file":
                listing.target.append(
                    FileNode(
                        name=entry.name,
                        path=entry.path,
                        size=entry.size,
                        download_url=entry.download_url,
                    )
                )
            elif entry.type == "dir":
                directory = DirectoryNode(name=entry.name, path=entry.path)
                listing.target.append(directory)
                if listing.depth + 1 <= max_depth:
                    subdirectories.append(
                        _PendingListing(
                            path=entry.path,
                            depth=listing.depth + 1,
                            target=directory.children,
                            owner=directory,
                        )
                    )
            else:
                logger.debug(f"Skipping {entry.type} entry: {entry.path}")

        return subdirectories


def walk(nodes: List[TreeNode], depth: int = 0) -> Iterator[Tuple[TreeNode, int]]:
    """
    Yield ``(node, depth)`` pairs in pre-order.

    Parents come before their children and children keep their listing
    order. Uses an explicit stack, so arbitrarily deep trees are safe.
    """
    stack: List[Tuple[TreeNode, int]] = [(node, depth) for node in reversed(nodes)]
    while stack:
        node, level = stack.pop()
        yield node, level
        if isinstance(node, DirectoryNode):
            stack.extend((child, level + 1) for child in reversed(node.children))
