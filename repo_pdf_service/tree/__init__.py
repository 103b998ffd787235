"""Repository tree fetching and traversal."""

from repo_pdf_service.tree.builder import TreeBuilder, walk
from repo_pdf_service.tree.fetcher import ContentsSource, RepositorySource, TreeFetcher

__all__ = ["ContentsSource", "RepositorySource", "TreeBuilder", "TreeFetcher", "walk"]
