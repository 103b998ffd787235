"""File selection policy for the table of contents and file sections."""

import logging
import math

from repo_pdf_service.core.constants import TOO_LARGE_PLACEHOLDER
from repo_pdf_service.core.models import FileNode, RenderOptions

logger = logging.getLogger(__name__)


class FileFilter:
    """
    Decides which files are listed and which file bodies are fetched.

    Two independent rules apply:

    - the extension rule selects files for the table of contents and the
      per-file sections (the structure listing ignores it);
    - the size rule, checked only for selected files, decides whether the
      body is fetched or replaced by a size placeholder.

    Directories are never filtered.
    """

    def __init__(self, options: RenderOptions):
        self.options = options
        self._extensions = frozenset(options.file_extensions)

    def included(self, file: FileNode) -> bool:
        """
        Check the extension allow-list.

        Args:
            file: File to check

        Returns:
            True if no allow-list is set or the file's extension is in it

        Example:
            >>> FileFilter(RenderOptions(fileExtensions=["js"])).included(FileNode("a.js", "a.js"))
            True
        """
        if not self._extensions:
            return True
        return file.extension in self._extensions

    def body_allowed(self, file: FileNode) -> bool:
        """Check the size ceiling."""
        allowed = file.size <= self.options.max_file_size
        if not allowed:
            logger.debug(
                f"Skipping content of {file.path}: {file.size} > {self.options.max_file_size} bytes"
            )
        return allowed

    @staticmethod
    def too_large_placeholder(file: FileNode) -> str:
        """Placeholder text noting the file size in kilobytes (rounded half up)."""
        size_kb = int(math.floor(file.size / 1024 + 0.5))
        return TOO_LARGE_PLACEHOLDER.format(size_kb=size_kb)
