"""Link targets for file sections."""

import hashlib
import re
from typing import Dict, Set

from repo_pdf_service.core.constants import (
    ANCHOR_HASH_LENGTH,
    ANCHOR_SUBSTITUTE,
    FILE_ANCHOR_PREFIX,
    README_ANCHOR,
    STRUCTURE_ANCHOR,
)

# Path separators and dots, plus anything pandoc would not accept in an identifier.
_UNSAFE_ANCHOR_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def file_anchor(path: str) -> str:
    """
    Derive the base anchor of a file path.

    Example:
        >>> file_anchor("src/app.main.js")
        'file-src-app-main-js'
    """
    return FILE_ANCHOR_PREFIX + _UNSAFE_ANCHOR_CHARS.sub(ANCHOR_SUBSTITUTE, path)


class AnchorRegistry:
    """
    Hands out file anchors for one document.

    The same path always gets the same anchor. A path whose base anchor is
    already held by a different path (``a/b.c`` vs ``a-b-c``) gets the base
    anchor suffixed with a short hash of the path instead.
    """

    def __init__(self) -> None:
        self._by_path: Dict[str, str] = {}
        self._taken: Set[str] = {README_ANCHOR, STRUCTURE_ANCHOR}

    def anchor_for(self, path: str) -> str:
        anchor = self._by_path.get(path)
        if anchor is not None:
            return anchor

        anchor = file_anchor(path)
        if anchor in self._taken:
            digest = hashlib.sha1(path.encode("utf-8")).hexdigest()
            length = ANCHOR_HASH_LENGTH
            candidate = f"{anchor}-{digest[:length]}"
            while candidate in self._taken and length < len(digest):
                length += 4
                candidate = f"{anchor}-{digest[:length]}"
            anchor = candidate

        self._by_path[path] = anchor
        self._taken.add(anchor)
        return anchor
