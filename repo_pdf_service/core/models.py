"""
Data models shared by the fetch, assembly and service layers.

Tree nodes and repository metadata are plain dataclasses built once per
request. Render options arrive over the wire and are validated with Pydantic.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from repo_pdf_service.core.constants import DEFAULT_MAX_DEPTH, DEFAULT_MAX_FILE_SIZE
from repo_pdf_service.core.exceptions import InvalidRepositoryURLError

GITHUB_URL_PATTERN = re.compile(r"github\.com/([^/\s]+)/([^/\s?#]+)")


@dataclass(frozen=True)
class RepoRef:
    """
    Owner/name pair identifying a GitHub repository.

    Example:
        >>> RepoRef.from_url("https://github.com/octocat/Hello-World")
        RepoRef(owner='octocat', repo='Hello-World')
    """

    owner: str
    repo: str

    @classmethod
    def from_url(cls, url: Any) -> "RepoRef":
        """
        Parse a string containing ``github.com/{owner}/{repo}``.

        A trailing ``.git`` is dropped from the repository name.

        Raises:
            InvalidRepositoryURLError: If the URL does not match
        """
        if not isinstance(url, str):
            raise InvalidRepositoryURLError("Invalid GitHub repository URL", repr(url))

        match = GITHUB_URL_PATTERN.search(url)
        if not match:
            raise InvalidRepositoryURLError("Invalid GitHub repository URL", url)

        owner, repo = match.group(1), match.group(2)
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        if not repo:
            raise InvalidRepositoryURLError("Invalid GitHub repository URL", url)

        return cls(owner=owner, repo=repo)

    def to_dict(self) -> Dict[str, str]:
        return {"owner": self.owner, "repo": self.repo}


@dataclass(frozen=True)
class RepoEntry:
    """One item of a GitHub directory listing (immediate child only)."""

    name: str
    path: str
    type: str
    size: int = 0
    download_url: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "RepoEntry":
        return cls(
            name=item["name"],
            path=item["path"],
            type=item.get("type", "file"),
            size=item.get("size") or 0,
            download_url=item.get("download_url"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": self.type,
            "size": self.size,
            "download_url": self.download_url,
        }


@dataclass
class FileNode:
    """Leaf of the repository tree."""

    name: str
    path: str
    size: int = 0
    download_url: Optional[str] = None

    @property
    def extension(self) -> str:
        """
        Extension without the leading dot.

        Follows ``os.path.splitext``: ``a.tar.gz`` -> ``gz``, ``Makefile`` and
        ``.gitignore`` -> ``""``.
        """
        stem = self.name.lstrip(".")
        if "." not in stem:
            return ""
        return stem.rsplit(".", 1)[1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": "file",
            "size": self.size,
            "download_url": self.download_url,
        }


@dataclass
class DirectoryNode:
    """
    Inner node of the repository tree.

    Attributes:
        name: Directory name
        path: Repository-relative path
        children: Child nodes in the order GitHub listed them
        fetch_failed: True when listing this directory failed; children is
            then empty but the directory itself may not be
    """

    name: str
    path: str
    children: List["TreeNode"] = field(default_factory=list)
    fetch_failed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": "dir",
            "children": [child.to_dict() for child in self.children],
            "fetch_failed": self.fetch_failed,
        }


TreeNode = Union[FileNode, DirectoryNode]


@dataclass(frozen=True)
class RepoMetadata:
    """Repository facts printed on the cover page."""

    name: str
    owner_login: str
    description: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RepoMetadata":
        return cls(
            name=data["name"],
            owner_login=(data.get("owner") or {}).get("login", ""),
            description=data.get("description") or None,
            stargazers_count=data.get("stargazers_count") or 0,
            forks_count=data.get("forks_count") or 0,
        )


@dataclass(frozen=True)
class Readme:
    """Decoded README file."""

    name: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"content": self.content, "name": self.name}


class RenderOptions(BaseModel):
    """
    Per-request document options.

    Accepts the camelCase names used on the wire as well as snake_case.

    Attributes:
        include_readme: Add the README section
        include_structure: Add the repository structure section
        include_files: Add one section per file
        file_extensions: Extensions to include (without dot); empty means all
        max_depth: Deepest directory level fetched (root level is 0)
        max_file_size: Largest file (bytes) whose content is included
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    include_readme: bool = Field(default=True, alias="includeReadme")
    include_structure: bool = Field(default=True, alias="includeStructure")
    include_files: bool = Field(default=True, alias="includeFiles")
    file_extensions: List[str] = Field(default_factory=list, alias="fileExtensions")
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0, alias="maxDepth")
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0, alias="maxFileSize")

    @field_validator("file_extensions")
    @classmethod
    def normalize_extensions(cls, v: List[str]) -> List[str]:
        """Strip whitespace and a leading dot; drop empties and duplicates."""
        out: List[str] = []
        for ext in v:
            ext = ext.strip()
            if ext.startswith("."):
                ext = ext[1:]
            if ext and ext not in out:
                out.append(ext)
        return out
