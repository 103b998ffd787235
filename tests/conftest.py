"""Shared fixtures: an in-memory stand-in for the GitHub contents API."""

from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from repo_pdf_service.core.config import AppConfig
from repo_pdf_service.core.exceptions import GitHubAPIError
from repo_pdf_service.core.models import RepoRef


class FakeGitHub:
    """
    Serves listings and file bodies from a nested dict.

    Dict values that are dicts are directories; strings are file contents.
    ``sizes`` overrides reported file sizes, ``failing`` lists directory
    paths whose listing raises.
    """

    def __init__(
        self,
        layout: Dict[str, Any],
        repo_info: Optional[Dict[str, Any]] = None,
        sizes: Optional[Dict[str, int]] = None,
        failing: Iterable[str] = (),
        failing_files: Iterable[str] = (),
    ):
        self.listings: Dict[str, List[Dict[str, Any]]] = {}
        self.files: Dict[str, str] = {}
        self.sizes = sizes or {}
        self.failing = set(failing)
        self.failing_files = set(failing_files)
        self.calls: List[Tuple[str, str]] = []
        self.closed = False
        self.repo_info = repo_info or {
            "name": "demo",
            "owner": {"login": "octocat"},
            "description": "Demo repository",
            "stargazers_count": 7,
            "forks_count": 2,
        }
        self._index("", layout)

    def _index(self, prefix: str, layout: Dict[str, Any]) -> None:
        items = []
        for name, value in layout.items():
            path = f"{prefix}/{name}" if prefix else name
            if isinstance(value, dict):
                items.append({"name": name, "path": path, "type": "dir", "size": 0})
                self._index(path, value)
            else:
                self.files[path] = value
                items.append(
                    {
                        "name": name,
                        "path": path,
                        "type": "file",
                        "size": self.sizes.get(path, len(value.encode("utf-8"))),
                        "download_url": f"https://raw.example/{path}",
                    }
                )
        self.listings[prefix] = items

    def get_repository(self, repo: RepoRef) -> Dict[str, Any]:
        self.calls.append(("repo", f"{repo.owner}/{repo.repo}"))
        return self.repo_info

    def list_contents(self, repo: RepoRef, path: str = "") -> List[Dict[str, Any]]:
        self.calls.append(("list", path))
        if path in self.failing or path not in self.listings:
            raise GitHubAPIError("GitHub API returned 404: Not Found", status_code=404)
        return list(self.listings[path])

    def get_file_text(self, repo: RepoRef, path: str) -> str:
        self.calls.append(("file", path))
        if path in self.failing_files or path not in self.files:
            raise GitHubAPIError("GitHub API returned 404: Not Found", status_code=404)
        return self.files[path]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeGitHub":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def fetched_files(self) -> List[str]:
        return [path for kind, path in self.calls if kind == "file"]

    def listed_paths(self) -> List[str]:
        return [path for kind, path in self.calls if kind == "list"]


SAMPLE_LAYOUT = {
    "README.md": "Hello",
    "src": {"a.js": "console.log('a');"},
    "b.py": "print('b')",
}


@pytest.fixture
def repo():
    return RepoRef("octocat", "demo")


@pytest.fixture
def sample_github():
    return FakeGitHub(SAMPLE_LAYOUT)


@pytest.fixture
def app_config(tmp_path):
    config = AppConfig(workspace_dir=str(tmp_path / "workspace"))
    config._project_root = tmp_path
    return config


@pytest.fixture
def fake_github():
    """Factory for FakeGitHub instances with a custom layout."""
    return FakeGitHub
