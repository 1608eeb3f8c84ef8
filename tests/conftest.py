"""Shared pytest fixtures for GitTreeFS tests."""
import base64
import copy
import threading
from pathlib import Path
from typing import Any, Dict, Generator, List
import tempfile

import pytest
import yaml

from gittreefs.core.exceptions import TransportError
from gittreefs.fs.filesystem import GitTreeFS

API = "https://api.github.com/repos/octocat/demo/git"

ROOT_URL = f"{API}/trees/main"  # revision URL the filesystem starts from
ROOT_TREE_URL = f"{API}/trees/aaa0"  # canonical URL reported by the root tree
SRC_URL = f"{API}/trees/bbb1"
LIB_URL = f"{API}/trees/ccc2"
README_URL = f"{API}/blobs/ddd3"
RUN_URL = f"{API}/blobs/eee4"
MAIN_URL = f"{API}/blobs/fff5"
UTIL_URL = f"{API}/blobs/aaa6"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def tree_payload(url: str, entries: List[Dict[str, Any]], sha: str = "") -> Dict[str, Any]:
    return {"sha": sha or url.rsplit("/", 1)[-1], "url": url, "tree": entries, "truncated": False}


def blob_entry(name: str, url: str, size: int, mode: str = "100644") -> Dict[str, Any]:
    return {"path": name, "mode": mode, "type": "blob", "size": size, "url": url}


def tree_entry(name: str, url: str) -> Dict[str, Any]:
    return {"path": name, "mode": "040000", "type": "tree", "url": url}


def repository_objects() -> Dict[str, Dict[str, Any]]:
    """Payloads of a small repository keyed by URL.

    Layout:
        README.md         "hello"
        run.sh            executable
        src/main.py
        src/lib/util.py   utf-8 encoded blob
        vendor            submodule (type "commit")
    """
    root = tree_payload(
        ROOT_TREE_URL,
        [
            blob_entry("README.md", README_URL, 5),
            blob_entry("run.sh", RUN_URL, 8, mode="100755"),
            tree_entry("src", SRC_URL),
            {"path": "vendor", "mode": "160000", "type": "commit", "sha": "9" * 40},
        ],
    )
    return {
        ROOT_URL: root,
        ROOT_TREE_URL: root,
        SRC_URL: tree_payload(
            SRC_URL,
            [
                tree_entry("lib", LIB_URL),
                blob_entry("main.py", MAIN_URL, 9),
            ],
        ),
        LIB_URL: tree_payload(LIB_URL, [blob_entry("util.py", UTIL_URL, 6)]),
        README_URL: {"sha": "ddd3", "url": README_URL, "content": b64(b"hello"), "encoding": "base64"},
        RUN_URL: {"sha": "eee4", "url": RUN_URL, "content": b64(b"echo hi\n"), "encoding": "base64"},
        MAIN_URL: {"sha": "fff5", "url": MAIN_URL, "content": b64(b"print(1)\n") + "\n"},
        UTIL_URL: {"sha": "aaa6", "url": UTIL_URL, "content": "x = 1\n", "encoding": "utf-8"},
    }


class StubFetcher:
    """In-memory fetch capability recording every requested URL."""

    def __init__(self, objects: Dict[str, Dict[str, Any]]):
        self.objects = objects
        self.calls: List[str] = []
        self.failures: Dict[str, int] = {}
        self._lock = threading.Lock()

    def fail(self, url: str, times: int = 1, status_code: int = 502) -> None:
        """Make the next `times` requests for url fail with status_code."""
        self.failures[url] = times
        self.status_code = status_code

    def __call__(self, url: str) -> Dict[str, Any]:
        with self._lock:
            self.calls.append(url)
            if self.failures.get(url, 0) > 0:
                self.failures[url] -= 1
                raise TransportError(
                    f"non-2XX status code from GitHub: {self.status_code}",
                    url=url,
                    status_code=self.status_code,
                )
        if url not in self.objects:
            raise TransportError("non-2XX status code from GitHub: 404", url=url, status_code=404)
        return copy.deepcopy(self.objects[url])

    def count(self, url: str) -> int:
        return self.calls.count(url)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def objects() -> Dict[str, Dict[str, Any]]:
    return repository_objects()


@pytest.fixture
def fetcher(objects) -> StubFetcher:
    return StubFetcher(objects)


@pytest.fixture
def fs(fetcher) -> GitTreeFS:
    """Filesystem over the stub repository."""
    return GitTreeFS("octocat", "demo", "main", fetcher=fetcher)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample GitTreeFS configuration."""
    return {
        "gittreefs": {
            "api": {
                "url": "https://github.example.com/api/v3",
                "timeout_seconds": 5,
            },
            "listing": {"use_cache": True},
            "logging": {"level": "DEBUG"},
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "gittreefs.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path
