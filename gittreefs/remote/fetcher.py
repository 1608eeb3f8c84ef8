"""
Remote object fetcher for the GitHub Git Data API.

One GET per call, JSON-decoded into a dict. No retries, no caching and no
rate-limit handling: callers own those policies. Any callable with the
signature ``fetch(url) -> dict`` can stand in for RemoteFetcher, which is how
the filesystem is exercised without network I/O.
"""

from typing import Any, Callable, Dict, Optional

import requests

from gittreefs.core.constants import (
    DEFAULT_ACCEPT_HEADER,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    EntryKind,
)
from gittreefs.core.exceptions import DecodeError, TransportError
from gittreefs.infrastructure.logger import Logger
from gittreefs.remote.models import Blob, Tree

# Signature of the fetch capability consumed by the filesystem
FetchFunc = Callable[[str], Dict[str, Any]]


def object_url(api_url: str, owner: str, repo: str, kind: EntryKind, name: str) -> str:
    """Build the API URL of a git object.

    Args:
        api_url: API base URL
        owner: Repository owner
        repo: Repository name
        kind: Object kind (tree or blob)
        name: Object SHA or, for trees, any revision GitHub resolves

    Returns:
        Object URL
    """
    return f"{api_url.rstrip('/')}/repos/{owner}/{repo}/git/{kind.value}s/{name}"


def tree_url(owner: str, repo: str, revision: str, api_url: str = DEFAULT_API_URL) -> str:
    """Build the URL of the root tree at revision."""
    return object_url(api_url, owner, repo, EntryKind.TREE, revision)


class RemoteFetcher:
    """Fetch and JSON-decode git objects over HTTP with requests."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
        accept: str = DEFAULT_ACCEPT_HEADER,
        session: Optional[requests.Session] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize fetcher.

        Args:
            api_url: API base URL (GitHub Enterprise installs differ)
            timeout: Per-request timeout in seconds, None for no timeout
            accept: Accept header sent with every request (a supplied
                session keeps an Accept header it already carries)
            session: Session to reuse (a new one is created and owned if None)
            logger: Logger (created if None)
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.owns_session = session is None
        if self.owns_session:
            self.session = requests.Session()
            self.session.headers["Accept"] = accept
        else:
            # Headers already on a caller's session take precedence
            self.session = session
            self.session.headers.setdefault("Accept", accept)
        self.logger = logger if logger is not None else Logger("gittreefs.remote")

    def __call__(self, url: str) -> Dict[str, Any]:
        return self.fetch(url)

    def fetch(self, url: str) -> Dict[str, Any]:
        """
        Issue one GET request and decode the JSON object body.

        Args:
            url: Object URL

        Returns:
            Decoded JSON object

        Raises:
            TransportError: On network failure or non-2xx status
            DecodeError: If the body is not a JSON object
        """
        self.logger.debug("Fetching remote object", url=url)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"request to {url} failed: {e}", url=url, cause=e) from e

        if not 200 <= response.status_code <= 299:
            raise TransportError(
                f"non-2XX status code from GitHub: {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"invalid JSON from {url}: {e}") from e

        if not isinstance(payload, dict):
            raise DecodeError(f"expected JSON object from {url}, got {type(payload).__name__}")

        return payload

    def fetch_tree(self, url: str) -> Tree:
        """Fetch and decode a tree object."""
        return Tree.from_json(self.fetch(url))

    def fetch_blob(self, url: str) -> Blob:
        """Fetch and decode a blob object."""
        return Blob.from_json(self.fetch(url))

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""
        if self.owns_session:
            self.session.close()
