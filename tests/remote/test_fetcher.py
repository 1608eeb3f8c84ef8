"""Tests for RemoteFetcher with a mocked requests session."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import b64
from gittreefs.core.constants import EntryKind
from gittreefs.core.exceptions import DecodeError, TransportError
from gittreefs.remote.fetcher import RemoteFetcher, object_url, tree_url


def make_response(status_code=200, payload=None, json_error=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def remote(session):
    return RemoteFetcher(timeout=7, session=session)


class TestUrls:
    """Tests for URL builders."""

    def test_tree_url(self):
        assert tree_url("octocat", "demo", "main") == (
            "https://api.github.com/repos/octocat/demo/git/trees/main"
        )

    def test_object_url_strips_trailing_slash(self):
        url = object_url("https://ghe.example.com/api/v3/", "o", "r", EntryKind.BLOB, "abc")
        assert url == "https://ghe.example.com/api/v3/repos/o/r/git/blobs/abc"


class TestRemoteFetcher:
    """Tests for RemoteFetcher.fetch()."""

    def test_sets_accept_header(self, remote, session):
        assert session.headers["Accept"] == "application/vnd.github+json"

    def test_keeps_existing_accept_header(self, session):
        session.headers["Accept"] = "application/json"
        RemoteFetcher(session=session)
        assert session.headers["Accept"] == "application/json"

    def test_fetch_returns_json_object(self, remote, session):
        session.get.return_value = make_response(payload={"sha": "s"})

        assert remote.fetch("https://x/trees/s") == {"sha": "s"}
        session.get.assert_called_once_with("https://x/trees/s", timeout=7)

    def test_callable(self, remote, session):
        session.get.return_value = make_response(payload={"sha": "s"})
        assert remote("https://x") == {"sha": "s"}

    @pytest.mark.parametrize("status", [301, 403, 404, 500])
    def test_non_2xx_status(self, remote, session, status):
        session.get.return_value = make_response(status_code=status)

        with pytest.raises(TransportError) as exc_info:
            remote.fetch("https://x")
        assert exc_info.value.status_code == status
        assert exc_info.value.url == "https://x"
        assert str(status) in str(exc_info.value)

    def test_accepts_any_2xx(self, remote, session):
        session.get.return_value = make_response(status_code=203, payload={})
        assert remote.fetch("https://x") == {}

    def test_network_failure(self, remote, session):
        cause = requests.ConnectionError("connection refused")
        session.get.side_effect = cause

        with pytest.raises(TransportError) as exc_info:
            remote.fetch("https://x")
        assert exc_info.value.status_code is None
        assert exc_info.value.cause is cause

    def test_invalid_json(self, remote, session):
        session.get.return_value = make_response(json_error=ValueError("Expecting value"))
        with pytest.raises(DecodeError):
            remote.fetch("https://x")

    def test_json_not_an_object(self, remote, session):
        session.get.return_value = make_response(payload=[1, 2])
        with pytest.raises(DecodeError):
            remote.fetch("https://x")

    def test_fetch_tree(self, remote, session):
        session.get.return_value = make_response(
            payload={
                "sha": "t",
                "url": "https://x/trees/t",
                "tree": [{"path": "a", "mode": "100644", "type": "blob", "size": 1, "url": "u"}],
            }
        )
        tree = remote.fetch_tree("https://x/trees/t")
        assert tree.entries[0].path == "a"

    def test_fetch_blob(self, remote, session):
        session.get.return_value = make_response(
            payload={"sha": "b", "url": "u", "content": b64(b"data"), "encoding": "base64"}
        )
        assert remote.fetch_blob("u").content == b"data"

    def test_fetch_tree_malformed(self, remote, session):
        session.get.return_value = make_response(payload={"sha": "t"})
        with pytest.raises(DecodeError):
            remote.fetch_tree("u")

    def test_close_leaves_supplied_session_open(self, remote, session):
        remote.close()
        session.close.assert_not_called()

    def test_default_session(self):
        fetcher = RemoteFetcher()
        assert isinstance(fetcher.session, requests.Session)
        assert fetcher.owns_session
        assert fetcher.api_url == "https://api.github.com"
        fetcher.close()

    def test_default_session_sends_configured_accept(self):
        fetcher = RemoteFetcher(accept="application/vnd.github.raw+json")
        try:
            assert fetcher.session.headers["Accept"] == "application/vnd.github.raw+json"
        finally:
            fetcher.close()

    def test_default_session_replaces_requests_accept(self):
        fetcher = RemoteFetcher()
        try:
            assert fetcher.session.headers["Accept"] == "application/vnd.github+json"
        finally:
            fetcher.close()

    def test_real_session_keeps_its_accept_header(self):
        session = requests.Session()
        try:
            RemoteFetcher(session=session)
            assert session.headers["Accept"] == "*/*"
        finally:
            session.close()

    def test_close_owned_session(self):
        fetcher = RemoteFetcher()
        with patch.object(fetcher.session, "close") as close:
            fetcher.close()
        close.assert_called_once()
