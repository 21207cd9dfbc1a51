"""Tests for the linkding HTTP client using ``httpx.MockTransport``."""

from __future__ import annotations

import json

import httpx
import pytest

from bookmark_sync.adapters.linkding import LinkdingClient, RemoteBookmark
from bookmark_sync.domain.exceptions import RemoteServiceError


def _client(handler, base_url: str = "http://linkding.test", **kwargs) -> LinkdingClient:
    return LinkdingClient(
        base_url, "secret-token", transport=httpx.MockTransport(handler), **kwargs
    )


def _created(request: httpx.Request, remote_id: int = 42) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(201, json={"id": remote_id, **body})


# ---------------------------------------------------------------------------
# count_by_tag
# ---------------------------------------------------------------------------


def test_count_by_tag_sends_hash_search_with_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"count": 3, "next": None, "previous": None, "results": []})

    with _client(handler) as client:
        assert client.count_by_tag("reading") == 3

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/bookmarks/"
    assert request.url.params["q"] == "#reading"
    assert "q=%23reading" in str(request.url)
    assert request.headers["Authorization"] == "Token secret-token"


def test_count_by_tag_zero():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"count": 0, "results": []})

    with _client(handler) as client:
        assert client.count_by_tag("empty") == 0


def test_count_by_tag_http_error_carries_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with _client(handler) as client, pytest.raises(RemoteServiceError) as exc_info:
        client.count_by_tag("reading")

    assert exc_info.value.status_code == 500
    assert exc_info.value.details["body"] == "boom"


def test_count_by_tag_unauthorized():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"detail": "Invalid token."})

    with _client(handler) as client, pytest.raises(RemoteServiceError) as exc_info:
        client.count_by_tag("reading")

    assert exc_info.value.status_code == 401


def test_count_by_tag_undecodable_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with _client(handler) as client, pytest.raises(RemoteServiceError):
        client.count_by_tag("reading")


def test_count_by_tag_missing_count_is_an_error():
    """An unknown remote state must never be read as an empty tag."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": []})

    with _client(handler) as client, pytest.raises(RemoteServiceError):
        client.count_by_tag("reading")


def test_count_by_tag_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client, pytest.raises(RemoteServiceError) as exc_info:
        client.count_by_tag("reading")

    assert exc_info.value.status_code is None


def test_base_url_path_prefix_is_kept():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"count": 0})

    with _client(handler, base_url="http://host.test/linkding/") as client:
        client.count_by_tag("reading")

    assert seen[0].url.path == "/linkding/api/bookmarks/"


# ---------------------------------------------------------------------------
# create_bookmark
# ---------------------------------------------------------------------------


def test_create_bookmark_posts_payload_and_returns_id():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _created(request)

    bookmark = RemoteBookmark(
        url="https://example.com",
        title="Example",
        description="[2023-01-01] Example",
        notes="a1\n\nnotes",
        unread=True,
        tag_names=frozenset({"reading"}),
    )

    with _client(handler) as client:
        assert client.create_bookmark(bookmark) == 42

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/api/bookmarks/"
    assert request.headers["Authorization"] == "Token secret-token"
    assert json.loads(request.content) == {
        "url": "https://example.com",
        "title": "Example",
        "description": "[2023-01-01] Example",
        "notes": "a1\n\nnotes",
        "is_archived": False,
        "unread": True,
        "shared": False,
        "tag_names": ["reading"],
    }


def test_create_bookmark_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"url": ["This field is required."]})

    with _client(handler) as client, pytest.raises(RemoteServiceError) as exc_info:
        client.create_bookmark(RemoteBookmark(url=""))

    assert exc_info.value.status_code == 400


def test_create_bookmark_response_without_id():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"url": "https://example.com"})

    with _client(handler) as client, pytest.raises(RemoteServiceError):
        client.create_bookmark(RemoteBookmark(url="https://example.com"))


# ---------------------------------------------------------------------------
# Lifecycle and timeouts
# ---------------------------------------------------------------------------


def test_client_must_be_opened():
    client = LinkdingClient("http://linkding.test", "secret-token")

    with pytest.raises(RemoteServiceError):
        client.count_by_tag("reading")


def test_close_is_idempotent():
    client = _client(lambda request: httpx.Response(200, json={"count": 0}))
    client.open()
    client.close()
    client.close()

    with pytest.raises(RemoteServiceError):
        client.count_by_tag("reading")


def test_endpoint_timeouts():
    client = LinkdingClient(
        "http://linkding.test/",
        "secret-token",
        timeout=12.0,
        endpoint_timeouts={"create_bookmark": 60.0},
    )

    assert client.base_url == "http://linkding.test"
    assert client.get_timeout("count_by_tag") == 12.0
    assert client.get_timeout("create_bookmark") == 60.0
    assert client.get_timeout("unknown") == 12.0
