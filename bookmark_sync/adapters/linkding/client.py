"""linkding API client.

Every call is a fresh authenticated request: no caching, no rate limiting and
no retries. Failures of any kind are raised as ``RemoteServiceError`` so that an
unknown remote state is never mistaken for an empty one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from bookmark_sync.adapters.linkding.models import (
    LinkdingCreatedBookmark,
    LinkdingTagSearch,
    RemoteBookmark,
)
from bookmark_sync.domain.exceptions import RemoteServiceError

if TYPE_CHECKING:
    from typing import Self

logger = logging.getLogger(__name__)

BOOKMARKS_PATH = "/api/bookmarks/"


class LinkdingClient:
    """HTTP client for the linkding bookmarks API."""

    ENDPOINTS: tuple[str, ...] = ("count_by_tag", "create_bookmark")

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        *,
        endpoint_timeouts: dict[str, float] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize linkding client.

        Args:
            base_url: Service root, e.g. ``http://localhost:9090``
            api_key: REST API token, sent as ``Authorization: Token <key>``
            timeout: Default request timeout in seconds
            endpoint_timeouts: Custom per-endpoint timeouts (overrides defaults)
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.endpoint_timeouts = {endpoint: timeout for endpoint in self.ENDPOINTS}
        if endpoint_timeouts:
            self.endpoint_timeouts.update(endpoint_timeouts)
        self._transport = transport
        self._client: httpx.Client | None = None

    def get_timeout(self, endpoint: str) -> float:
        return self.endpoint_timeouts.get(endpoint, self.timeout)

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def open(self) -> None:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Token {self.api_key}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
                transport=self._transport,
            )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def client(self) -> httpx.Client:
        """Get the HTTP client."""
        if self._client is None:
            raise RemoteServiceError("Client not initialized. Use the context manager.")
        return self._client

    def _request(self, method: str, operation: str, **kwargs: Any) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            RemoteServiceError: On transport failure, non-2xx status or a body
                that is not JSON.
        """
        try:
            response = self.client.request(
                method, BOOKMARKS_PATH, timeout=self.get_timeout(operation), **kwargs
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "linkding_transport_error",
                extra={"operation": operation, "error": str(exc)},
            )
            msg = f"{operation} failed: {exc}"
            raise RemoteServiceError(msg, {"operation": operation}) from exc

        if not response.is_success:
            logger.warning(
                "linkding_http_error",
                extra={
                    "operation": operation,
                    "status_code": response.status_code,
                    "body": response.text[:500],
                },
            )
            msg = f"{operation} failed with HTTP {response.status_code}"
            raise RemoteServiceError(
                msg,
                {"operation": operation, "body": response.text[:500]},
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            msg = f"{operation} returned an undecodable body"
            raise RemoteServiceError(
                msg, {"operation": operation}, status_code=response.status_code
            ) from exc

    def count_by_tag(self, tag: str) -> int:
        """Return how many remote bookmarks carry ``tag``.

        Uses linkding's search syntax ``#tag`` and reads the reported total.
        """
        data = self._request("GET", "count_by_tag", params={"q": f"#{tag}"})
        try:
            search = LinkdingTagSearch.model_validate(data)
        except ValidationError as exc:
            msg = f"count_by_tag({tag}) returned an unexpected payload"
            raise RemoteServiceError(msg, {"tag": tag}) from exc

        logger.debug("linkding_tag_count", extra={"tag": tag, "count": search.count})
        return search.count

    def create_bookmark(self, bookmark: RemoteBookmark) -> int:
        """Create ``bookmark`` remotely and return its assigned identifier."""
        data = self._request(
            "POST", "create_bookmark", json=bookmark.model_dump(mode="json")
        )
        try:
            created = LinkdingCreatedBookmark.model_validate(data)
        except ValidationError as exc:
            msg = "create_bookmark returned an unexpected payload"
            raise RemoteServiceError(msg, {"url": bookmark.url}) from exc

        logger.info(
            "linkding_bookmark_created", extra={"url": bookmark.url, "remote_id": created.id}
        )
        return created.id
