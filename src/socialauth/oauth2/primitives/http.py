"""HTTP collaborator contracts and the bundled httpx executor.

The flow only needs something that executes a request and hands back a
response with a success flag and a body. ``httpx.Response`` already
satisfies :class:`HttpResponse`, so the bundled executor returns it as is.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpRequest:
    """A single request to a provider endpoint.

    ``parameters`` are sent in the query string for GET and as a
    form-encoded body for every other method.
    """

    url: str
    parameters: Mapping[str, str] = field(default_factory=dict)
    method: str = "POST"
    headers: Mapping[str, str] = field(default_factory=dict)


class HttpResponse(Protocol):
    """Response contract consumed by the flow."""

    @property
    def is_success(self) -> bool: ...

    @property
    def text(self) -> str: ...


class HttpExecutor(Protocol):
    """Executes requests for the flow.

    Ordinary HTTP error statuses must come back as a response with
    ``is_success`` false, not as an exception.
    """

    async def execute(self, request: HttpRequest) -> HttpResponse: ...


class HttpxExecutor:
    """HttpExecutor backed by ``httpx.AsyncClient``."""

    def __init__(
        self, timeout: float = 30.0, client: httpx.AsyncClient | None = None
    ):
        """Initialize the executor.

        Args:
            timeout: HTTP request timeout in seconds, used only when the
                executor creates its own client
            client: Optional preconfigured client, e.g. with a mock transport.
                The caller keeps ownership and closes it.
        """
        self.timeout = timeout
        self._owns_client = client is None
        self._http_client = client or httpx.AsyncClient(timeout=timeout)

    async def execute(self, request: HttpRequest) -> httpx.Response:
        """Send the request and return the raw response.

        Raises:
            httpx.HTTPError: On connection-level failures only
        """
        method = request.method.upper()
        logger.debug(f"{method} {request.url}")

        if method == "GET":
            response = await self._http_client.request(
                method,
                request.url,
                params=dict(request.parameters),
                headers=dict(request.headers),
            )
        else:
            response = await self._http_client.request(
                method,
                request.url,
                data=dict(request.parameters),
                headers=dict(request.headers),
            )

        logger.debug(f"{method} {request.url} -> {response.status_code}")
        return response

    async def close(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._owns_client:
            await self._http_client.aclose()
