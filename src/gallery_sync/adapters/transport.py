"""Shared HTTP transport: bearer auth and the global 401 policy."""

import logging
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass

import httpx

_logger = logging.getLogger(__name__)

# Synology answers 401 to ask for a one-time code, which is not a login expiry.
_UNAUTHORIZED_EXEMPT_PREFIX = "/synology/"


@dataclass
class TokenStore:
    """Holds the bearer token attached to backend requests."""

    token: str | None = None

    def set(self, token: str) -> None:
        """Replace the stored token."""
        self.token = token

    def clear(self) -> None:
        """Forget the stored token."""
        self.token = None


class BearerAuth(httpx.Auth):
    """Attach the current token from a ``TokenStore`` to each request."""

    def __init__(self, token_store: TokenStore) -> None:
        self.token_store = token_store

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        if self.token_store.token:
            request.headers["Authorization"] = f"Bearer {self.token_store.token}"
        yield request


def is_login_expiry(response: httpx.Response) -> bool:
    """Return True when a response means the console login is no longer valid."""
    if response.status_code != httpx.codes.UNAUTHORIZED:
        return False
    return _UNAUTHORIZED_EXEMPT_PREFIX not in response.request.url.path


def build_http_client(
    base_url: str,
    token_store: TokenStore,
    on_unauthorized: Callable[[], Awaitable[None]] | None = None,
    timeout: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared backend client with auth and 401 handling."""

    async def handle_unauthorized(response: httpx.Response) -> None:
        if not is_login_expiry(response):
            return
        _logger.warning(
            "Backend rejected credentials for %s; login required",
            response.request.url.path,
        )
        token_store.clear()
        if on_unauthorized is not None:
            await on_unauthorized()

    return httpx.AsyncClient(
        base_url=base_url.rstrip("/") + "/",
        auth=BearerAuth(token_store),
        timeout=timeout,
        transport=transport,
        event_hooks={"response": [handle_unauthorized]},
    )
