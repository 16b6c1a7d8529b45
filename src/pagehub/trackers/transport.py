"""HTTP and JSON-RPC transports with connection reuse and rate limiting."""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections import deque
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, Field

from pagehub.core.exceptions import AdapterUnavailableError, RateLimitError, RpcError

logger = logging.getLogger(__name__)

USER_AGENT = "pagehub-engine"


@dataclass
class RateLimitConfig:
    """Request budget for one upstream endpoint."""

    requests_per_second: float = 10.0
    max_in_flight: int = 4

    # 429 handling; max_retries=0 fails on the first 429
    max_retries: int = 3
    backoff_base: float = 1.0
    backoff_factor: float = 2.0
    max_backoff: float = 30.0


class TransportConfig(BaseModel):
    """Configuration for one upstream endpoint."""

    base_url: str = ""
    timeout: float = 30.0
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)


class AsyncRateLimiter:
    """
    Sliding one-second send window plus a cap on requests in flight.

    A 429 pauses every caller of the limiter until the back-off deadline,
    since a public RPC node throttles per client rather than per request.
    """

    def __init__(self, config: RateLimitConfig) -> None:
        self.config = config
        self._sent: deque[float] = deque()
        self._paused_until = 0.0
        self._strikes = 0
        self._window_lock = asyncio.Lock()
        self._in_flight: asyncio.Semaphore | None = None

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one in-flight slot for the whole request, retries included."""
        if self._in_flight is None:
            self._in_flight = asyncio.Semaphore(self.config.max_in_flight)
        async with self._in_flight:
            await self.acquire()
            yield

    async def acquire(self) -> None:
        """Wait for room in the window (and any back-off), then record a send."""
        async with self._window_lock:
            pause = self._paused_until - time.monotonic()
            if pause > 0:
                await asyncio.sleep(pause)

            now = time.monotonic()
            while self._sent and self._sent[0] <= now - 1.0:
                self._sent.popleft()
            if len(self._sent) >= self.config.requests_per_second:
                await asyncio.sleep(self._sent[0] + 1.0 - now)

            self._sent.append(time.monotonic())

    def backoff(self, retry_after: float | None = None) -> float:
        """Record a 429 and pause sends. Returns the pause in seconds."""
        self._strikes += 1
        pause = retry_after or min(
            self.config.backoff_base * self.config.backoff_factor ** (self._strikes - 1),
            self.config.max_backoff,
        )
        self._paused_until = time.monotonic() + pause
        return pause

    def recover(self) -> None:
        self._strikes = 0

    @property
    def retries_left(self) -> bool:
        return self._strikes < self.config.max_retries


def _retry_after(response: httpx.Response) -> float | None:
    # Retry-After may also be an HTTP date; only delta-seconds are honoured
    value = response.headers.get("Retry-After")
    try:
        return float(value) if value else None
    except ValueError:
        return None


class HttpTransport:
    """
    Rate-limited HTTP client for one upstream endpoint.

    The underlying `httpx.AsyncClient` is created on first use and reused
    until `close()` is called.
    """

    def __init__(self, config: TransportConfig | None = None, source: str = "http") -> None:
        self.config = config or TransportConfig()
        self.source = source
        self._client: httpx.AsyncClient | None = None
        self._limiter = AsyncRateLimiter(self.config.rate_limit)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request inside the endpoint's rate budget.

        429 responses are retried after back-off until the retry budget is
        spent; transport failures surface as `AdapterUnavailableError`.
        """
        async with self._limiter.slot():
            while True:
                try:
                    response = await self.client.request(method, url, **kwargs)
                except httpx.HTTPError as e:
                    raise AdapterUnavailableError(
                        message=f"{method} {url or self.config.base_url} failed: {e}",
                        source=self.source,
                    ) from e

                if response.status_code != 429:
                    self._limiter.recover()
                    return response

                retry_after = _retry_after(response)
                if not self._limiter.retries_left:
                    raise RateLimitError(
                        message=f"{self.source} kept answering 429",
                        source=self.source,
                        retry_after=retry_after,
                    )
                pause = self._limiter.backoff(retry_after)
                logger.debug(f"{self.source} throttled, pausing {pause:.2f}s")
                await self._limiter.acquire()

    async def fetch_json(self, url: str, **kwargs: Any) -> Any:
        """GET a URL and decode its JSON body. Non-2xx responses raise."""
        response = await self._send("GET", url, **kwargs)
        if not response.is_success:
            raise AdapterUnavailableError(
                message=f"GET {url} returned {response.status_code}",
                source=self.source,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise AdapterUnavailableError(
                message=f"Invalid JSON from {url}: {e}",
                source=self.source,
                status_code=response.status_code,
            ) from e

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class JsonRpcTransport(HttpTransport):
    """JSON-RPC 2.0 over HTTP for one chain's node endpoint."""

    def __init__(self, chain: str, config: TransportConfig) -> None:
        super().__init__(config, source=f"rpc:{chain}")
        self.chain = chain
        self._ids = itertools.count(1)

    async def call(self, method: str, params: list[Any]) -> Any:
        """Invoke an RPC method and return its `result`."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        response = await self._send("POST", "", json=payload)
        if not response.is_success:
            raise AdapterUnavailableError(
                message=f"{method} on {self.chain} returned HTTP {response.status_code}",
                source=self.source,
                status_code=response.status_code,
            )

        body = response.json()
        if error := body.get("error"):
            raise RpcError(
                message=f"{method} on {self.chain} failed: {error.get('message', error)}",
                rpc_code=error.get("code"),
            )
        return body.get("result")

    async def eth_call(self, to: str, data: str) -> str:
        """Read-only contract call at the latest block; returns hex return data."""
        result = await self.call("eth_call", [{"to": to, "data": data}, "latest"])
        return result or "0x"
