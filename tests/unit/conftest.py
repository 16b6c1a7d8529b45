"""Unit test fixtures with HTTP mocking."""

from __future__ import annotations

from typing import Any

import pytest
import respx
from httpx import Response

from pagehub.trackers.abi import encode_uint
from pagehub.trackers.transport import (
    HttpTransport,
    JsonRpcTransport,
    RateLimitConfig,
    TransportConfig,
)

RPC_URL = "https://rpc.test/"
INDEXER_URL = "https://indexer.test"


# ============================================================================
# HTTP Mocking Fixtures
# ============================================================================


@pytest.fixture
def respx_mock():
    """Provide a respx mock router for HTTP mocking.

    Use this when you need fine-grained control over mocked responses.
    The mock is automatically started and stopped by respx.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


# ============================================================================
# Transport Fixtures
# ============================================================================


@pytest.fixture
def rate_limit_config() -> RateLimitConfig:
    """High limits so tests never wait on the limiter."""
    return RateLimitConfig(
        requests_per_second=1000.0,
        max_in_flight=50,
        max_retries=2,
    )


@pytest.fixture
async def rpc_transport(rate_limit_config: RateLimitConfig):
    transport = JsonRpcTransport(
        "ethereum",
        TransportConfig(base_url="https://rpc.test", timeout=5.0, rate_limit=rate_limit_config),
    )
    yield transport
    await transport.close()


@pytest.fixture
async def content_fetcher(rate_limit_config: RateLimitConfig):
    transport = HttpTransport(
        TransportConfig(timeout=5.0, rate_limit=rate_limit_config),
        source="metadata",
    )
    yield transport
    await transport.close()


# ============================================================================
# ABI Response Helpers
# ============================================================================


def abi_string(value: str) -> str:
    """ABI-encode a dynamic string return value."""
    raw = value.encode("utf-8")
    padded = raw.hex().ljust(((len(raw) + 31) // 32) * 64 or 64, "0")
    return "0x" + encode_uint(32) + encode_uint(len(raw)) + padded


def abi_uint(*values: int) -> str:
    return "0x" + "".join(encode_uint(value) for value in values)


def abi_address(address: str) -> str:
    return "0x" + address.removeprefix("0x").lower().rjust(64, "0")


def rpc_result(result: Any, request_id: int = 1) -> Response:
    return Response(200, json={"jsonrpc": "2.0", "id": request_id, "result": result})


def rpc_error(message: str = "execution reverted", code: int = 3) -> Response:
    return Response(
        200,
        json={"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}},
    )


@pytest.fixture
def abi_responses():
    """Provide helper functions for building JSON-RPC responses."""
    return {
        "string": abi_string,
        "uint": abi_uint,
        "address": abi_address,
        "result": rpc_result,
        "error": rpc_error,
    }
