"""Custom exception hierarchy for pagehub."""

from typing import Any, ClassVar

from .types import ErrorCode


class PageHubError(Exception):
    """Base exception for all pagehub errors."""

    code: ClassVar[ErrorCode] = ErrorCode.SERVER_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(PageHubError):
    """Caller-supplied parameter failed validation."""

    code = ErrorCode.INVALID_PARAM


class MissingParameterError(ValidationError):
    """A required parameter was not supplied."""

    code = ErrorCode.MISSING_PARAM


class NotFoundError(PageHubError):
    """Resource not found."""

    code = ErrorCode.NOT_FOUND


class ResolutionNotFound(NotFoundError):
    """Every resolution candidate for an address was exhausted."""

    def __init__(
        self,
        message: str,
        address: str,
        attempts: int = 0,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.address = address
        self.attempts = attempts


class TrackerError(PageHubError):
    """A content tracker could not be built or a chain read failed."""

    code = ErrorCode.UPSTREAM_ERROR


class UnsupportedChainError(TrackerError):
    """No transport is configured for the requested chain."""

    def __init__(self, chain: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Unsupported chain: {chain}", details)
        self.chain = chain


class UnknownContentTypeError(TrackerError):
    """No tracker implementation exists for the content type."""

    def __init__(self, content_type: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Unknown content type: {content_type}", details)
        self.content_type = content_type


class RpcError(TrackerError):
    """JSON-RPC call returned an error object (revert, bad params, ...)."""

    def __init__(
        self,
        message: str,
        rpc_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.rpc_code = rpc_code


class AdapterUnavailableError(TrackerError):
    """Upstream endpoint is unreachable or returned a transport error."""

    def __init__(
        self,
        message: str,
        source: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.source = source
        self.status_code = status_code


class RateLimitError(AdapterUnavailableError):
    """Rate limit exceeded for an upstream endpoint."""

    def __init__(
        self,
        message: str,
        source: str,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, source, status_code=429, details=details)
        self.retry_after = retry_after
