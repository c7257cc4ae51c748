"""Error types surfaced by the gateway and mapped to HTTP responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.operations import OperationResult


class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BadRequestError(GatewayError):
    """A required field is missing or a value is out of range."""

    status_code = 400


class PathEscapeError(BadRequestError):
    """A user-supplied path resolves outside the sandbox base directory."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("path escapes base")


class EngineError(GatewayError):
    """The container engine rejected or failed a call."""


class EngineTimeoutError(EngineError):
    status_code = 504

    def __init__(self, operation: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} timed out after {timeout:g}s")


class PullFailedError(EngineError):
    """Neither the reference nor its library-namespace fallback could be pulled."""

    def __init__(self, reference: str, message: str) -> None:
        self.reference = reference
        super().__init__(message)


class SubprocessFailure(GatewayError):
    """A wrapped CLI exited unsuccessfully; the result keeps its output."""

    def __init__(self, message: str, result: OperationResult) -> None:
        self.result = result
        super().__init__(message)
