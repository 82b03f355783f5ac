"""Common exceptions for the copilot client."""
from __future__ import annotations

from typing import Optional, Tuple

import grpc


class CopilotError(Exception):
    pass


class ConfigurationError(CopilotError):
    """Bad or missing configuration / credential material."""


class RemoteCallError(CopilotError):
    """A remote procedure failed, either in transport or on the server.

    ``code`` is the gRPC status classification; callers branch on it rather
    than on the message text.
    """

    def __init__(
        self,
        method: str,
        code: grpc.StatusCode,
        details: str = "",
        metadata: Tuple[Tuple[str, str], ...] = (),
    ) -> None:
        self.method = method
        self.code = code
        self.details = details
        self.metadata = tuple(metadata)
        super().__init__(str(self))

    @classmethod
    def from_rpc_error(cls, method: str, exc: grpc.RpcError) -> "RemoteCallError":
        # RpcErrors raised by unary calls are also grpc.Call objects; be lenient
        # with ones that are not.
        code = exc.code() if hasattr(exc, "code") else grpc.StatusCode.UNKNOWN
        details = exc.details() if hasattr(exc, "details") else ""
        trailing = exc.trailing_metadata() if hasattr(exc, "trailing_metadata") else None
        metadata = tuple((str(k), v if isinstance(v, str) else repr(v)) for k, v in (trailing or ()))
        return cls(method, code or grpc.StatusCode.UNKNOWN, details or "", metadata)

    @property
    def classification(self) -> str:
        """Lower-case status name, e.g. ``deadline_exceeded``."""
        return self.code.name.lower()

    def __str__(self) -> str:
        return (
            f"{self.method} failed: code={self.code.name} "
            f"details={self.details!r} metadata={dict(self.metadata)!r}"
        )

    def __reduce__(self):  # noqa: ANN204
        return (type(self), (self.method, self.code, self.details, self.metadata))


class StartupTimeoutError(CopilotError):
    """The service never reported healthy within the retry budget."""

    def __init__(self, checks: int, last_error: Optional[BaseException] = None) -> None:
        self.checks = checks
        self.last_error = last_error
        msg = f"copilot didn't become healthy after {checks} checks"
        if last_error is not None:
            msg += f" (last error: {last_error})"
        super().__init__(msg)
