"""Errors raised by the z/OSMF client.

Every public operation either returns its typed result or raises exactly one
subclass of :class:`ZOsmfError`. No layer retries on any of them.
"""

from typing import Any


class ZOsmfError(Exception):
    """Base class for all z/OSMF client errors."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dict suitable for structured logging."""
        result: dict[str, Any] = {"error": self.message}
        if self.status is not None:
            result["status"] = self.status
        return result


class TransportError(ZOsmfError):
    """The request never produced an HTTP response (connect, TLS, timeout)."""


class DeserializationError(ZOsmfError):
    """A successful response did not have the expected shape."""


class ReportedError(ZOsmfError):
    """Error answered by z/OSMF itself, keeping its error report fields.

    The report fields are None when the body did not contain a report.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        *,
        url: str | None = None,
        category: int | None = None,
        return_code: int | None = None,
        reason: int | None = None,
        details: list[str] | None = None,
    ):
        super().__init__(message, status)
        self.url = url
        self.category = category
        self.return_code = return_code
        self.reason = reason
        self.details = details or []

    def __str__(self) -> str:
        if self.return_code is None:
            return self.message
        return (
            f"{self.message} (category={self.category}, rc={self.return_code},"
            f" reason={self.reason})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dict suitable for structured logging."""
        result = super().to_dict()
        for key in ("url", "category", "return_code", "reason"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.details:
            result["details"] = self.details
        return result


class AuthenticationError(ReportedError):
    """Credentials were rejected or the session has expired."""


class ServerError(ReportedError):
    """z/OSMF answered with a non-success status other than 401."""

    def __str__(self) -> str:
        return f"z/OSMF returned HTTP {self.status}: {super().__str__()}"
