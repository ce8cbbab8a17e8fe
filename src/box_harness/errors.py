"""Error types raised by box-harness.

Remote failures surface as BoxAPIError and propagate unmodified through the
lifecycle controller. ConfigError and LifecycleError are raised by the
harness itself.
"""

from typing import Any


class HarnessError(Exception):
    """Base error for everything raised by the harness."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigError(HarnessError):
    """Configuration is missing or malformed."""


class LifecycleError(HarnessError):
    """A scope transition or command was issued in the wrong phase."""


class BoxAPIError(HarnessError):
    """Error returned by (or while reaching) the Box API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        request_id: str | None = None,
    ):
        self.status_code = status_code
        self.code = code
        self.request_id = request_id
        super().__init__(message)

    @classmethod
    def from_body(cls, status_code: int, body: Any, fallback: str) -> "BoxAPIError":
        """Build an error from a Box error body.

        Box error bodies look like
        ``{"type": "error", "status": 409, "code": "item_name_in_use",
        "message": "...", "request_id": "..."}``.
        """
        if not isinstance(body, dict):
            return cls(fallback, status_code=status_code)
        return cls(
            body.get("message") or fallback,
            status_code=status_code,
            code=body.get("code"),
            request_id=body.get("request_id"),
        )

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        detail = f"{self.status_code}"
        if self.code:
            detail += f" {self.code}"
        return f"{self.message} ({detail})"
