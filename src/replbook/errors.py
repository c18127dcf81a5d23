"""
replbook error types.
"""

from typing import Any, Optional


class ReplbookError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class HttpError(ReplbookError):
    """Non-2xx response from the evaluator service."""

    def __init__(self, status_code: int, body: str):
        super().__init__("http_error", f"HTTP {status_code}: {body[:200]}",
                         {"status_code": status_code})
        self.status_code = status_code
        self.body = body


class SessionError(ReplbookError):
    def __init__(self, message: str, code: str = "session_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class TransportError(ReplbookError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)
