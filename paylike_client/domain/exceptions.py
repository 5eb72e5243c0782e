"""Errors raised by the Paylike client"""

from typing import Any, Optional


class PaylikeError(Exception):
    """Base exception for the client"""

    pass


class TransportError(PaylikeError):
    """Request never produced a response (DNS, connection, timeout)"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DecodeError(PaylikeError):
    """Response body is not valid JSON or does not match the expected shape"""

    def __init__(self, message: str, raw: bytes = b"", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.raw = raw
        self.cause = cause


class APIError(PaylikeError):
    """Paylike answered with a non-2xx status"""

    def __init__(self, status_code: int, body: Any = None, raw: bytes = b""):
        super().__init__(f"Paylike API error: {status_code}")
        self.status_code = status_code
        self.body = body
        self.raw = raw
