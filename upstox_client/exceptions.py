# upstox_client/exceptions.py
from typing import Optional, Any


class UpstoxError(Exception):
    pass


class NetworkError(UpstoxError):
    """Request never produced an HTTP response (DNS, TLS, timeout, reset)."""
    pass


class APIError(UpstoxError):
    """
    Broker answered with an error status.
    `response` is the normalized Response so callers can inspect body/headers.
    """
    def __init__(self, message: str, status: Optional[int] = None, response: Optional[Any] = None):
        super().__init__(message)
        self.status = status
        self.response = response


class TokenError(APIError):
    """Session token missing, expired or rejected."""
    pass


class UnknownEndpointError(UpstoxError):
    pass


class MalformedLoginResponse(UpstoxError):
    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.response = response
