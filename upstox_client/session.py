# upstox_client/session.py
import logging
from typing import Optional, Any

from .exceptions import MalformedLoginResponse

logger = logging.getLogger("upstox_client.session")
logger.setLevel(logging.INFO)

SESSION_HEADER = "set-cookie"


class AuthContext:
    """
    Credentials sent with every request.
    api_key / api_secret_key are fixed at construction; session_token is
    replaced wholesale by set_token().
    """
    def __init__(self, api_key: str, api_secret_key: str, session_token: Optional[str] = None):
        self._api_key = api_key
        self._api_secret_key = api_secret_key
        self.session_token = session_token

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def api_secret_key(self) -> str:
        return self._api_secret_key

    def set_token(self, session_token: str):
        self.session_token = session_token

    def __repr__(self):
        return f"AuthContext(api_key={self._api_key!r}, session_token={'set' if self.session_token else None})"


def cookie_token(response: Any) -> str:
    """
    Default login token extractor: first value of the set-cookie header.
    Raises MalformedLoginResponse when the header is missing or empty.
    """
    headers = getattr(response, "headers", None) or {}
    value = None
    for name, v in headers.items():
        if str(name).lower() == SESSION_HEADER:
            value = v
            break
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if not value:
        raise MalformedLoginResponse("Login response carried no set-cookie header", response=response)
    return value
