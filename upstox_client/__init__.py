# upstox_client/__init__.py

from .client import Upstox
from .api_client import RestDispatcher, Response
from .session import AuthContext, cookie_token
from .exceptions import (
    UpstoxError,
    NetworkError,
    APIError,
    TokenError,
    UnknownEndpointError,
    MalformedLoginResponse,
)
from .instruments import parse_instruments, find_instrument
from .portfolio import holdings_frame, positions_frame

__version__ = "0.1"
