# upstox_client/config.py
"""
Settings for the Upstox client.
Values come from the environment (a local .env file is loaded if present).
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

BASE_API = "https://api.upstox.com"
DEFAULT_TIMEOUT = 15
DEFAULT_MAX_WORKERS = 4

# endpoint id -> (HTTP verb, path template)
ROUTES = {
    "login": ("POST", "/index/login"),
    "profile": ("GET", "/live/profile"),
    "holdings": ("GET", "/live/profile/holdings"),
    "limits": ("GET", "/live/profile/balance"),
    "positions": ("GET", "/live/profile/positions"),
    "placeOrder": ("POST", "/live/orders"),
    "getOrders": ("GET", "/live/orders"),
    "modifyOrder": ("PUT", "/live/orders/{order_id}"),
    "cancelOrder": ("DELETE", "/live/orders/{order_id}"),
    "instruments": ("GET", "/index/instruments"),
    "liveFeeds": ("GET", "/live/feed/{exchange}/{instrument}"),
}

# Endpoints authenticated with api key/secret instead of the session cookie
CREDENTIAL_ROUTES = {"login"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_settings() -> dict:
    """Read connection settings at call time so tests can patch the environment."""
    return {
        "api_key": os.getenv("UPSTOX_API_KEY", ""),
        "api_secret": os.getenv("UPSTOX_API_SECRET", ""),
        "session_token": os.getenv("UPSTOX_SESSION_TOKEN") or None,
        "base_url": os.getenv("UPSTOX_BASE_URL", BASE_API).rstrip("/"),
        "timeout": _int_env("UPSTOX_TIMEOUT", DEFAULT_TIMEOUT),
        "max_workers": _int_env("UPSTOX_MAX_WORKERS", DEFAULT_MAX_WORKERS),
    }
