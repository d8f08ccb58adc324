# upstox_client/client.py
import logging
from concurrent.futures import Future
from typing import Optional, Dict, Any, Callable

from .api_client import RestDispatcher
from .config import ROUTES, get_settings
from .exceptions import UpstoxError
from .session import AuthContext, cookie_token

logger = logging.getLogger("upstox_client.client")
logger.setLevel(logging.INFO)


class Upstox:
    """
    Client for the Upstox trading API. Create one instance per api key.
    Every I/O method returns a concurrent.futures.Future.

    Usage:
        up = Upstox("your_apikey", "your_api_secret")
        up.get_session_token({"username": "client_id", "password": "..."}).result()
        profile = up.get_profile().result().body
    """
    def __init__(self,
                 api_key: str,
                 api_secret_key: str,
                 session_token: Optional[str] = None,
                 dispatcher=None,
                 token_extractor: Callable[[Any], str] = cookie_token):
        self.auth = AuthContext(api_key, api_secret_key, session_token)
        self.token_extractor = token_extractor
        self.session_hook: Optional[Callable[[Exception], None]] = None
        self._owns_dispatcher = dispatcher is None
        self.dispatcher = dispatcher if dispatcher is not None else RestDispatcher(on_session_error=self._on_session_error)

    @classmethod
    def from_env(cls, **kwargs) -> "Upstox":
        s = get_settings()
        if not s["api_key"] or not s["api_secret"]:
            raise UpstoxError("UPSTOX_API_KEY and UPSTOX_API_SECRET must be set")
        dispatcher = kwargs.pop("dispatcher", None)
        if dispatcher is not None:
            return cls(s["api_key"], s["api_secret"], s["session_token"], dispatcher=dispatcher, **kwargs)
        dispatcher = RestDispatcher(base_url=s["base_url"], timeout=s["timeout"], max_workers=s["max_workers"])
        client = cls(s["api_key"], s["api_secret"], s["session_token"], dispatcher=dispatcher, **kwargs)
        dispatcher.on_session_error = client._on_session_error
        client._owns_dispatcher = True
        return client

    # ----- session state -----
    def set_token(self, session_token: str):
        self.auth.set_token(session_token)

    def set_session_hook(self, cb: Callable[[Exception], None]):
        """
        Register a callback for session (TokenError: expiry, logout elsewhere)
        failures. It is called with the error each time a request hits one,
        e.g. to clear stored cookies or start a fresh login.
        """
        self.session_hook = cb

    def _on_session_error(self, err: Exception):
        if self.session_hook:
            self.session_hook(err)

    # ----- dispatch -----
    def _call(self, endpoint_id: str, params: Optional[Dict[str, Any]] = None) -> Future:
        verb, _ = ROUTES[endpoint_id]
        return self.dispatcher.dispatch(endpoint_id, verb, params, self.auth)

    def get_session_token(self, params: Dict[str, Any]) -> Future:
        """
        Log in with {"username", "password"}. Resolves with the login body plus
        "sessionToken"; the token is also stored for subsequent calls.
        """
        result: Future = Future()
        pending = self._call("login", params)

        def _done(f: Future):
            if f.cancelled():
                result.cancel()
                return
            # caller gave up on the login; leave the stored token alone
            if not result.set_running_or_notify_cancel():
                return
            try:
                response = f.result()
                token = self.token_extractor(response)
            except Exception as e:
                result.set_exception(e)
                return
            body = response.body
            if isinstance(body, dict):
                success = dict(body)
            else:
                success = {"data": body} if body not in (None, "") else {}
            success["sessionToken"] = token
            self.set_token(token)
            logger.info("Session token obtained")
            result.set_result(success)

        pending.add_done_callback(_done)
        return result

    # ----- account -----
    def get_profile(self) -> Future:
        return self._call("profile")

    def get_holdings(self) -> Future:
        return self._call("holdings")

    def get_limits(self) -> Future:
        return self._call("limits")

    def get_positions(self) -> Future:
        return self._call("positions")

    # ----- orders -----
    def place_order(self, params: Dict[str, Any]) -> Future:
        """params: transaction_type, exchange, symbol, quantity, ..."""
        return self._call("placeOrder", params)

    def get_orders(self) -> Future:
        return self._call("getOrders")

    def modify_order(self, params: Dict[str, Any]) -> Future:
        return self._call("modifyOrder", params)

    def cancel_order(self, params: Dict[str, Any]) -> Future:
        return self._call("cancelOrder", params)

    # ----- market data -----
    def get_instruments(self, params: Optional[Dict[str, Any]] = None) -> Future:
        return self._call("instruments", params)

    def get_live_feeds(self, params: Dict[str, Any], mini_type: str = "") -> Future:
        """params: exchange, instrument and optionally miniType (defaults to mini_type)."""
        payload = dict(params)
        if not payload.get("miniType"):
            payload["miniType"] = mini_type
        return self._call("liveFeeds", payload)

    # ----- lifecycle -----
    def close(self):
        if self._owns_dispatcher:
            self.dispatcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # original camelCase surface
    setToken = set_token
    setSessionHook = set_session_hook
    getSessionToken = get_session_token
    getProfile = get_profile
    getHoldings = get_holdings
    getLimits = get_limits
    getPositions = get_positions
    placeOrder = place_order
    getOrders = get_orders
    modifyOrder = modify_order
    cancelOrder = cancel_order
    getInstruments = get_instruments
    getLiveFeeds = get_live_feeds
