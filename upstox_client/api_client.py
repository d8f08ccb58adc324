# upstox_client/api_client.py
import re
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Dict, Any, Callable
from urllib.parse import quote

import requests

from .config import BASE_API, DEFAULT_TIMEOUT, DEFAULT_MAX_WORKERS, ROUTES, CREDENTIAL_ROUTES
from .exceptions import UpstoxError, NetworkError, APIError, TokenError, UnknownEndpointError
from .session import AuthContext

logger = logging.getLogger("upstox_client.api_client")
logger.setLevel(logging.INFO)

BODY_VERBS = ("POST", "PUT")
SESSION_ERROR_STATUSES = (401, 403)
_PLACEHOLDER = re.compile(r"{(\w+)}")


class Response:
    """Normalized broker response: status, lower-cased headers and parsed body."""
    def __init__(self, status: int, headers: Dict[str, Any], body: Any):
        self.status = status
        self.headers = headers
        self.body = body

    def __repr__(self):
        return f"Response(status={self.status}, body={self.body!r})"


def normalize_headers(r: requests.Response) -> Dict[str, Any]:
    """
    Repeated headers (and set-cookie, always) become lists in arrival order.
    requests folds duplicates into one comma-joined string, so read the raw
    urllib3 headers when they are available.
    """
    out: Dict[str, Any] = {}
    raw = getattr(getattr(r, "raw", None), "headers", None)
    if raw is not None and hasattr(raw, "getlist"):
        for name in raw.keys():
            key = name.lower()
            if key in out:
                continue
            values = raw.getlist(name)
            out[key] = values if (len(values) > 1 or key == "set-cookie") else values[0]
        return out
    for name, value in (r.headers or {}).items():
        key = name.lower()
        out[key] = [value] if key == "set-cookie" else value
    return out


def parse_body(r: requests.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return r.text


def _error_message(body: Any, default: str) -> str:
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if body.get("message"):
            return str(body["message"])
        if isinstance(err, str) and err:
            return err
    return default


def _is_session_error(status: int, body: Any) -> bool:
    if status in SESSION_ERROR_STATUSES:
        return True
    if not isinstance(body, dict):
        return False
    err = body.get("error")
    kind = body.get("error_type") or (err.get("type") if isinstance(err, dict) else None) or ""
    kind = str(kind).lower()
    return "token" in kind or "session" in kind


class RestDispatcher:
    """
    Turns (endpoint id, verb, params, auth) into an HTTP call on a worker
    thread and hands back a Future of the normalized Response.

    on_session_error(err) is called before a TokenError is raised to the caller.
    """
    def __init__(self,
                 base_url: str = BASE_API,
                 timeout: int = DEFAULT_TIMEOUT,
                 max_workers: int = DEFAULT_MAX_WORKERS,
                 session: Optional[requests.Session] = None,
                 on_session_error: Optional[Callable[[Exception], None]] = None,
                 routes: Optional[Dict[str, tuple]] = None):
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self.session = session or requests.Session()
        self.on_session_error = on_session_error
        self.routes = routes if routes is not None else ROUTES
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="upstox")

    # ----- request construction -----
    def _build_url(self, path: str, params: Dict[str, Any]) -> str:
        def sub(m):
            name = m.group(1)
            if name not in params or params[name] is None:
                raise APIError(f"Missing path parameter '{name}' for {path}")
            return quote(str(params.pop(name)), safe="")
        return self.base_url + _PLACEHOLDER.sub(sub, path)

    def _headers(self, auth: AuthContext) -> Dict[str, str]:
        hdr: Dict[str, str] = {"Content-Type": "application/json", "x-api-key": str(auth.api_key)}
        if auth.session_token:
            hdr["Cookie"] = str(auth.session_token)
        return hdr

    def build_request(self, endpoint_id: str, verb: str, params: Optional[Dict[str, Any]], auth: AuthContext) -> Dict[str, Any]:
        if endpoint_id not in self.routes:
            raise UnknownEndpointError(f"Unknown endpoint '{endpoint_id}'")
        _, path = self.routes[endpoint_id]
        verb = verb.upper()
        remaining = dict(params or {})
        request: Dict[str, Any] = {
            "method": verb,
            "url": self._build_url(path, remaining),
            "headers": self._headers(auth),
        }
        if endpoint_id in CREDENTIAL_ROUTES:
            request["auth"] = (auth.api_key, auth.api_secret_key)
        if verb in BODY_VERBS:
            request["json"] = remaining
        elif remaining:
            request["params"] = remaining
        return request

    # ----- execution -----
    def dispatch(self, endpoint_id: str, verb: str, params: Optional[Dict[str, Any]], auth: AuthContext) -> Future:
        # headers are captured here so a later token change doesn't affect this call
        try:
            request = self.build_request(endpoint_id, verb, params, auth)
            logger.debug("dispatch %s %s %s", endpoint_id, request["method"], request["url"])
            return self._executor.submit(self._send, endpoint_id, request)
        except Exception as e:
            if not isinstance(e, UpstoxError):
                logger.warning("%s could not be dispatched: %s", endpoint_id, e)
            fut: Future = Future()
            fut.set_exception(e)
            return fut

    def _send(self, endpoint_id: str, request: Dict[str, Any]) -> Response:
        try:
            r = self.session.request(timeout=self._timeout, **request)
        except requests.RequestException as e:
            logger.warning("%s request failed: %s", endpoint_id, e)
            raise NetworkError(f"{endpoint_id} request failed: {e}") from e

        response = Response(r.status_code, normalize_headers(r), parse_body(r))
        if r.status_code < 400:
            return response

        message = _error_message(response.body, f"HTTP {r.status_code} {r.reason or ''}".strip())
        if _is_session_error(r.status_code, response.body):
            err = TokenError(message, status=r.status_code, response=response)
            logger.warning("Session error on %s: %s", endpoint_id, message)
            self._notify_session_error(err)
            raise err
        logger.warning("%s failed with HTTP %s: %s", endpoint_id, r.status_code, message)
        raise APIError(message, status=r.status_code, response=response)

    def _notify_session_error(self, err: TokenError):
        if not self.on_session_error:
            return
        try:
            self.on_session_error(err)
        except Exception:
            logger.exception("session hook failed")

    def close(self):
        self._executor.shutdown(wait=True)
        self.session.close()
