"""
Pytest configuration and shared fixtures for upstox_client tests.
"""
import pytest
from concurrent.futures import Future

from upstox_client import Upstox, Response


def resolved(value) -> Future:
    f = Future()
    f.set_result(value)
    return f


def rejected(err) -> Future:
    f = Future()
    f.set_exception(err)
    return f


class FakeDispatcher:
    """Records dispatch calls and answers with a queued or default future."""

    def __init__(self):
        self.calls = []
        self.queue = []
        self.default = Response(200, {}, {"status": "OK"})

    def dispatch(self, endpoint_id, verb, params, auth):
        # snapshot the token like a real dispatcher building headers would
        self.calls.append((endpoint_id, verb, params, auth, auth.session_token))
        if self.queue:
            return self.queue.pop(0)
        return resolved(self.default)


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def client(dispatcher):
    return Upstox("test_key", "test_secret", dispatcher=dispatcher)
