"""Tests for environment-driven settings and Upstox.from_env."""

import pytest

from upstox_client import Upstox, UpstoxError, RestDispatcher
from upstox_client.config import get_settings, ROUTES, BASE_API, DEFAULT_TIMEOUT


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("UPSTOX_API_KEY", "UPSTOX_API_SECRET", "UPSTOX_SESSION_TOKEN",
                 "UPSTOX_BASE_URL", "UPSTOX_TIMEOUT", "UPSTOX_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self, clean_env):
        s = get_settings()
        assert s["base_url"] == BASE_API
        assert s["timeout"] == DEFAULT_TIMEOUT
        assert s["session_token"] is None

    def test_bad_int_falls_back(self, clean_env):
        clean_env.setenv("UPSTOX_TIMEOUT", "soon")
        assert get_settings()["timeout"] == DEFAULT_TIMEOUT

    def test_every_route_has_known_verb(self):
        for verb, path in ROUTES.values():
            assert verb in ("GET", "POST", "PUT", "DELETE")
            assert path.startswith("/")


class TestFromEnv:

    def test_requires_credentials(self, clean_env):
        with pytest.raises(UpstoxError):
            Upstox.from_env()

    def test_builds_configured_client(self, clean_env):
        clean_env.setenv("UPSTOX_API_KEY", "k")
        clean_env.setenv("UPSTOX_API_SECRET", "s")
        clean_env.setenv("UPSTOX_SESSION_TOKEN", "tok")
        clean_env.setenv("UPSTOX_BASE_URL", "https://sandbox.example.test/")
        clean_env.setenv("UPSTOX_TIMEOUT", "30")
        with Upstox.from_env() as up:
            assert up.auth.api_key == "k"
            assert up.auth.session_token == "tok"
            assert isinstance(up.dispatcher, RestDispatcher)
            assert up.dispatcher.base_url == "https://sandbox.example.test"
            assert up.dispatcher.on_session_error == up._on_session_error

    def test_keeps_supplied_dispatcher(self, clean_env, dispatcher):
        clean_env.setenv("UPSTOX_API_KEY", "k")
        clean_env.setenv("UPSTOX_API_SECRET", "s")
        up = Upstox.from_env(dispatcher=dispatcher)
        assert up.dispatcher is dispatcher
