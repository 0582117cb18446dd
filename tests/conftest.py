"""Shared pytest fixtures for the TCG backend tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tcg_backend import card_routes  # noqa: E402
from tcg_backend.main import app  # noqa: E402
from tcg_backend.settings import Settings, get_settings  # noqa: E402

Handler = Callable[[httpx.Request], httpx.Response]


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "justtcg_api_key": "test-key",
        "justtcg_base_url": "https://api.justtcg.test/v1",
        "pokemontcg_base_url": "https://pokemontcg.test/v2",
        "scryfall_base_url": "https://scryfall.test",
        "pokemontcg_io_api_key": None,
        "show_raw": False,
        "image_fallback_enabled": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeUpstream:
    """Routes outgoing requests by (host, path) and records every call."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: list[httpx.Request] = []

    def add(self, host: str, path: str, handler: Handler) -> None:
        self.routes[(host, path)] = handler

    def json(self, host: str, path: str, payload: Any, status_code: int = 200) -> None:
        self.add(host, path, lambda request: httpx.Response(status_code, json=payload))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.url.host, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [c for c in self.calls if c.url.host == host]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def settings_factory():
    """Return the helper building isolated Settings objects."""
    return make_settings


@pytest.fixture()
def build_client(upstream):
    """Return a factory creating a TestClient wired to the fake upstream."""

    clients: list[TestClient] = []

    def _build(app_settings: Optional[Settings] = None, **client_kwargs: Any) -> TestClient:
        resolved = app_settings or make_settings()

        async def _http_client():
            async with upstream.client() as client:
                yield client

        app.dependency_overrides[get_settings] = lambda: resolved
        app.dependency_overrides[card_routes.get_http_client] = _http_client
        client = TestClient(app, **client_kwargs)
        client.__enter__()
        clients.append(client)
        return client

    yield _build

    for client in clients:
        client.__exit__(None, None, None)
    app.dependency_overrides.clear()


@pytest.fixture()
def api_client(build_client):
    return build_client()
