"""
Tests unitarios para el cliente HTTP del catálogo.

Usa httpx.MockTransport: no hay red. Los backoffs se configuran en 0.
"""
from __future__ import annotations

from typing import Callable, List

import httpx
import pytest

from planets_api.infrastructure.external.catalog_sync.catalog_client import (
    CatalogApiError,
    CatalogClient,
)

BASE_URL = "https://catalog.test/api"


def _page(results: list, next_url: str | None = None) -> dict:
    return {"count": len(results), "next": next_url, "previous": None, "results": results}


def _client(handler: Callable[[httpx.Request], httpx.Response], max_retries: int = 2) -> CatalogClient:
    return CatalogClient(
        base_url=BASE_URL,
        max_retries=max_retries,
        min_backoff_s=0.0,
        max_backoff_s=0.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_follows_next_links() -> None:
    """Recorre todas las páginas y mapea 'films' a works."""
    requested: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=_page([
                {"name": "Hoth", "climate": "frozen", "terrain": "tundra", "films": []},
            ]))
        return httpx.Response(200, json=_page(
            [{"name": "Tatooine", "climate": "arid", "terrain": "desert",
              "films": ["https://swapi.dev/api/films/1/", "https://swapi.dev/api/films/3/"]}],
            next_url=f"{BASE_URL}/planets/?page=2",
        ))

    client = _client(handler)
    try:
        planets = await client.fetch_all_planets()
    finally:
        await client.aclose()

    assert [p.name for p in planets] == ["Tatooine", "Hoth"]
    assert len(planets[0].works) == 2
    assert requested[0] == f"{BASE_URL}/planets/"
    assert len(requested) == 2


@pytest.mark.asyncio
async def test_retries_server_errors_then_succeeds() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, json=_page([{"name": "Naboo", "films": []}]))

    client = _client(handler)
    try:
        planets = await client.fetch_all_planets()
    finally:
        await client.aclose()

    assert calls["n"] == 2
    assert planets[0].name == "Naboo"


@pytest.mark.asyncio
async def test_rate_limit_honors_retry_after() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(429, headers={"Retry-After": "0"})
        return httpx.Response(200, json=_page([]))

    client = _client(handler)
    try:
        planets = await client.fetch_all_planets()
    finally:
        await client.aclose()

    assert planets == []
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_client_error_is_not_retried() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(404, text="not found")

    client = _client(handler)
    try:
        with pytest.raises(CatalogApiError, match="404"):
            await client.fetch_all_planets()
    finally:
        await client.aclose()

    assert calls["n"] == 1


@pytest.mark.asyncio
async def test_retries_exhausted_raise() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(500, text="boom")

    client = _client(handler, max_retries=2)
    try:
        with pytest.raises(CatalogApiError):
            await client.fetch_all_planets()
    finally:
        await client.aclose()

    assert calls["n"] == 3


@pytest.mark.asyncio
async def test_transport_errors_are_retried() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=_page([{"name": "Kamino", "films": []}]))

    client = _client(handler)
    try:
        planets = await client.fetch_all_planets()
    finally:
        await client.aclose()

    assert [p.name for p in planets] == ["Kamino"]


@pytest.mark.asyncio
async def test_payload_without_results_is_an_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"detail": "unexpected"})

    client = _client(handler)
    try:
        with pytest.raises(CatalogApiError, match="results"):
            await client.fetch_all_planets()
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_invalid_json_is_an_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    client = _client(handler)
    try:
        with pytest.raises(CatalogApiError, match="JSON"):
            await client.fetch_all_planets()
    finally:
        await client.aclose()
