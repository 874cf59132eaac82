"""
Cliente mínimo del catálogo de planetas (API REST compatible con SWAPI).

Requisitos cubiertos:
- httpx asíncrono
- paginación siguiendo el link 'next'
- rate-limit/backoff (429, 5xx y errores de transporte)
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx
from loguru import logger

from .types import CatalogPlanet


class CatalogApiError(RuntimeError):
    """Error de integración con el catálogo."""


class CatalogClient:
    """
    Cliente HTTP del catálogo. Devuelve el snapshot completo de planetas.

    Importante:
    - No valida los registros: eso se decide en el reconciler.
    - Si falla una página falla todo el fetch (nunca un snapshot parcial).
    """

    def __init__(
        self,
        *,
        base_url: str = "https://swapi.dev/api",
        timeout_s: float = 30.0,
        max_retries: int = 4,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._client = httpx.AsyncClient(
            timeout=timeout_s,
            transport=transport,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )
        self._log = logger.bind(component="catalog_client")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_all_planets(self) -> list[CatalogPlanet]:
        """
        Descarga todas las páginas de /planets/.

        Raises:
            CatalogApiError: respuesta no recuperable, reintentos agotados
                o payload con formato inesperado
        """
        url: Optional[str] = f"{self._base_url}/planets/"
        visited: set[str] = set()
        planets: list[CatalogPlanet] = []

        while url:
            if url in visited:
                raise CatalogApiError(f"Paginación cíclica detectada en {url}")
            visited.add(url)

            payload = await self._request_json("GET", url)
            results = payload.get("results")
            if not isinstance(results, list):
                raise CatalogApiError(f"Respuesta sin 'results' en {url}")

            for item in results:
                if not isinstance(item, dict):
                    raise CatalogApiError(f"Registro con formato inesperado en {url}")
                planets.append(CatalogPlanet.from_payload(item))

            url = payload.get("next")

        self._log.debug(f"Catálogo descargado: {len(planets)} planetas en {len(visited)} páginas")
        return planets

    def _backoff(self, attempt: int, retry_after: Optional[str]) -> float:
        if retry_after:
            try:
                return max(0.0, float(retry_after))
            except ValueError:
                return self._min_backoff_s
        # Exponencial simple + jitter proporcional
        base = min(self._max_backoff_s, self._min_backoff_s * (2 ** attempt))
        return base + (0.15 * base)

    async def _request_json(self, method: str, url: str) -> dict[str, Any]:
        """
        Request HTTP con backoff.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx y errores de red: exponencial con jitter.
        - 4xx (no 429): error inmediato.
        """
        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._client.request(method, url)
            except httpx.TransportError as e:
                if attempt >= self._max_retries:
                    raise CatalogApiError(
                        f"Catálogo inaccesible tras {attempt} reintentos: {e!r}"
                    ) from e
                sleep_s = self._backoff(attempt, None)
                self._log.warning(f"Error de red con el catálogo ({e!r}), reintento en {sleep_s:.2f}s")
                await asyncio.sleep(sleep_s)
                continue

            if 200 <= resp.status_code < 300:
                try:
                    payload = resp.json()
                except ValueError as e:
                    raise CatalogApiError(f"JSON inválido desde {url}") from e
                if not isinstance(payload, dict):
                    raise CatalogApiError(f"Payload inesperado desde {url}")
                return payload

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise CatalogApiError(
                        f"Catálogo error {resp.status_code} tras {attempt} reintentos: {resp.text}"
                    )
                sleep_s = self._backoff(attempt, resp.headers.get("Retry-After"))
                self._log.warning(
                    f"Catálogo respondió {resp.status_code}, reintento en {sleep_s:.2f}s"
                )
                await asyncio.sleep(sleep_s)
                continue

            # Errores no recuperables
            raise CatalogApiError(
                f"Catálogo request falló {resp.status_code}: {resp.text}"
            )

        raise CatalogApiError(f"Catálogo sin respuesta para {url}")
