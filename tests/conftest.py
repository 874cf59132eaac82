"""
Configuración de fixtures para pytest.
"""
from __future__ import annotations

from typing import AsyncGenerator, Iterable, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from planets_api.infrastructure.database.session import Database
from planets_api.infrastructure.external.catalog_sync.types import CatalogPlanet


class FakeCatalogClient:
    """Cliente del catálogo en memoria: devuelve un snapshot fijo o levanta un error."""

    def __init__(
        self,
        planets: Optional[Iterable[CatalogPlanet]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.planets: List[CatalogPlanet] = list(planets or [])
        self.error = error
        self.calls = 0
        self.closed = False

    async def fetch_all_planets(self) -> List[CatalogPlanet]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.planets)

    async def aclose(self) -> None:
        self.closed = True


def planet(name, climate: str = "arid", terrain: str = "desert", films: int = 0) -> CatalogPlanet:
    """Registro del catálogo con `films` URLs de películas."""
    works = tuple(f"https://swapi.dev/api/films/{i}/" for i in range(1, films + 1))
    return CatalogPlanet(name=name, climate=climate, terrain=terrain, works=works)


@pytest.fixture
def catalog_planet():
    return planet


@pytest.fixture
def fake_catalog_client():
    return FakeCatalogClient


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """
    Base SQLite en archivo por test.

    Se usa archivo (no :memory:) para que todas las conexiones del pool
    vean las mismas tablas.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'planets.db'}")
    await db.init_db()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Sesión de base de datos para tests de repositorio."""
    async with database.session_factory() as session:
        yield session
