"""
Implementación del repositorio de planetas usando SQLAlchemy.

El repositorio no hace commit: el caller (dependencia de FastAPI o
el servicio de sincronización) controla la transacción.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from planets_api.domain.repositories.planet_repository import IPlanetRepository
from planets_api.domain.entities.planet import Planet, PlanetUpsert, BulkUpsertResult
from planets_api.infrastructure.database.models import PlanetModel


class PlanetRepositoryImpl(IPlanetRepository):
    """Implementación del repositorio de planetas con SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        """
        Inicializa el repositorio con una sesión de base de datos.

        Args:
            session: Sesión de SQLAlchemy
        """
        self.session = session

    async def create_many(self, planets: Sequence[Planet]) -> List[Planet]:
        """Inserta nuevos planetas."""
        db_planets = [
            PlanetModel(
                name=planet.name,
                climate=planet.climate,
                terrain=planet.terrain,
                reference_count=planet.reference_count,
            )
            for planet in planets
        ]

        self.session.add_all(db_planets)
        await self.session.flush()
        for db_planet in db_planets:
            await self.session.refresh(db_planet)

        return [self._to_entity(db_planet) for db_planet in db_planets]

    async def get_by_id(self, planet_id: int) -> Optional[Planet]:
        """Obtiene un planeta por su ID."""
        result = await self.session.execute(
            select(PlanetModel).where(PlanetModel.id == planet_id)
        )
        db_planet = result.scalar_one_or_none()

        if db_planet is None:
            return None

        return self._to_entity(db_planet)

    async def get_by_name(self, name: str) -> Optional[Planet]:
        """Obtiene un planeta por su nombre."""
        result = await self.session.execute(
            select(PlanetModel).where(PlanetModel.name == name)
        )
        db_planet = result.scalar_one_or_none()

        if db_planet is None:
            return None

        return self._to_entity(db_planet)

    async def get_all(self, skip: int = 0, limit: int = 100) -> List[Planet]:
        """Obtiene todos los planetas con paginación."""
        result = await self.session.execute(
            select(PlanetModel).order_by(PlanetModel.id).offset(skip).limit(limit)
        )
        db_planets = result.scalars().all()

        return [self._to_entity(db_planet) for db_planet in db_planets]

    async def update_many(self, planets: Sequence[Planet]) -> BulkUpsertResult:
        """Actualiza planetas existentes por nombre (sin upsert)."""
        result = BulkUpsertResult()
        existing = await self._load_by_names(p.name for p in planets)

        for planet in planets:
            db_planet = existing.get(planet.name)
            if db_planet is None:
                continue
            result.matched += 1
            if self._apply_fields(db_planet, planet.to_upsert().fields()):
                result.modified += 1

        await self.session.flush()
        return result

    async def bulk_upsert(self, operations: Sequence[PlanetUpsert]) -> BulkUpsertResult:
        """
        Crea o reemplaza campos por nombre.

        Lee primero las filas existentes del lote para poder distinguir
        matched / modified / upserted. Una clave sin cambios no se escribe.
        """
        result = BulkUpsertResult()
        if not operations:
            return result

        existing = await self._load_by_names(op.name for op in operations)

        for op in operations:
            db_planet = existing.get(op.name)
            if db_planet is None:
                db_planet = PlanetModel(name=op.name, **op.fields())
                self.session.add(db_planet)
                existing[op.name] = db_planet
                result.upserted += 1
                continue

            result.matched += 1
            if self._apply_fields(db_planet, op.fields()):
                result.modified += 1

        await self.session.flush()
        return result

    async def delete_many(self, names: Sequence[str]) -> int:
        """Elimina planetas por nombre."""
        if not names:
            return 0
        result = await self.session.execute(
            delete(PlanetModel).where(PlanetModel.name.in_(list(names)))
        )
        return result.rowcount or 0

    async def _load_by_names(self, names: Iterable[str]) -> Dict[str, PlanetModel]:
        """Carga las filas existentes para un conjunto de nombres."""
        unique_names = list(dict.fromkeys(names))
        if not unique_names:
            return {}
        result = await self.session.execute(
            select(PlanetModel).where(PlanetModel.name.in_(unique_names))
        )
        return {db_planet.name: db_planet for db_planet in result.scalars().all()}

    @staticmethod
    def _apply_fields(db_planet: PlanetModel, fields: Dict[str, Any]) -> bool:
        """Asigna los campos que difieren. Retorna True si hubo cambios."""
        changed = False
        for column, value in fields.items():
            if getattr(db_planet, column) != value:
                setattr(db_planet, column, value)
                changed = True
        return changed

    @staticmethod
    def _to_entity(db_planet: PlanetModel) -> Planet:
        """
        Convierte un modelo de base de datos a entidad de dominio.

        Args:
            db_planet: Modelo de SQLAlchemy

        Returns:
            Planet: Entidad de dominio
        """
        return Planet(
            id=db_planet.id,
            name=db_planet.name,
            climate=db_planet.climate or "",
            terrain=db_planet.terrain or "",
            reference_count=db_planet.reference_count or 0,
            created_at=db_planet.created_at,
            updated_at=db_planet.updated_at
        )
