"""
Interfaz del repositorio de planetas.
Define el contrato que debe cumplir cualquier implementación.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from planets_api.domain.entities.planet import Planet, PlanetUpsert, BulkUpsertResult


class IPlanetRepository(ABC):
    """
    Interfaz del repositorio de planetas.
    Define las operaciones de persistencia para planetas.
    """

    @abstractmethod
    async def create_many(self, planets: Sequence[Planet]) -> List[Planet]:
        """
        Inserta nuevos planetas.

        Args:
            planets: Entidades a crear

        Returns:
            List[Planet]: Planetas creados con ID asignado
        """
        pass

    @abstractmethod
    async def get_by_id(self, planet_id: int) -> Optional[Planet]:
        """
        Obtiene un planeta por su ID.

        Args:
            planet_id: ID del planeta

        Returns:
            Optional[Planet]: Planeta encontrado o None
        """
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Planet]:
        """
        Obtiene un planeta por su nombre (clave natural).

        Args:
            name: Nombre exacto del planeta

        Returns:
            Optional[Planet]: Planeta encontrado o None
        """
        pass

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> List[Planet]:
        """
        Obtiene todos los planetas con paginación.

        Args:
            skip: Número de registros a saltar
            limit: Número máximo de registros a retornar

        Returns:
            List[Planet]: Lista de planetas
        """
        pass

    @abstractmethod
    async def update_many(self, planets: Sequence[Planet]) -> BulkUpsertResult:
        """
        Actualiza planetas existentes por nombre. No crea los que faltan.

        Returns:
            BulkUpsertResult: matched/modified (upserted siempre 0)
        """
        pass

    @abstractmethod
    async def bulk_upsert(self, operations: Sequence[PlanetUpsert]) -> BulkUpsertResult:
        """
        Crea o reemplaza campos por clave natural.

        Args:
            operations: Operaciones de escritura (una por nombre)

        Returns:
            BulkUpsertResult: Conteos de claves encontradas, modificadas y creadas
        """
        pass

    @abstractmethod
    async def delete_many(self, names: Sequence[str]) -> int:
        """
        Elimina planetas por nombre.

        Returns:
            int: Cantidad de planetas eliminados
        """
        pass
