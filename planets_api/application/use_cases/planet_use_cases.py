"""
Casos de uso relacionados con planetas.
"""
from typing import List, Sequence

from planets_api.domain.repositories.planet_repository import IPlanetRepository
from planets_api.domain.entities.planet import Planet
from planets_api.application.dto.planet_dto import (
    PlanetCreateDTO,
    PlanetUpdateDTO,
    PlanetResponseDTO,
    PlanetListResponseDTO,
    BulkWriteResponseDTO,
    DeletePlanetsDTO,
    DeleteResponseDTO,
)
from planets_api.shared.exceptions.domain import (
    EntityNotFoundException,
    EntityAlreadyExistsException,
    ValidationException,
)


class PlanetUseCases:
    """
    Casos de uso para operaciones con planetas.
    Orquesta la lógica de aplicación sobre el repositorio.
    """

    def __init__(self, planet_repository: IPlanetRepository):
        """
        Inicializa los casos de uso con sus dependencias.

        Args:
            planet_repository: Repositorio de planetas
        """
        self.planet_repository = planet_repository

    async def list_planets(self, skip: int = 0, limit: int = 100) -> PlanetListResponseDTO:
        """Lista planetas con paginación."""
        planets = await self.planet_repository.get_all(skip=skip, limit=limit)
        return PlanetListResponseDTO(
            planets=[self._to_response_dto(planet) for planet in planets],
            skip=skip,
            limit=limit,
        )

    async def get_planet_by_name(self, name: str) -> PlanetResponseDTO:
        """
        Obtiene un planeta por su nombre.

        Raises:
            EntityNotFoundException: Si no existe
        """
        planet = await self.planet_repository.get_by_name(name)
        if not planet:
            raise EntityNotFoundException("Planet", "name", name)
        return self._to_response_dto(planet)

    async def get_planet_by_id(self, planet_id: int) -> PlanetResponseDTO:
        """
        Obtiene un planeta por su ID.

        Raises:
            EntityNotFoundException: Si no existe
        """
        planet = await self.planet_repository.get_by_id(planet_id)
        if not planet:
            raise EntityNotFoundException("Planet", "id", planet_id)
        return self._to_response_dto(planet)

    async def create_planets(self, dtos: Sequence[PlanetCreateDTO]) -> List[PlanetResponseDTO]:
        """
        Crea uno o varios planetas.

        Args:
            dtos: Datos de los planetas a crear

        Returns:
            List[PlanetResponseDTO]: Planetas creados

        Raises:
            ValidationException: Lista vacía o datos inválidos
            EntityAlreadyExistsException: Nombre repetido en el pedido o ya existente
        """
        if not dtos:
            raise ValidationException("Se requiere al menos un planeta", field="planets")

        planets = self._to_entities(dtos)

        seen = set()
        for planet in planets:
            if planet.name in seen:
                raise EntityAlreadyExistsException("Planet", "name", planet.name)
            seen.add(planet.name)
            if await self.planet_repository.get_by_name(planet.name):
                raise EntityAlreadyExistsException("Planet", "name", planet.name)

        created = await self.planet_repository.create_many(planets)
        return [self._to_response_dto(planet) for planet in created]

    async def update_planets(self, dtos: Sequence[PlanetUpdateDTO]) -> BulkWriteResponseDTO:
        """
        Actualiza planetas existentes por nombre. Los nombres inexistentes se ignoran.
        """
        if not dtos:
            raise ValidationException("Se requiere al menos un planeta", field="planets")

        result = await self.planet_repository.update_many(self._to_entities(dtos))
        return BulkWriteResponseDTO(matched=result.matched, modified=result.modified)

    async def delete_planets(self, dto: DeletePlanetsDTO) -> DeleteResponseDTO:
        """Elimina planetas por nombre."""
        deleted = await self.planet_repository.delete_many(dto.names)
        return DeleteResponseDTO(deleted=deleted)

    @staticmethod
    def _to_entities(dtos: Sequence[PlanetCreateDTO]) -> List[Planet]:
        try:
            return [
                Planet(
                    name=dto.name,
                    climate=dto.climate,
                    terrain=dto.terrain,
                    reference_count=dto.reference_count,
                )
                for dto in dtos
            ]
        except ValueError as e:
            raise ValidationException(str(e), field="name") from e

    @staticmethod
    def _to_response_dto(planet: Planet) -> PlanetResponseDTO:
        """Convierte entidad de dominio a DTO de respuesta."""
        return PlanetResponseDTO(
            id=planet.id,
            name=planet.name,
            climate=planet.climate,
            terrain=planet.terrain,
            reference_count=planet.reference_count,
            created_at=planet.created_at,
            updated_at=planet.updated_at,
        )
