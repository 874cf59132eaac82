"""
Endpoints para operaciones con planetas.
"""
from typing import List
from fastapi import APIRouter, Depends, Query, status

from planets_api.application.use_cases.planet_use_cases import PlanetUseCases
from planets_api.application.dto.planet_dto import (
    PlanetCreateDTO,
    PlanetUpdateDTO,
    PlanetResponseDTO,
    PlanetListResponseDTO,
    BulkWriteResponseDTO,
    DeletePlanetsDTO,
    DeleteResponseDTO,
)
from planets_api.api.v1.dependencies.use_case_deps import get_planet_use_cases


router = APIRouter(prefix="/planets", tags=["Planets"])


@router.get(
    "",
    response_model=PlanetListResponseDTO,
    summary="Listar planetas"
)
async def list_planets(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    use_cases: PlanetUseCases = Depends(get_planet_use_cases)
) -> PlanetListResponseDTO:
    """
    Lista los planetas persistidos con paginación.

    Args:
        skip: Número de registros a saltar
        limit: Número máximo de registros a retornar
        use_cases: Casos de uso de planetas (inyectado)
    """
    return await use_cases.list_planets(skip=skip, limit=limit)


@router.get(
    "/name/{name}",
    response_model=PlanetResponseDTO,
    summary="Obtener un planeta por nombre"
)
async def get_planet_by_name(
    name: str,
    use_cases: PlanetUseCases = Depends(get_planet_use_cases)
) -> PlanetResponseDTO:
    """Busca un planeta por nombre exacto (sensible a mayúsculas)."""
    return await use_cases.get_planet_by_name(name)


@router.get(
    "/id/{planet_id}",
    response_model=PlanetResponseDTO,
    summary="Obtener un planeta por ID"
)
async def get_planet_by_id(
    planet_id: int,
    use_cases: PlanetUseCases = Depends(get_planet_use_cases)
) -> PlanetResponseDTO:
    return await use_cases.get_planet_by_id(planet_id)


@router.post(
    "",
    response_model=List[PlanetResponseDTO],
    status_code=status.HTTP_201_CREATED,
    summary="Crear planetas"
)
async def create_planets(
    dtos: List[PlanetCreateDTO],
    use_cases: PlanetUseCases = Depends(get_planet_use_cases)
) -> List[PlanetResponseDTO]:
    """
    Crea uno o varios planetas.

    Responde 409 si algún nombre ya existe o se repite en el pedido.
    """
    return await use_cases.create_planets(dtos)


@router.put(
    "",
    response_model=BulkWriteResponseDTO,
    summary="Actualizar planetas por nombre"
)
async def update_planets(
    dtos: List[PlanetUpdateDTO],
    use_cases: PlanetUseCases = Depends(get_planet_use_cases)
) -> BulkWriteResponseDTO:
    """
    Actualiza clima, terreno y referencias de planetas existentes.
    Los nombres que no existen se ignoran (no se crean).
    """
    return await use_cases.update_planets(dtos)


@router.delete(
    "",
    response_model=DeleteResponseDTO,
    summary="Eliminar planetas por nombre"
)
async def delete_planets(
    dto: DeletePlanetsDTO,
    use_cases: PlanetUseCases = Depends(get_planet_use_cases)
) -> DeleteResponseDTO:
    return await use_cases.delete_planets(dto)
