"""
Endpoints para la sincronización con el catálogo de planetas.
Permite disparar un ciclo manual, consultar el estado y cambiar el intervalo.
"""
from fastapi import APIRouter, Depends, Query

from planets_api.application.dto.sync_dto import (
    SyncIntervalResponseDTO,
    SyncResultDTO,
    SyncStatusDTO,
)
from planets_api.api.v1.dependencies.use_case_deps import get_sync_scheduler
from planets_api.infrastructure.external.catalog_sync.scheduler import CatalogSyncScheduler


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/trigger",
    response_model=SyncResultDTO,
    summary="Ejecutar una sincronización ahora"
)
async def trigger_sync(
    wait_if_busy: bool = Query(
        True,
        description="Si hay un ciclo en curso, esperar el siguiente en vez de responder 409"
    ),
    scheduler: CatalogSyncScheduler = Depends(get_sync_scheduler)
) -> SyncResultDTO:
    """
    Ejecuta un ciclo catálogo -> base de datos y devuelve su resultado.

    Errores:
    - 502: el catálogo no respondió (la base no se toca)
    - 500: la base rechazó algunas claves (detalle en `details.failed_keys`)
    - 409: ciclo en curso y wait_if_busy=false
    - 503: el scheduler está detenido
    """
    result = await scheduler.trigger_sync(wait_if_busy=wait_if_busy)
    return SyncResultDTO.from_result(result)


@router.get(
    "/status",
    response_model=SyncStatusDTO,
    summary="Estado del scheduler de sincronización"
)
async def get_sync_status(
    scheduler: CatalogSyncScheduler = Depends(get_sync_scheduler)
) -> SyncStatusDTO:
    return SyncStatusDTO.from_status(scheduler.status())


@router.post(
    "/interval",
    response_model=SyncIntervalResponseDTO,
    summary="Cambiar el intervalo de sincronización"
)
async def update_sync_interval(
    seconds: float = Query(..., gt=0, description="Nuevo intervalo en segundos"),
    scheduler: CatalogSyncScheduler = Depends(get_sync_scheduler)
) -> SyncIntervalResponseDTO:
    """
    Reprograma el job periódico. Si el timer no está activo, el valor
    se usa en el próximo start().
    """
    scheduler.reschedule(seconds)
    return SyncIntervalResponseDTO(
        message=f"Intervalo actualizado a {seconds:g}s",
        interval_seconds=seconds,
    )
