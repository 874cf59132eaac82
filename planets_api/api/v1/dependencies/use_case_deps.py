"""
Dependencias para inyección de casos de uso y servicios.
"""
from fastapi import Depends, Request

from planets_api.application.use_cases.planet_use_cases import PlanetUseCases
from planets_api.domain.repositories.planet_repository import IPlanetRepository
from planets_api.api.v1.dependencies.repository_deps import get_planet_repository
from planets_api.infrastructure.external.catalog_sync.scheduler import CatalogSyncScheduler
from planets_api.shared.exceptions.sync import SchedulerStoppedError


async def get_planet_use_cases(
    planet_repository: IPlanetRepository = Depends(get_planet_repository)
) -> PlanetUseCases:
    """
    Dependencia para obtener los casos de uso de planetas.

    Args:
        planet_repository: Repositorio de planetas

    Returns:
        PlanetUseCases: Instancia de casos de uso de planetas
    """
    return PlanetUseCases(planet_repository)


def get_sync_scheduler(request: Request) -> CatalogSyncScheduler:
    """
    Scheduler de sincronización registrado en el startup.

    Raises:
        SchedulerStoppedError: si la aplicación no lo inicializó o ya lo cerró
    """
    scheduler = getattr(request.app.state, "sync_scheduler", None)
    if scheduler is None:
        raise SchedulerStoppedError()
    return scheduler
