"""
Data Transfer Objects (DTOs) para la capa de aplicación.
"""
from .planet_dto import (
    PlanetCreateDTO,
    PlanetUpdateDTO,
    PlanetResponseDTO,
    PlanetListResponseDTO,
    BulkWriteResponseDTO,
    DeletePlanetsDTO,
    DeleteResponseDTO,
)
from .sync_dto import SyncResultDTO, SyncStatusDTO, SyncIntervalResponseDTO

__all__ = [
    "PlanetCreateDTO",
    "PlanetUpdateDTO",
    "PlanetResponseDTO",
    "PlanetListResponseDTO",
    "BulkWriteResponseDTO",
    "DeletePlanetsDTO",
    "DeleteResponseDTO",
    "SyncResultDTO",
    "SyncStatusDTO",
    "SyncIntervalResponseDTO",
]
