"""
DTOs relacionados con planetas.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class PlanetCreateDTO(BaseModel):
    """DTO para crear un planeta."""

    name: str = Field(..., min_length=1, max_length=255, description="Nombre del planeta (clave natural)")
    climate: str = Field(default="", max_length=255, description="Clima")
    terrain: str = Field(default="", max_length=255, description="Terreno")
    reference_count: int = Field(default=0, ge=0, description="Cantidad de películas en las que aparece")


class PlanetUpdateDTO(PlanetCreateDTO):
    """DTO para actualizar un planeta existente (se busca por nombre)."""


class PlanetResponseDTO(BaseModel):
    """DTO de respuesta para un planeta."""

    id: int
    name: str
    climate: str
    terrain: str
    reference_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuración de Pydantic."""
        from_attributes = True


class PlanetListResponseDTO(BaseModel):
    """DTO de respuesta para lista de planetas."""

    planets: List[PlanetResponseDTO]
    skip: int
    limit: int


class BulkWriteResponseDTO(BaseModel):
    """Conteos de una actualización masiva."""

    matched: int
    modified: int


class DeletePlanetsDTO(BaseModel):
    """DTO para eliminar planetas por nombre."""

    names: List[str] = Field(..., min_length=1)


class DeleteResponseDTO(BaseModel):
    deleted: int
