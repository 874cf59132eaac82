"""
Entidades del dominio.
"""
from planets_api.domain.entities.planet import Planet, PlanetUpsert, BulkUpsertResult

__all__ = [
    "Planet",
    "PlanetUpsert",
    "BulkUpsertResult",
]
