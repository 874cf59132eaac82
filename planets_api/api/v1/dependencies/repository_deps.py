"""
Dependencias para inyección de repositorios.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from planets_api.infrastructure.database.session import get_db
from planets_api.infrastructure.repositories.planet_repository import PlanetRepositoryImpl


async def get_planet_repository(
    session: AsyncSession = Depends(get_db)
) -> PlanetRepositoryImpl:
    """
    Dependencia para obtener el repositorio de planetas.

    Args:
        session: Sesión de base de datos

    Returns:
        PlanetRepositoryImpl: Instancia del repositorio de planetas
    """
    return PlanetRepositoryImpl(session)
