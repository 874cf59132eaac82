from planets_api.infrastructure.repositories.planet_repository import PlanetRepositoryImpl

__all__ = ["PlanetRepositoryImpl"]
