from .planet_use_cases import PlanetUseCases

__all__ = ["PlanetUseCases"]
