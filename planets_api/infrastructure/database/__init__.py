"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from planets_api.infrastructure.database.session import Base, Database, get_db
from planets_api.infrastructure.database.models import PlanetModel

__all__ = ["Base", "Database", "get_db", "PlanetModel"]
