"""
Configuración central de la aplicación.
Gestiona variables de entorno y configuraciones globales.
Soporta configuración dinámica para desarrollo (ENVIRONMENT=development)
y producción (ENVIRONMENT=production).
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuración de la aplicación.
    Lee variables de entorno y proporciona valores por defecto.

    Grupos de configuración:
    - Servidor y entorno (HOST, PORT, ENVIRONMENT)
    - Base de datos: DATABASE_URL completa o por componentes
    - Logging: consola (texto o JSON) y archivo con rotación
    - Catálogo externo (SWAPI) y sincronización periódica
    """

    # Configuración de la aplicación
    APP_NAME: str = Field(default="Star Wars Planets API")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuración del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)

    # Base de datos - Componentes separados (recomendado para flexibilidad)
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="planets_user")
    DATABASE_PASSWORD: str = Field(default="planets_pass")
    DATABASE_NAME: str = Field(default="sw_api")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")
    LOG_JSON: bool = Field(default=False)
    LOG_CONTEXT: str = Field(default="sw-api")
    LOG_ROTATION: str = Field(default="500 MB")
    LOG_RETENTION: str = Field(default="10 days")

    # Catálogo externo (API compatible con SWAPI)
    CATALOG_BASE_URL: str = Field(default="https://swapi.dev/api")
    CATALOG_TIMEOUT_S: float = Field(default=30.0)
    CATALOG_MAX_RETRIES: int = Field(default=4)
    CATALOG_MIN_BACKOFF_S: float = Field(default=0.8)
    CATALOG_MAX_BACKOFF_S: float = Field(default=20.0)

    # Sincronización periódica catálogo -> base de datos
    SYNC_ENABLED: bool = Field(default=True)
    SYNC_INTERVAL_SECONDS: float = Field(default=4 * 60 * 60)
    SYNC_RUN_ON_STARTUP: bool = Field(default=False)
    SYNC_FETCH_TIMEOUT_S: float = Field(default=120.0)
    # Si el catálogo devuelve 0 registros válidos, no se aplica la escritura
    SYNC_SKIP_EMPTY_FETCH: bool = Field(default=True)
    SYNC_UPSERT_BATCH_SIZE: int = Field(default=200)

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL está definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuración de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuración de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON válido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuración
settings = Settings()
