"""
Manejadores de eventos de inicio y cierre de la aplicación.

Los recursos (base de datos, cliente del catálogo, scheduler de
sincronización) se crean en el startup, se registran en `app.state`
y se liberan en el shutdown en orden inverso.
"""
import socket
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
from fastapi import FastAPI
from loguru import logger

from planets_api.core.config import Settings, settings
from planets_api.infrastructure.database.session import Database
from planets_api.infrastructure.external.catalog_sync.scheduler import CatalogSyncScheduler
from planets_api.infrastructure.external.catalog_sync.sync_service import (
    build_catalog_client,
    build_sync_service,
)


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[context]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(config: Settings = settings) -> None:
    """
    Configura los sinks de loguru.

    - Consola: texto coloreado o JSON (LOG_JSON=true)
    - Archivo: con rotación y retención (si LOG_FILE no está vacío)
    Todos los registros llevan `context` (nombre del servicio) y `host`.
    """
    logger.remove()
    logger.configure(extra={"context": config.LOG_CONTEXT, "host": socket.gethostname()})

    if config.LOG_JSON:
        logger.add(sys.stderr, level=config.LOG_LEVEL, serialize=True)
    else:
        logger.add(sys.stderr, level=config.LOG_LEVEL, format=CONSOLE_FORMAT, colorize=True)

    if config.LOG_FILE:
        logger.add(
            config.LOG_FILE,
            rotation=config.LOG_ROTATION,
            retention=config.LOG_RETENTION,
            level=config.LOG_LEVEL,
            serialize=config.LOG_JSON,
            enqueue=True,
        )


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicación.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Función asíncrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicación."""
        try:
            configure_logging(settings)
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Validar configuración crítica
            _validate_config()

            # Inicializar base de datos (crea tablas si no existen)
            database = Database(
                settings.effective_database_url,
                echo=settings.DEBUG,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
            )
            app.state.database = database
            await database.init_db()
            logger.info("Base de datos inicializada")

            # Sincronización con el catálogo
            client = build_catalog_client(settings)
            app.state.catalog_client = client
            scheduler = CatalogSyncScheduler(
                build_sync_service(settings, database, client),
                interval_seconds=settings.SYNC_INTERVAL_SECONDS,
            )
            app.state.sync_scheduler = scheduler

            if settings.SYNC_ENABLED:
                scheduler.start(run_immediately=settings.SYNC_RUN_ON_STARTUP)
            else:
                logger.warning("Sincronización periódica deshabilitada (SYNC_ENABLED=false)")

            logger.success("Aplicación iniciada correctamente")

            _print_available_urls()

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Valida la configuración crítica y avisa valores sospechosos."""
    warnings = []

    if not settings.DATABASE_URL and settings.DATABASE_PASSWORD == "planets_pass":
        warnings.append("DATABASE_PASSWORD con valor por defecto")

    if settings.SYNC_INTERVAL_SECONDS < 60:
        warnings.append(
            f"SYNC_INTERVAL_SECONDS={settings.SYNC_INTERVAL_SECONDS} es muy bajo para el catálogo público"
        )

    if settings.SYNC_FETCH_TIMEOUT_S >= settings.SYNC_INTERVAL_SECONDS:
        warnings.append("SYNC_FETCH_TIMEOUT_S es mayor o igual al intervalo de sincronización")

    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def _print_available_urls() -> None:
    """Imprime las URLs disponibles de la aplicación."""
    # Determinar la URL base de acceso
    if settings.HOST == "0.0.0.0":
        access_host = "localhost"
    else:
        access_host = settings.HOST

    base_url = f"http://{access_host}:{settings.PORT}"

    logger.info("=" * 70)
    logger.info("URLS DISPONIBLES:")
    logger.info(f"  Swagger UI:  {base_url}/docs")
    logger.info(f"  Planetas:    {base_url}/api/v1/planets")
    logger.info(f"  Sync status: {base_url}/api/v1/sync/status")
    logger.info(f"  Health:      {base_url}/health")
    logger.info("=" * 70)


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicación.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Función asíncrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicación."""
        logger.info("Cerrando aplicación...")

        # Detener el timer y esperar el ciclo en curso
        scheduler = getattr(app.state, "sync_scheduler", None)
        if scheduler is not None:
            await scheduler.stop()

        client = getattr(app.state, "catalog_client", None)
        if client is not None:
            await client.aclose()
            logger.info("Cliente del catálogo cerrado")

        # Cerrar conexiones de base de datos
        database = getattr(app.state, "database", None)
        if database is not None:
            await database.close()
            logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicación cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Lifespan de FastAPI construido con los manejadores de inicio y cierre.

    El cierre corre también si el inicio falla a mitad de camino.
    """
    try:
        await startup_handler(app)()
        yield
    finally:
        await shutdown_handler(app)()
