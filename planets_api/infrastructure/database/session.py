"""
Gestión de sesiones de base de datos.

El engine y la session factory viven en una instancia de `Database`
que se construye en el startup de la aplicación (o del script CLI),
se pasa explícitamente a quien la necesite y se cierra en el shutdown.
"""
from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base


# Base para modelos de SQLAlchemy
Base = declarative_base()


def _create_engine_args(
    database_url: str,
    *,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> dict:
    """
    Construye los argumentos del engine según el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": echo,
        "future": True,
    }

    # Configuración de pool solo para PostgreSQL
    if "postgresql" in database_url:
        args.update({
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_pre_ping": True,  # Verifica conexión antes de usar
        })

    return args


class Database:
    """
    Handle de la base de datos con ciclo de vida explícito.

    Uso:
        database = Database(settings.effective_database_url)
        await database.init_db()
        async with database.session_factory() as session:
            ...
        await database.close()
    """

    def __init__(
        self,
        database_url: str,
        *,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ) -> None:
        self.url = database_url
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            **_create_engine_args(
                database_url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=max_overflow,
            ),
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )

    async def init_db(self) -> None:
        """Inicializa la base de datos creando todas las tablas."""
        # Registrar modelos en Base.metadata antes de create_all
        from planets_api.infrastructure.database import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Cierra las conexiones de la base de datos."""
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Generador de sesiones de base de datos.
    Para usar como dependencia en FastAPI.

    Toma el `Database` registrado en `app.state.database` durante el startup.

    Yields:
        AsyncSession: Sesión de base de datos
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
