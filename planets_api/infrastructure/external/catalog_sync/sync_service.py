"""
Servicio de sincronización catálogo -> base de datos.

Diseño (resumen):
- Descarga el snapshot completo del catálogo (con timeout)
- Reconcilia registros -> operaciones de upsert por nombre
- Escribe en lotes, una transacción por lote
- Si un lote falla se reintenta clave por clave para aislar las rechazadas
- Devuelve un SyncResult; nunca levanta por fallas de fetch o escritura

Estrategia de idempotencia:
- UPSERT por nombre: repetir un ciclo sin cambios en el catálogo no modifica filas.
- Un fetch fallido no toca la base.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Sequence

from loguru import logger
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from planets_api.core.config import Settings
from planets_api.domain.entities.planet import BulkUpsertResult, PlanetUpsert
from planets_api.domain.repositories.planet_repository import IPlanetRepository
from planets_api.infrastructure.database.session import Database
from planets_api.infrastructure.repositories.planet_repository import PlanetRepositoryImpl
from planets_api.shared.constants.sync_constants import SyncStatus, SyncTrigger

from .catalog_client import CatalogClient
from .reconciler import reconcile
from .types import SyncResult

RepositoryFactory = Callable[[AsyncSession], IPlanetRepository]


def _error_text(exc: BaseException) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig or exc) or exc.__class__.__name__


class PlanetCatalogSync:
    """
    Orquestador de un ciclo de sincronización.

    No controla concurrencia: de eso se encarga CatalogSyncScheduler.
    """

    def __init__(
        self,
        *,
        database: Database,
        client: CatalogClient,
        fetch_timeout_s: float = 120.0,
        skip_empty_fetch: bool = True,
        upsert_batch_size: int = 200,
        repository_factory: RepositoryFactory = PlanetRepositoryImpl,
    ) -> None:
        if upsert_batch_size <= 0:
            raise ValueError("upsert_batch_size debe ser mayor a 0")
        self._database = database
        self._client = client
        self._fetch_timeout_s = fetch_timeout_s
        self._skip_empty_fetch = skip_empty_fetch
        self._upsert_batch_size = upsert_batch_size
        self._repository_factory = repository_factory
        self._log = logger.bind(component="catalog_sync")

    @property
    def client(self) -> CatalogClient:
        return self._client

    async def run_once(self, trigger: SyncTrigger = SyncTrigger.MANUAL) -> SyncResult:
        """
        Ejecuta un ciclo completo: fetch -> reconcile -> upsert.
        """
        result = SyncResult(trigger=trigger)
        log = self._log.bind(trigger=trigger.value)
        log.info("Iniciando sincronización de planetas")

        # 1) Fetch (la base no se toca si falla)
        try:
            records = await asyncio.wait_for(
                self._client.fetch_all_planets(), timeout=self._fetch_timeout_s
            )
        except asyncio.TimeoutError:
            return self._report(
                result.finish(
                    SyncStatus.FETCH_FAILURE,
                    f"Timeout de {self._fetch_timeout_s}s descargando el catálogo",
                )
            )
        except Exception as e:
            log.opt(exception=e).debug("Detalle del fallo de fetch")
            return self._report(result.finish(SyncStatus.FETCH_FAILURE, str(e) or repr(e)))

        # 2) Reconcile
        plan = reconcile(records)
        result.fetched = len(records)
        result.skipped = plan.skipped
        if plan.skipped:
            log.warning(
                f"Registros descartados: {plan.invalid} inválidos, {plan.duplicates} duplicados"
            )

        if not plan.operations and self._skip_empty_fetch:
            return self._report(
                result.finish(SyncStatus.SKIPPED, "El catálogo no devolvió planetas válidos")
            )

        # 3) Write
        try:
            applied = await self._write(plan.operations)
        except Exception as e:
            log.exception("Error inesperado escribiendo planetas")
            return self._report(result.finish(SyncStatus.WRITE_FAILURE, str(e) or repr(e)))

        result.matched = applied.matched
        result.modified = applied.modified
        result.upserted = applied.upserted
        result.failed_keys = dict(applied.failed)

        if applied.failed:
            return self._report(
                result.finish(
                    SyncStatus.WRITE_FAILURE,
                    f"{len(applied.failed)} planetas rechazados por la base",
                )
            )
        return self._report(result.finish(SyncStatus.SUCCESS))

    async def _write(self, operations: Sequence[PlanetUpsert]) -> BulkUpsertResult:
        totals = BulkUpsertResult()
        size = self._upsert_batch_size

        for start in range(0, len(operations), size):
            chunk = operations[start:start + size]
            try:
                applied = await self._upsert(chunk)
            except (OperationalError, InterfaceError, OSError) as e:
                # Base inaccesible: no se intenta aislar claves
                error = _error_text(e)
                self._log.error(f"Base de datos inaccesible durante la escritura: {error}")
                for op in operations[start:]:
                    totals.failed[op.name] = error
                break
            except SQLAlchemyError as e:
                self._log.warning(
                    f"Lote de {len(chunk)} planetas rechazado ({_error_text(e)}), reintentando por clave"
                )
                applied = await self._upsert_per_key(chunk)
            totals.merge(applied)

        return totals

    async def _upsert(self, chunk: Sequence[PlanetUpsert]) -> BulkUpsertResult:
        async with self._database.session_factory() as session:
            async with session.begin():
                return await self._repository_factory(session).bulk_upsert(chunk)

    async def _upsert_per_key(self, chunk: Sequence[PlanetUpsert]) -> BulkUpsertResult:
        totals = BulkUpsertResult()
        for op in chunk:
            try:
                totals.merge(await self._upsert([op]))
            except SQLAlchemyError as e:
                totals.failed[op.name] = _error_text(e)
                self._log.error(f"Planeta '{op.name}' rechazado: {totals.failed[op.name]}")
        return totals

    def _report(self, result: SyncResult) -> SyncResult:
        summary = (
            f"status={result.status.value} fetched={result.fetched} skipped={result.skipped} "
            f"matched={result.matched} modified={result.modified} upserted={result.upserted} "
            f"duration={result.duration_s}s"
        )
        log = self._log.bind(trigger=result.trigger.value)
        if result.status == SyncStatus.SUCCESS:
            log.info(f"Sincronización completada: {summary}")
        elif result.status == SyncStatus.SKIPPED:
            log.warning(f"Sincronización omitida ({result.error}): {summary}")
        else:
            log.error(f"Sincronización fallida ({result.error}): {summary}")
        return result


def build_catalog_client(settings: Settings) -> CatalogClient:
    return CatalogClient(
        base_url=settings.CATALOG_BASE_URL,
        timeout_s=settings.CATALOG_TIMEOUT_S,
        max_retries=settings.CATALOG_MAX_RETRIES,
        min_backoff_s=settings.CATALOG_MIN_BACKOFF_S,
        max_backoff_s=settings.CATALOG_MAX_BACKOFF_S,
    )


def build_sync_service(
    settings: Settings,
    database: Database,
    client: Optional[CatalogClient] = None,
) -> PlanetCatalogSync:
    """
    Construye el servicio desde Settings.

    El caller es dueño del cliente y debe cerrarlo (`await client.aclose()`).
    """
    return PlanetCatalogSync(
        database=database,
        client=client or build_catalog_client(settings),
        fetch_timeout_s=settings.SYNC_FETCH_TIMEOUT_S,
        skip_empty_fetch=settings.SYNC_SKIP_EMPTY_FETCH,
        upsert_batch_size=settings.SYNC_UPSERT_BATCH_SIZE,
    )
