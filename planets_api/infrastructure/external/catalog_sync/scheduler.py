"""
Scheduler de la sincronización del catálogo.

- Timer periódico con APScheduler (AsyncIOScheduler + IntervalTrigger).
- Un único ciclo a la vez (asyncio.Lock) y a lo sumo un ciclo en cola:
  los pedidos que llegan con un ciclo en curso comparten el siguiente.
- El job de APScheduler solo encola el ciclo; el ciclo corre como task
  propia, así apagar el timer nunca cancela una escritura a medias.

Estados: idle -> running -> idle; stopped es terminal.
"""

from __future__ import annotations

import asyncio
import inspect
from datetime import timezone
from typing import Any, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from planets_api.shared.constants.sync_constants import (
    SYNC_JOB_ID,
    SchedulerState,
    SyncStatus,
    SyncTrigger,
)
from planets_api.shared.exceptions.sync import (
    FetchFailureError,
    SchedulerAlreadyRunningError,
    SchedulerBusyError,
    SchedulerStoppedError,
    WriteFailureError,
)

from .sync_service import PlanetCatalogSync
from .types import SchedulerStatus, SyncResult, utc_now

Reporter = Callable[[SyncResult], Any]


def _validate_interval(interval_seconds: float) -> float:
    if interval_seconds is None or interval_seconds <= 0:
        raise ValueError(f"El intervalo debe ser mayor a 0 (recibido: {interval_seconds})")
    return float(interval_seconds)


class CatalogSyncScheduler:
    """
    Dueño del timer y de la compuerta de concurrencia de los ciclos.

    Uso:
        scheduler = CatalogSyncScheduler(service, interval_seconds=4 * 3600)
        scheduler.start()
        result = await scheduler.trigger_sync()
        await scheduler.stop()
    """

    def __init__(
        self,
        service: PlanetCatalogSync,
        *,
        interval_seconds: float = 4 * 60 * 60,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self._service = service
        self._interval_seconds = _validate_interval(interval_seconds)
        self._reporter = reporter
        self._log = logger.bind(component="sync_scheduler")

        self._timer: Optional[AsyncIOScheduler] = None
        self._cycle_lock = asyncio.Lock()
        self._pending: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()

        self._stopping = False
        self._stopped = asyncio.Event()
        self._state = SchedulerState.IDLE

        self._cycles_run = 0
        self._consecutive_failures = 0
        self._last_result: Optional[SyncResult] = None
        self._last_started_at = None
        self._last_finished_at = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_started(self) -> bool:
        return self._timer is not None

    def start(self, interval_seconds: Optional[float] = None, run_immediately: bool = False) -> None:
        """
        Registra el job periódico. Debe llamarse con el event loop corriendo.

        Raises:
            SchedulerStoppedError: después de stop()
            SchedulerAlreadyRunningError: si ya estaba iniciado
            ValueError: intervalo <= 0
        """
        if self._stopping:
            raise SchedulerStoppedError()
        if self._timer is not None:
            raise SchedulerAlreadyRunningError()
        if interval_seconds is not None:
            self._interval_seconds = _validate_interval(interval_seconds)

        job_kwargs: dict[str, Any] = {}
        if run_immediately:
            job_kwargs["next_run_time"] = utc_now()

        timer = AsyncIOScheduler(event_loop=asyncio.get_running_loop(), timezone=timezone.utc)
        timer.add_job(
            self._on_tick,
            trigger=IntervalTrigger(seconds=self._interval_seconds, timezone=timezone.utc),
            id=SYNC_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
            **job_kwargs,
        )
        timer.start()
        self._timer = timer
        self._log.info(f"Scheduler iniciado: sincronización cada {self._interval_seconds:.0f}s")

    def reschedule(self, interval_seconds: float) -> None:
        """Cambia el intervalo del timer (o el que se usara en start())."""
        if self._stopping:
            raise SchedulerStoppedError()
        self._interval_seconds = _validate_interval(interval_seconds)
        if self._timer is not None:
            self._timer.reschedule_job(
                SYNC_JOB_ID,
                trigger=IntervalTrigger(seconds=self._interval_seconds, timezone=timezone.utc),
            )
        self._log.info(f"Intervalo de sincronización actualizado a {self._interval_seconds:.0f}s")

    async def trigger_sync(self, wait_if_busy: bool = True) -> SyncResult:
        """
        Ejecuta un ciclo y espera su resultado.

        Si hay un ciclo en curso se espera el siguiente, compartido con
        todos los pedidos que llegan mientras tanto. Cancelar al caller no
        cancela el ciclo compartido.

        Raises:
            SchedulerBusyError: hay un ciclo en curso y wait_if_busy=False
            SchedulerStoppedError: el scheduler fue (o es) detenido
            FetchFailureError: el catálogo falló
            WriteFailureError: la base rechazó el lote o algunas claves
        """
        if self._stopping:
            raise SchedulerStoppedError()
        if not wait_if_busy and self.is_busy():
            raise SchedulerBusyError()

        task = self._submit(SyncTrigger.MANUAL)
        result = await asyncio.shield(task)

        if result.status == SyncStatus.FETCH_FAILURE:
            raise FetchFailureError(result)
        if result.status == SyncStatus.WRITE_FAILURE:
            raise WriteFailureError(result)
        return result

    def is_busy(self) -> bool:
        return self._cycle_lock.locked() or self._pending is not None

    async def stop(self) -> None:
        """
        Detiene el timer, rechaza nuevos ciclos y espera el ciclo en curso.

        Un ciclo aceptado con la compuerta libre corre igual, aunque todavía
        no haya empezado. Un ciclo en cola detrás de otro se resuelve con
        SchedulerStoppedError.
        Idempotente: llamadas concurrentes retornan cuando termina la primera.
        """
        if self._stopping:
            await self._stopped.wait()
            return

        self._stopping = True
        self._log.info("Deteniendo scheduler de sincronización")

        if self._timer is not None:
            self._timer.shutdown(wait=False)
            # AsyncIOScheduler aplica shutdown() en la siguiente vuelta del loop
            await asyncio.sleep(0)

        pending = [task for task in self._tasks if not task.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._timer = None
        self._state = SchedulerState.STOPPED
        self._stopped.set()
        self._log.info("Scheduler de sincronización detenido")

    def status(self) -> SchedulerStatus:
        next_run_at = None
        if self._timer is not None and not self._stopping:
            job = self._timer.get_job(SYNC_JOB_ID)
            if job is not None:
                next_run_at = job.next_run_time

        return SchedulerStatus(
            state=self._state,
            timer_active=self._timer is not None and not self._stopping,
            interval_seconds=self._interval_seconds,
            next_run_at=next_run_at,
            cycles_run=self._cycles_run,
            consecutive_failures=self._consecutive_failures,
            last_started_at=self._last_started_at,
            last_finished_at=self._last_finished_at,
            last_result=self._last_result,
        )

    async def _on_tick(self) -> None:
        if self._stopping:
            return
        self._submit(SyncTrigger.TIMER)

    def _submit(self, trigger: SyncTrigger) -> asyncio.Task:
        if self._pending is not None and not self._pending.done():
            return self._pending

        queued = self._cycle_lock.locked()
        task = asyncio.create_task(self._guarded_cycle(trigger, queued))
        self._pending = task
        self._tasks.add(task)
        task.add_done_callback(self._on_cycle_done)
        return task

    async def _guarded_cycle(self, trigger: SyncTrigger, queued: bool) -> SyncResult:
        async with self._cycle_lock:
            if self._pending is asyncio.current_task():
                self._pending = None
            if self._stopping and queued:
                raise SchedulerStoppedError()

            self._state = SchedulerState.RUNNING
            self._last_started_at = utc_now()
            try:
                result = await self._service.run_once(trigger)
            finally:
                self._last_finished_at = utc_now()
                self._state = SchedulerState.IDLE

            await self._record(result)
            return result

    async def _record(self, result: SyncResult) -> None:
        self._cycles_run += 1
        self._last_result = result
        if result.ok:
            self._consecutive_failures = 0
        else:
            self._consecutive_failures += 1

        if self._reporter is None:
            return
        try:
            outcome = self._reporter(result)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            self._log.exception("El reporter de sincronización falló")

    def _on_cycle_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._pending is task:
            self._pending = None
        if task.cancelled():
            return
        exc = task.exception()
        if isinstance(exc, SchedulerStoppedError):
            self._log.debug("Ciclo en cola descartado por stop()")
        elif exc is not None:
            self._log.opt(exception=exc).error("El ciclo de sincronización terminó con error")
