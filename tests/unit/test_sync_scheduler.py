"""
Tests unitarios para CatalogSyncScheduler.

Verifica:
- Un único ciclo a la vez y coalescencia de pedidos concurrentes.
- wait_if_busy=False responde BUSY.
- stop() espera el ciclo en curso y descarta el encolado.
- Timer periódico con APScheduler.
- Ticks del timer y pedidos manuales comparten la misma compuerta.
"""
from __future__ import annotations

import asyncio
from typing import List

import pytest

from planets_api.infrastructure.external.catalog_sync.scheduler import CatalogSyncScheduler
from planets_api.infrastructure.external.catalog_sync.types import SyncResult
from planets_api.shared.constants.sync_constants import SchedulerState, SyncStatus, SyncTrigger
from planets_api.shared.exceptions.sync import (
    FetchFailureError,
    SchedulerAlreadyRunningError,
    SchedulerBusyError,
    SchedulerStoppedError,
    WriteFailureError,
)


class BlockingSyncService:
    """Servicio falso: cada ciclo queda bloqueado hasta `release`."""

    def __init__(self, status: SyncStatus = SyncStatus.SUCCESS, blocked: bool = True) -> None:
        self.status = status
        self.release = asyncio.Event()
        if not blocked:
            self.release.set()
        self.started = asyncio.Event()
        self.calls: List[SyncTrigger] = []
        self.active = 0
        self.max_active = 0

    async def run_once(self, trigger: SyncTrigger) -> SyncResult:
        self.calls.append(trigger)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.started.set()
        try:
            await self.release.wait()
        finally:
            self.active -= 1
        error = None if self.status == SyncStatus.SUCCESS else "fallo simulado"
        return SyncResult(trigger=trigger, upserted=len(self.calls)).finish(self.status, error)


async def _wait_for(predicate, timeout: float = 2.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout=timeout)


@pytest.mark.asyncio
async def test_trigger_sync_returns_result() -> None:
    service = BlockingSyncService(blocked=False)
    scheduler = CatalogSyncScheduler(service)

    result = await scheduler.trigger_sync()

    assert result.status == SyncStatus.SUCCESS
    assert service.calls == [SyncTrigger.MANUAL]
    assert scheduler.state == SchedulerState.IDLE
    await scheduler.stop()


@pytest.mark.asyncio
async def test_concurrent_triggers_never_overlap_and_coalesce() -> None:
    """Con un ciclo en curso, los pedidos siguientes comparten un único ciclo encolado."""
    service = BlockingSyncService()
    scheduler = CatalogSyncScheduler(service)

    first = asyncio.create_task(scheduler.trigger_sync())
    await service.started.wait()
    assert scheduler.state == SchedulerState.RUNNING

    second = asyncio.create_task(scheduler.trigger_sync())
    third = asyncio.create_task(scheduler.trigger_sync())
    await asyncio.sleep(0)

    service.release.set()
    r1, r2, r3 = await asyncio.gather(first, second, third)

    assert len(service.calls) == 2
    assert service.max_active == 1
    assert r1 is not r2
    assert r2 is r3
    await scheduler.stop()


@pytest.mark.asyncio
async def test_busy_when_not_waiting() -> None:
    service = BlockingSyncService()
    scheduler = CatalogSyncScheduler(service)

    running = asyncio.create_task(scheduler.trigger_sync())
    await service.started.wait()

    with pytest.raises(SchedulerBusyError):
        await scheduler.trigger_sync(wait_if_busy=False)

    service.release.set()
    await running
    assert len(service.calls) == 1
    await scheduler.stop()


@pytest.mark.asyncio
async def test_failed_cycles_raise_with_result() -> None:
    scheduler = CatalogSyncScheduler(BlockingSyncService(SyncStatus.FETCH_FAILURE, blocked=False))

    with pytest.raises(FetchFailureError) as exc_info:
        await scheduler.trigger_sync()

    assert exc_info.value.result.status == SyncStatus.FETCH_FAILURE
    assert scheduler.state == SchedulerState.IDLE
    assert scheduler.status().consecutive_failures == 1
    await scheduler.stop()

    scheduler = CatalogSyncScheduler(BlockingSyncService(SyncStatus.WRITE_FAILURE, blocked=False))
    with pytest.raises(WriteFailureError):
        await scheduler.trigger_sync()
    await scheduler.stop()


@pytest.mark.asyncio
async def test_caller_cancellation_does_not_cancel_cycle() -> None:
    service = BlockingSyncService()
    reported: List[SyncResult] = []
    scheduler = CatalogSyncScheduler(service, reporter=reported.append)

    caller = asyncio.create_task(scheduler.trigger_sync())
    await service.started.wait()
    caller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await caller

    assert service.active == 1
    service.release.set()
    await scheduler.stop()

    assert len(reported) == 1
    assert reported[0].status == SyncStatus.SUCCESS


@pytest.mark.asyncio
async def test_stop_waits_for_inflight_cycle_and_drops_queued() -> None:
    service = BlockingSyncService()
    scheduler = CatalogSyncScheduler(service)

    inflight = asyncio.create_task(scheduler.trigger_sync())
    await service.started.wait()
    queued = asyncio.create_task(scheduler.trigger_sync())
    await asyncio.sleep(0)

    stopping = asyncio.create_task(scheduler.stop())
    await asyncio.sleep(0.05)
    assert not stopping.done()

    with pytest.raises(SchedulerStoppedError):
        await scheduler.trigger_sync()

    service.release.set()
    await stopping

    assert (await inflight).status == SyncStatus.SUCCESS
    with pytest.raises(SchedulerStoppedError):
        await queued
    assert len(service.calls) == 1
    assert scheduler.state == SchedulerState.STOPPED


@pytest.mark.asyncio
async def test_stop_is_idempotent() -> None:
    service = BlockingSyncService()
    scheduler = CatalogSyncScheduler(service)
    scheduler.start(interval_seconds=3600)

    running = asyncio.create_task(scheduler.trigger_sync())
    await service.started.wait()

    first = asyncio.create_task(scheduler.stop())
    second = asyncio.create_task(scheduler.stop())
    await asyncio.sleep(0.05)
    assert not second.done()

    service.release.set()
    await asyncio.gather(first, second, running)
    await scheduler.stop()

    assert scheduler.state == SchedulerState.STOPPED
    assert scheduler.status().timer_active is False


@pytest.mark.asyncio
async def test_start_twice_and_after_stop() -> None:
    scheduler = CatalogSyncScheduler(BlockingSyncService(blocked=False))
    scheduler.start(interval_seconds=3600)

    with pytest.raises(SchedulerAlreadyRunningError):
        scheduler.start()

    await scheduler.stop()

    with pytest.raises(SchedulerStoppedError):
        scheduler.start()


@pytest.mark.asyncio
async def test_interval_must_be_positive() -> None:
    scheduler = CatalogSyncScheduler(BlockingSyncService(blocked=False))

    with pytest.raises(ValueError):
        scheduler.start(interval_seconds=0)
    with pytest.raises(ValueError):
        CatalogSyncScheduler(BlockingSyncService(), interval_seconds=-1)

    await scheduler.stop()


@pytest.mark.asyncio
async def test_timer_runs_cycles_periodically() -> None:
    service = BlockingSyncService(blocked=False)
    reported: List[SyncResult] = []

    async def reporter(result: SyncResult) -> None:
        reported.append(result)

    scheduler = CatalogSyncScheduler(service, reporter=reporter)
    scheduler.start(interval_seconds=0.1, run_immediately=True)

    await _wait_for(lambda: len(reported) >= 2)
    await scheduler.stop()
    calls_at_stop = len(service.calls)
    await asyncio.sleep(0.25)

    assert all(trigger == SyncTrigger.TIMER for trigger in service.calls)
    assert len(service.calls) == calls_at_stop
    assert scheduler.status().cycles_run >= 2


@pytest.mark.asyncio
async def test_reschedule_and_status() -> None:
    scheduler = CatalogSyncScheduler(BlockingSyncService(blocked=False), interval_seconds=3600)
    scheduler.start()

    scheduler.reschedule(120)
    status = scheduler.status()

    assert status.interval_seconds == 120
    assert status.timer_active is True
    assert status.next_run_at is not None
    assert status.last_result is None

    await scheduler.trigger_sync()
    status = scheduler.status()
    assert status.cycles_run == 1
    assert status.last_result.status == SyncStatus.SUCCESS
    assert status.last_finished_at >= status.last_started_at

    with pytest.raises(ValueError):
        scheduler.reschedule(0)

    await scheduler.stop()
    with pytest.raises(SchedulerStoppedError):
        scheduler.reschedule(60)


@pytest.mark.asyncio
async def test_timer_ticks_share_gate_with_manual_cycle() -> None:
    """Los ticks durante un ciclo manual bloqueado encolan un único ciclo TIMER."""
    service = BlockingSyncService()
    scheduler = CatalogSyncScheduler(service)
    scheduler.start(interval_seconds=0.05)

    manual = asyncio.create_task(scheduler.trigger_sync())
    await service.started.wait()
    await asyncio.sleep(0.3)

    assert service.calls == [SyncTrigger.MANUAL]
    assert scheduler.is_busy()
    assert len(scheduler._tasks) == 2

    service.release.set()
    assert (await manual).status == SyncStatus.SUCCESS
    await _wait_for(lambda: len(service.calls) >= 2)
    await scheduler.stop()

    assert service.max_active == 1
    assert service.calls[0] == SyncTrigger.MANUAL
    assert all(trigger == SyncTrigger.TIMER for trigger in service.calls[1:])


@pytest.mark.asyncio
async def test_stop_runs_trigger_accepted_while_idle() -> None:
    service = BlockingSyncService(blocked=False)
    scheduler = CatalogSyncScheduler(service)

    trigger = asyncio.create_task(scheduler.trigger_sync())
    await asyncio.sleep(0)
    await scheduler.stop()

    assert (await trigger).status == SyncStatus.SUCCESS
    assert service.calls == [SyncTrigger.MANUAL]
    assert scheduler.status().last_result is not None
    assert scheduler.state == SchedulerState.STOPPED
