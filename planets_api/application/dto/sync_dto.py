"""
DTOs de la sincronización con el catálogo.
"""
from typing import Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from planets_api.infrastructure.external.catalog_sync.types import SchedulerStatus, SyncResult
from planets_api.shared.constants.sync_constants import SchedulerState, SyncStatus, SyncTrigger


class SyncResultDTO(BaseModel):
    """Resultado de un ciclo de sincronización."""

    trigger: SyncTrigger
    status: SyncStatus
    fetched: int
    skipped: int
    matched: int
    modified: int
    upserted: int
    failed_keys: Dict[str, str] = Field(default_factory=dict)
    error: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None
    duration_s: Optional[float] = None

    @classmethod
    def from_result(cls, result: SyncResult) -> "SyncResultDTO":
        return cls(
            trigger=result.trigger,
            status=result.status,
            fetched=result.fetched,
            skipped=result.skipped,
            matched=result.matched,
            modified=result.modified,
            upserted=result.upserted,
            failed_keys=dict(result.failed_keys),
            error=result.error,
            started_at=result.started_at,
            finished_at=result.finished_at,
            duration_s=result.duration_s,
        )


class SyncStatusDTO(BaseModel):
    """Estado del scheduler de sincronización."""

    state: SchedulerState
    timer_active: bool
    interval_seconds: Optional[float]
    next_run_at: Optional[datetime] = None
    cycles_run: int
    consecutive_failures: int
    last_started_at: Optional[datetime] = None
    last_finished_at: Optional[datetime] = None
    last_result: Optional[SyncResultDTO] = None

    @classmethod
    def from_status(cls, status: SchedulerStatus) -> "SyncStatusDTO":
        return cls(
            state=status.state,
            timer_active=status.timer_active,
            interval_seconds=status.interval_seconds,
            next_run_at=status.next_run_at,
            cycles_run=status.cycles_run,
            consecutive_failures=status.consecutive_failures,
            last_started_at=status.last_started_at,
            last_finished_at=status.last_finished_at,
            last_result=SyncResultDTO.from_result(status.last_result) if status.last_result else None,
        )


class SyncIntervalResponseDTO(BaseModel):
    message: str
    interval_seconds: float
