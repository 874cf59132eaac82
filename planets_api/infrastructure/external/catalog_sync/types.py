"""
Tipos y utilidades puras para el pipeline catálogo -> base de datos.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from planets_api.shared.constants.sync_constants import (
    SchedulerState,
    SyncStatus,
    SyncTrigger,
)


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normaliza datetime a UTC (aware)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _isoformat(dt: Optional[datetime]) -> Optional[str]:
    return ensure_utc(dt).isoformat() if dt else None


@dataclass(frozen=True)
class CatalogPlanet:
    """
    Registro de planeta tal como lo entrega el catálogo.

    No valida nada: un registro malformado se descarta en el reconciler,
    no en el cliente HTTP.
    """

    name: Any
    climate: Any = ""
    terrain: Any = ""
    works: Any = ()

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CatalogPlanet":
        works = payload.get("films", ())
        if isinstance(works, list):
            works = tuple(works)
        return cls(
            name=payload.get("name"),
            climate=payload.get("climate", ""),
            terrain=payload.get("terrain", ""),
            works=works,
        )


@dataclass
class SyncResult:
    """Resultado de un ciclo de sincronización (lo que recibe el reporter)."""

    trigger: SyncTrigger
    status: SyncStatus = SyncStatus.SUCCESS
    fetched: int = 0
    skipped: int = 0
    matched: int = 0
    modified: int = 0
    upserted: int = 0
    failed_keys: dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None
    started_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.status in (SyncStatus.SUCCESS, SyncStatus.SKIPPED)

    @property
    def duration_s(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return round((self.finished_at - self.started_at).total_seconds(), 3)

    def finish(self, status: SyncStatus, error: Optional[str] = None) -> "SyncResult":
        self.status = status
        self.error = error
        self.finished_at = utc_now()
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "trigger": self.trigger.value,
            "status": self.status.value,
            "fetched": self.fetched,
            "skipped": self.skipped,
            "matched": self.matched,
            "modified": self.modified,
            "upserted": self.upserted,
            "failed_keys": dict(self.failed_keys),
            "error": self.error,
            "started_at": _isoformat(self.started_at),
            "finished_at": _isoformat(self.finished_at),
            "duration_s": self.duration_s,
        }


@dataclass(frozen=True)
class SchedulerStatus:
    """Foto del estado del scheduler para el endpoint de status."""

    state: SchedulerState
    timer_active: bool
    interval_seconds: Optional[float]
    next_run_at: Optional[datetime]
    cycles_run: int
    consecutive_failures: int
    last_started_at: Optional[datetime]
    last_finished_at: Optional[datetime]
    last_result: Optional[SyncResult]
