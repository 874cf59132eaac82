"""
Constantes relacionadas con la sincronización del catálogo.
"""
from enum import Enum


class SyncStatus(str, Enum):
    """Resultado de un ciclo de sincronización."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FETCH_FAILURE = "fetch_failure"
    WRITE_FAILURE = "write_failure"


class SyncTrigger(str, Enum):
    """Origen de un ciclo de sincronización."""
    TIMER = "timer"
    MANUAL = "manual"
    CLI = "cli"


class SchedulerState(str, Enum):
    """Estados del scheduler (idle -> running -> idle, stopped es terminal)."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


# Job de APScheduler que dispara los ciclos periódicos
SYNC_JOB_ID = "catalog_planets_sync"
