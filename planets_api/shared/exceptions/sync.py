"""
Excepciones del subsistema de sincronización con el catálogo.

Ninguna de estas excepciones es fatal para el proceso: representan
el resultado de un ciclo fallido o contención sobre el scheduler.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from planets_api.shared.exceptions.base import AppException

if TYPE_CHECKING:
    from planets_api.infrastructure.external.catalog_sync.types import SyncResult


class SyncException(AppException):
    """Excepción base para errores de sincronización."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "SYNC_ERROR",
        details: Optional[Dict[str, Any]] = None,
        result: Optional["SyncResult"] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )
        self.result = result


class FetchFailureError(SyncException):
    """El catálogo no respondió o respondió con datos inválidos."""

    def __init__(self, result: "SyncResult"):
        super().__init__(
            message=f"No se pudo obtener el catálogo: {result.error}",
            status_code=502,
            error_code="FETCH_FAILURE",
            details=result.to_dict(),
            result=result,
        )


class WriteFailureError(SyncException):
    """La base de datos rechazó el lote o algunas claves."""

    def __init__(self, result: "SyncResult"):
        super().__init__(
            message=f"Error escribiendo planetas: {result.error}",
            status_code=500,
            error_code="WRITE_FAILURE",
            details=result.to_dict(),
            result=result,
        )


class SchedulerAlreadyRunningError(SyncException):
    """Se llamó a start() dos veces sin un stop() intermedio."""

    def __init__(self):
        super().__init__(
            message="El scheduler de sincronización ya está iniciado",
            status_code=409,
            error_code="ALREADY_RUNNING",
        )


class SchedulerBusyError(SyncException):
    """Hay un ciclo en curso y el caller pidió no esperar."""

    def __init__(self):
        super().__init__(
            message="Hay una sincronización en curso",
            status_code=409,
            error_code="BUSY",
        )


class SchedulerStoppedError(SyncException):
    """El scheduler fue detenido y no acepta nuevos ciclos."""

    def __init__(self):
        super().__init__(
            message="El scheduler de sincronización está detenido",
            status_code=503,
            error_code="STOPPED",
        )
