"""
Excepciones de la aplicación.
"""
from planets_api.shared.exceptions.base import AppException
from planets_api.shared.exceptions.domain import (
    DomainException,
    EntityNotFoundException,
    EntityAlreadyExistsException,
    ValidationException,
)
from planets_api.shared.exceptions.sync import (
    SyncException,
    FetchFailureError,
    WriteFailureError,
    SchedulerAlreadyRunningError,
    SchedulerBusyError,
    SchedulerStoppedError,
)

__all__ = [
    "AppException",
    "DomainException",
    "EntityNotFoundException",
    "EntityAlreadyExistsException",
    "ValidationException",
    "SyncException",
    "FetchFailureError",
    "WriteFailureError",
    "SchedulerAlreadyRunningError",
    "SchedulerBusyError",
    "SchedulerStoppedError",
]
