"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any

from planets_api.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class EntityNotFoundException(DomainException):
    """Excepción cuando no se encuentra una entidad."""

    def __init__(self, entity_name: str, field: str, value: Any):
        super().__init__(
            message=f"{entity_name} con {field}={value} no encontrado",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity_name, "field": field, "value": str(value)}
        )
        self.status_code = 404


class EntityAlreadyExistsException(DomainException):
    """Excepción cuando una entidad ya existe."""

    def __init__(self, entity_name: str, field: str, value: Any):
        super().__init__(
            message=f"{entity_name} con {field}={value} ya existe",
            error_code="ENTITY_ALREADY_EXISTS",
            details={"entity": entity_name, "field": field, "value": str(value)}
        )
        self.status_code = 409


class ValidationException(DomainException):
    """Excepción para errores de validación."""

    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )
