"""
Reconciliación pura: registros del catálogo -> operaciones de upsert.

Reglas:
- Una operación por nombre distinto; ante duplicados gana la última aparición.
- reference_count = cantidad de películas (works) del registro.
- Nunca genera borrados: un planeta ausente en el catálogo se conserva.
- Un registro malformado se descarta y se cuenta, nunca corta el ciclo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from planets_api.domain.entities.planet import PlanetUpsert

from .types import CatalogPlanet


class InvalidCatalogRecord(ValueError):
    """Registro del catálogo que no se puede mapear a un planeta."""


@dataclass
class ReconcileResult:
    operations: list[PlanetUpsert] = field(default_factory=list)
    invalid: int = 0
    duplicates: int = 0

    @property
    def skipped(self) -> int:
        return self.invalid + self.duplicates


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def map_catalog_planet(record: CatalogPlanet) -> PlanetUpsert:
    """
    Mapea un registro del catálogo a una operación de upsert.

    Raises:
        InvalidCatalogRecord: nombre ausente/vacío o works que no es una lista
    """
    name = record.name
    if not isinstance(name, str) or not name.strip():
        raise InvalidCatalogRecord(f"Registro sin nombre válido: {name!r}")

    works = record.works
    if works is None:
        works = ()
    if not isinstance(works, (list, tuple)):
        raise InvalidCatalogRecord(
            f"El planeta '{name}' tiene 'films' con tipo inválido: {type(works).__name__}"
        )

    return PlanetUpsert(
        name=name,
        climate=_text(record.climate),
        terrain=_text(record.terrain),
        reference_count=len(works),
    )


def reconcile(records: Iterable[CatalogPlanet]) -> ReconcileResult:
    """
    Calcula el conjunto de upserts para un snapshot completo del catálogo.

    Función pura, sin I/O. `len(operations) == len(records) - skipped`.
    """
    if records is None:
        raise TypeError("reconcile() requiere una secuencia de registros, no None")

    by_name: dict[str, PlanetUpsert] = {}
    result = ReconcileResult()

    for record in records:
        try:
            op = map_catalog_planet(record)
        except InvalidCatalogRecord:
            result.invalid += 1
            continue

        if op.name in by_name:
            result.duplicates += 1
        by_name[op.name] = op

    result.operations = list(by_name.values())
    return result
