"""
Entidad de dominio: Planet (Planeta).
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any


@dataclass
class Planet:
    """
    Entidad de dominio que representa un planeta persistido.

    La clave natural es `name` (sensible a mayúsculas, única en la tabla).
    `reference_count` es la cantidad de películas en las que aparece
    según el catálogo.
    """

    id: Optional[int] = None
    name: str = ""
    climate: str = ""
    terrain: str = ""
    reference_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validaciones después de la inicialización."""
        if not self.name or not self.name.strip():
            raise ValueError("El nombre del planeta no puede estar vacío")
        if self.reference_count < 0:
            raise ValueError("reference_count no puede ser negativo")

    def to_upsert(self) -> "PlanetUpsert":
        """Operación de escritura equivalente al estado actual."""
        return PlanetUpsert(
            name=self.name,
            climate=self.climate,
            terrain=self.terrain,
            reference_count=self.reference_count,
        )


@dataclass(frozen=True)
class PlanetUpsert:
    """
    Operación de escritura por clave natural.

    Crea el planeta si no existe; si existe reemplaza sus campos.
    """

    name: str
    climate: str
    terrain: str
    reference_count: int

    def fields(self) -> Dict[str, Any]:
        """Campos que se escriben (sin la clave)."""
        return {
            "climate": self.climate,
            "terrain": self.terrain,
            "reference_count": self.reference_count,
        }


@dataclass
class BulkUpsertResult:
    """
    Conteos de una escritura masiva.

    - matched: claves que ya existían
    - modified: claves existentes cuyos campos cambiaron
    - upserted: claves nuevas creadas
    - failed: clave -> error, para claves rechazadas por la base
    """

    matched: int = 0
    modified: int = 0
    upserted: int = 0
    failed: Dict[str, str] = field(default_factory=dict)

    def merge(self, other: "BulkUpsertResult") -> None:
        self.matched += other.matched
        self.modified += other.modified
        self.upserted += other.upserted
        self.failed.update(other.failed)
