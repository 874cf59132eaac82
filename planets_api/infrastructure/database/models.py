"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, String, Integer, DateTime, CheckConstraint
from sqlalchemy.sql import func

from planets_api.infrastructure.database.session import Base


class PlanetModel(Base):
    """
    Modelo de base de datos para planetas.

    `name` es la clave natural (UNIQUE): el sync hace upsert por nombre.
    `reference_count` se deriva de la cantidad de películas del catálogo.
    """

    __tablename__ = "planets"
    __table_args__ = (
        CheckConstraint("reference_count >= 0", name="ck_planets_reference_count"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    climate = Column(String(255), nullable=False, default="")
    terrain = Column(String(255), nullable=False, default="")
    reference_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Planet(id={self.id}, name={self.name}, references={self.reference_count})>"
