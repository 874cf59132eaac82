"""
Router principal de la API v1.
Agrupa todos los endpoints de la versión 1.
"""
from fastapi import APIRouter

from planets_api.api.v1.endpoints import planets, sync


# Router principal de la API v1
api_router = APIRouter(prefix="/v1")

# Incluir routers de endpoints específicos
api_router.include_router(planets.router)
api_router.include_router(sync.router)
