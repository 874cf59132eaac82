"""
CLI: catálogo de planetas (SWAPI) -> base de datos (one-way sync).

Ejecuta un único ciclo fuera del proceso del API (cron, systemd timer,
job de Kubernetes). Usa la misma configuración que el API (.env).

Ejecución:
  python scripts/catalog_sync.py
  python scripts/catalog_sync.py --init-db
  python scripts/catalog_sync.py --no-skip-empty

Código de salida: 0 si el ciclo terminó en success/skipped, 1 si falló.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

load_dotenv(_ROOT / ".env", override=False)

from planets_api.core.config import settings
from planets_api.core.events import configure_logging
from planets_api.infrastructure.database.session import Database
from planets_api.infrastructure.external.catalog_sync.sync_service import build_sync_service
from planets_api.shared.constants.sync_constants import SyncTrigger


async def _run(init_db: bool, skip_empty: bool) -> int:
    database = Database(settings.effective_database_url, echo=settings.DEBUG)
    service = build_sync_service(
        settings.model_copy(update={"SYNC_SKIP_EMPTY_FETCH": skip_empty}),
        database,
    )
    try:
        if init_db:
            await database.init_db()
            logger.info("Tablas verificadas/creadas")

        result = await service.run_once(SyncTrigger.CLI)
        for name, error in sorted(result.failed_keys.items()):
            logger.error(f"  {name}: {error}")
        return 0 if result.ok else 1
    finally:
        await service.client.aclose()
        await database.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Sincroniza planetas desde el catálogo")
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Crea las tablas si no existen antes de sincronizar.",
    )
    parser.add_argument(
        "--no-skip-empty",
        action="store_true",
        help="Aplica la escritura aunque el catálogo devuelva 0 planetas válidos.",
    )
    args = parser.parse_args()

    configure_logging(settings)
    return asyncio.run(_run(init_db=args.init_db, skip_empty=not args.no_skip_empty))


if __name__ == "__main__":
    raise SystemExit(main())
