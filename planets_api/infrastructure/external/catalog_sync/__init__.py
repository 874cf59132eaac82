"""
Sincronización one-way: catálogo de planetas (SWAPI) -> base de datos.

El paquete corre dentro del proceso del API (scheduler con timer) o como
job suelto (`scripts/catalog_sync.py`).

Objetivos de diseño:
- Idempotencia: upsert por nombre, se puede ejecutar N veces sin duplicar.
- Sin solapamiento: un solo ciclo a la vez por proceso.
- Fallas parciales visibles en el resultado, nunca fatales para el proceso.
"""
