"""
Star Wars Planets API.

API HTTP sobre la colección de planetas, refrescada periódicamente
desde el catálogo externo (SWAPI).
"""

__version__ = "1.0.0"
