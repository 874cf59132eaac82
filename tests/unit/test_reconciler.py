"""
Tests unitarios para el reconciler (catálogo -> operaciones de upsert).
"""
from __future__ import annotations

import pytest

from planets_api.domain.entities.planet import PlanetUpsert
from planets_api.infrastructure.external.catalog_sync.reconciler import (
    InvalidCatalogRecord,
    map_catalog_planet,
    reconcile,
)
from planets_api.infrastructure.external.catalog_sync.types import CatalogPlanet


class TestMapCatalogPlanet:
    def test_reference_count_is_number_of_films(self, catalog_planet) -> None:
        op = map_catalog_planet(catalog_planet("Tatooine", films=5))

        assert op == PlanetUpsert(
            name="Tatooine", climate="arid", terrain="desert", reference_count=5
        )

    def test_blank_name_is_invalid(self, catalog_planet) -> None:
        with pytest.raises(InvalidCatalogRecord):
            map_catalog_planet(catalog_planet("   "))

    def test_missing_name_is_invalid(self) -> None:
        with pytest.raises(InvalidCatalogRecord):
            map_catalog_planet(CatalogPlanet(name=None))

    def test_films_must_be_a_list(self) -> None:
        with pytest.raises(InvalidCatalogRecord):
            map_catalog_planet(CatalogPlanet(name="Hoth", works="https://swapi.dev/api/films/2/"))

    def test_missing_climate_and_terrain_map_to_empty_strings(self) -> None:
        op = map_catalog_planet(CatalogPlanet(name="Hoth", climate=None, terrain=None, works=None))

        assert op.climate == ""
        assert op.terrain == ""
        assert op.reference_count == 0


class TestReconcile:
    def test_one_operation_per_distinct_name(self, catalog_planet) -> None:
        records = [
            catalog_planet("Tatooine", films=5),
            catalog_planet("Alderaan", climate="temperate", terrain="grasslands", films=2),
            catalog_planet("Tatooine", films=6),
        ]

        result = reconcile(records)

        names = [op.name for op in result.operations]
        assert names == ["Tatooine", "Alderaan"]
        assert result.duplicates == 1
        assert result.skipped == 1

    def test_last_duplicate_wins(self, catalog_planet) -> None:
        result = reconcile([
            catalog_planet("Tatooine", films=5),
            catalog_planet("Tatooine", climate="hot", films=6),
        ])

        assert result.operations == [
            PlanetUpsert(name="Tatooine", climate="hot", terrain="desert", reference_count=6)
        ]

    def test_invalid_records_are_counted_not_fatal(self, catalog_planet) -> None:
        records = [
            catalog_planet("", films=1),
            CatalogPlanet(name=None),
            catalog_planet("Hoth", climate="frozen", terrain="tundra", films=1),
        ]

        result = reconcile(records)

        assert [op.name for op in result.operations] == ["Hoth"]
        assert result.invalid == 2
        assert len(result.operations) == len(records) - result.skipped

    def test_names_are_case_sensitive(self, catalog_planet) -> None:
        result = reconcile([catalog_planet("Hoth"), catalog_planet("hoth")])

        assert len(result.operations) == 2
        assert result.skipped == 0

    def test_empty_input_is_legal(self) -> None:
        result = reconcile([])

        assert result.operations == []
        assert result.skipped == 0

    def test_none_input_is_a_programming_error(self) -> None:
        with pytest.raises(TypeError):
            reconcile(None)
