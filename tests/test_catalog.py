"""Tests for catalog loading."""

import json
from pathlib import Path
from typing import Any

import pytest
import requests

from fall_builder import catalog as catalog_module
from fall_builder.catalog import Catalog, CatalogLoadError, UnitDefinition, load_catalog, parse_catalog
from fall_builder.config import DEFAULT_CATALOG
from fall_builder.rules import ELITE_WEIGHT_RULES

SAMPLE = {
    "factions": [
        {
            "name": "The Drowned Court",
            "units": [
                {"name": "Reef Stalkers", "points": 30, "type": "Special"},
                {"name": "Tide Regent", "points": 50, "type": "Leader"},
                {"name": "Brine Thralls", "points": 15},
            ],
        }
    ]
}


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(SAMPLE), encoding="utf-8")
    return path


class TestParseCatalog:
    """Validation of decoded catalog JSON."""

    def test_parses_factions(self) -> None:
        cat = parse_catalog(SAMPLE)
        assert cat.faction_names == ["The Drowned Court"]
        faction = cat.faction("The Drowned Court")
        assert faction.unit("Tide Regent") == UnitDefinition("Tide Regent", 50, "Leader")

    def test_missing_type_defaults_to_core(self) -> None:
        faction = parse_catalog(SAMPLE).factions[0]
        assert faction.unit("Brine Thralls").type == "Core"

    def test_unknown_lookups(self) -> None:
        cat = parse_catalog(SAMPLE)
        assert cat.faction("Nobody") is None
        assert cat.factions[0].unit("Nothing") is None

    def test_empty_catalog(self) -> None:
        assert parse_catalog({}) == Catalog()

    @pytest.mark.parametrize("points", [0, -5, "10", 2.5, None, True])
    def test_rejects_bad_points(self, points: Any) -> None:
        data = {"factions": [{"name": "F", "units": [{"name": "U", "points": points}]}]}
        with pytest.raises(CatalogLoadError, match="positive integer"):
            parse_catalog(data)

    def test_rejects_unnamed_unit(self) -> None:
        with pytest.raises(CatalogLoadError):
            parse_catalog({"factions": [{"name": "F", "units": [{"points": 5}]}]})

    def test_rejects_unnamed_faction(self) -> None:
        with pytest.raises(CatalogLoadError):
            parse_catalog({"factions": [{"units": []}]})

    def test_rejects_non_object_root(self) -> None:
        with pytest.raises(CatalogLoadError):
            parse_catalog([])

    @pytest.mark.parametrize(
        "data",
        [
            {"factions": 5},
            {"factions": {"name": "F"}},
            {"factions": [{"name": "F", "units": 7}]},
            {"factions": [{"name": "F", "units": "Brine Thralls"}]},
        ],
    )
    def test_rejects_non_list_collections(self, data: Any) -> None:
        with pytest.raises(CatalogLoadError, match="must be a list"):
            parse_catalog(data)

    def test_rejects_duplicate_unit_names(self) -> None:
        data = {"factions": [{"name": "F", "units": [
            {"name": "U", "points": 5, "type": "Core"},
            {"name": "U", "points": 9, "type": "Special"},
        ]}]}
        with pytest.raises(CatalogLoadError, match="duplicate unit 'U'"):
            parse_catalog(data)

    def test_same_unit_name_in_two_factions(self) -> None:
        data = {"factions": [
            {"name": "A", "units": [{"name": "U", "points": 5}]},
            {"name": "B", "units": [{"name": "U", "points": 5}]},
        ]}
        assert parse_catalog(data).faction_names == ["A", "B"]

    def test_rejects_duplicate_faction_names(self) -> None:
        data = {"factions": [{"name": "F", "units": []}, {"name": "F", "units": []}]}
        with pytest.raises(CatalogLoadError, match="Duplicate faction 'F'"):
            parse_catalog(data)

    def test_sorted_units(self) -> None:
        faction = parse_catalog(SAMPLE).factions[0]
        assert [u.name for u in faction.sorted_units(ELITE_WEIGHT_RULES)] == [
            "Tide Regent", "Brine Thralls", "Reef Stalkers",
        ]


class TestLoadCatalog:
    """Loading from files and URLs."""

    def test_load_from_path(self, catalog_file: Path) -> None:
        assert load_catalog(catalog_file).faction_names == ["The Drowned Court"]

    def test_load_from_path_string(self, catalog_file: Path) -> None:
        assert load_catalog(str(catalog_file)).faction_names == ["The Drowned Court"]

    def test_load_with_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "bom.json"
        path.write_text(json.dumps(SAMPLE), encoding="utf-8-sig")
        assert len(load_catalog(path).factions) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogLoadError, match="missing.json"):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogLoadError):
            load_catalog(path)

    def test_malformed_shape_raises_load_error(self, tmp_path: Path) -> None:
        path = tmp_path / "shape.json"
        path.write_text(json.dumps({"factions": [{"name": "F", "units": 7}]}), encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="shape.json"):
            load_catalog(path)

    def test_load_from_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []

        def fake_get(url: str, **kwargs: Any) -> FakeResponse:
            calls.append((url, kwargs))
            return FakeResponse(json.dumps(SAMPLE))

        monkeypatch.setattr(catalog_module.requests, "get", fake_get)
        cat = load_catalog("https://example.com/data.json", timeout=3)
        assert cat.faction_names == ["The Drowned Court"]
        assert calls[0][0] == "https://example.com/data.json"
        assert calls[0][1]["timeout"] == 3

    def test_http_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(catalog_module.requests, "get", lambda url, **kw: FakeResponse("", 404))
        with pytest.raises(CatalogLoadError, match="404"):
            load_catalog("http://example.com/data.json")

    def test_connection_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(url: str, **kwargs: Any) -> FakeResponse:
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(catalog_module.requests, "get", fail)
        with pytest.raises(CatalogLoadError, match="refused"):
            load_catalog("http://example.com/data.json")

    def test_bundled_catalog(self) -> None:
        cat = load_catalog(DEFAULT_CATALOG)
        assert len(cat.factions) >= 2
        for faction in cat.factions:
            assert all(u.type in ELITE_WEIGHT_RULES.types for u in faction.units)
