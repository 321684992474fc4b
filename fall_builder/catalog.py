import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import requests

from fall_builder.constants import DEFAULT_UNIT_TYPE
from fall_builder.rules import RuleSet
from fall_builder.utils import is_url, parse_json, read_json

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class CatalogLoadError(Exception):
    """Raised when a catalog cannot be fetched, parsed or validated."""


@dataclass(frozen=True)
class UnitDefinition:
    name: str
    points: int
    type: str = DEFAULT_UNIT_TYPE


@dataclass(frozen=True)
class Faction:
    name: str
    units: Tuple[UnitDefinition, ...] = ()

    def unit(self, name: str) -> Optional[UnitDefinition]:
        return next((u for u in self.units if u.name == name), None)

    def sorted_units(self, rules: RuleSet) -> List[UnitDefinition]:
        return sorted(self.units, key=lambda u: (rules.type_rank(u.type), u.name.lower()))


@dataclass(frozen=True)
class Catalog:
    factions: Tuple[Faction, ...] = ()

    @property
    def faction_names(self) -> List[str]:
        return [f.name for f in self.factions]

    def faction(self, name: str) -> Optional[Faction]:
        return next((f for f in self.factions if f.name == name), None)


def _parse_unit(raw: Any, faction_name: str) -> UnitDefinition:
    if not isinstance(raw, dict):
        raise CatalogLoadError(f"Faction '{faction_name}': unit entries must be objects.")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise CatalogLoadError(f"Faction '{faction_name}': unit without a name.")
    points = raw.get("points")
    # bool is an int subclass, reject it explicitly
    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise CatalogLoadError(f"Unit '{name}' ({faction_name}): points must be a positive integer, got {points!r}.")
    unit_type = str(raw.get("type") or DEFAULT_UNIT_TYPE).strip()
    return UnitDefinition(name=name, points=points, type=unit_type)


def _as_list(value: Any, what: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise CatalogLoadError(f"{what} must be a list, got {type(value).__name__}.")
    return value


def parse_catalog(data: Dict[str, Any]) -> Catalog:
    """
    Builds a Catalog from decoded JSON of the form
    {"factions": [{"name": ..., "units": [{"name", "points", "type"}]}]}.

    Faction names must be unique, and so must unit names within a faction.
    """
    if not isinstance(data, dict):
        raise CatalogLoadError("Catalog root must be an object.")
    factions = []
    seen_factions = set()
    for raw in _as_list(data.get("factions"), "'factions'"):
        if not isinstance(raw, dict):
            raise CatalogLoadError("Faction entries must be objects.")
        name = str(raw.get("name") or "").strip()
        if not name:
            raise CatalogLoadError("Faction without a name.")
        if name in seen_factions:
            raise CatalogLoadError(f"Duplicate faction '{name}'.")
        seen_factions.add(name)

        units = []
        seen_units = set()
        for raw_unit in _as_list(raw.get("units"), f"Faction '{name}': 'units'"):
            unit = _parse_unit(raw_unit, name)
            if unit.name in seen_units:
                raise CatalogLoadError(f"Faction '{name}': duplicate unit '{unit.name}'.")
            seen_units.add(unit.name)
            units.append(unit)
        factions.append(Faction(name=name, units=tuple(units)))
    return Catalog(factions=tuple(factions))


def _fetch(url: str, timeout: float) -> Dict[str, Any]:
    response = requests.get(url, timeout=timeout, headers={"Cache-Control": "no-store"})
    response.raise_for_status()
    return parse_json(response.text)


def load_catalog(source: Union[str, Path], timeout: float = DEFAULT_TIMEOUT) -> Catalog:
    """
    Loads a catalog from a local JSON file or an http(s) URL.

    Every failure mode (missing file, HTTP error, bad JSON, invalid units)
    surfaces as CatalogLoadError naming the source.
    """
    try:
        if isinstance(source, str) and is_url(source):
            data = _fetch(source, timeout)
        else:
            data = read_json(Path(source))
        catalog = parse_catalog(data)
    except CatalogLoadError as e:
        logger.warning("Invalid catalog %s: %s", source, e)
        raise CatalogLoadError(f"Failed to load {source}: {e}") from e
    except (OSError, ValueError, requests.RequestException) as e:
        logger.warning("Could not load catalog %s: %s", source, e)
        raise CatalogLoadError(f"Failed to load {source}: {e}") from e

    logger.info("Loaded catalog %s with %d factions", source, len(catalog.factions))
    return catalog
