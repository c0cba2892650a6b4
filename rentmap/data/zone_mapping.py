"""Neighbourhood -> rent zone mapping.

Rent figures are published per rental-market zone, which is coarser than a
neighbourhood. The mapping is generated offline (see zone_cli) and shipped as
a flat JSON object; the store only ever reads it.

Resolution order when generating, highest first:
  1. the neighbourhood name is itself a zone name
  2. the first zone (in rent dataset order) whose name contains the neighbourhood name
  3. the district -> zone heuristic table
  4. the citywide aggregate zone
"""

import json
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path

from rentmap.data.names import canonical_name
from rentmap.models.datasets import Feature

logger = logging.getLogger(__name__)

FALLBACK_ZONE = "EDMONTON"

# Approximate: several of these are a representative zone for the district
# rather than a true containment (e.g. SCONA -> UNIVERSITY).
DEFAULT_DISTRICT_ZONES: dict[str, str] = {
    "JASPER PLACE": "WEST JASPER PLACE/RURAL",
    "MILL WOODS AND MEADOWS": "CENTRAL MILLWOODS",
    "SOUTHWEST": "TERWILLEGAR/RURAL SOUTHWEST",
    "NORTHEAST": "NORTH EAST",
    "NORTHWEST": "NORTH WEST JASPER PLACE",
    "SCONA": "UNIVERSITY",
    "CENTRAL": "DOWNTOWN",
    "NORTH CENTRAL": "NORTH CENTRAL (WEST)",
}


class MatchKind(Enum):
    EXACT = "exact"
    SUBSTRING = "substring"
    DISTRICT = "district"
    FALLBACK = "fallback"


class ZoneMappingError(ValueError):
    pass


def _canonical_table(raw: object, source: str) -> dict[str, str]:
    if not isinstance(raw, dict):
        raise ZoneMappingError(f"{source}: expected a JSON object")
    table: dict[str, str] = {}
    for key, value in raw.items():
        k, v = canonical_name(key), canonical_name(value) if isinstance(value, str) else None
        if k is None or v is None:
            raise ZoneMappingError(f"{source}: invalid entry {key!r} -> {value!r}")
        if k in table:
            logger.warning("%s: %r canonicalizes to duplicate key %s, %s replaces %s", source, key, k, v, table[k])
        table[k] = v
    return table


def parse_zone_mapping(raw: object) -> dict[str, str]:
    """Validate a mapping payload and canonicalize its keys and values."""
    return _canonical_table(raw, "zone mapping")


def load_district_zones(path: str | Path | None = None) -> dict[str, str]:
    """District heuristic table, from a JSON override file when given."""
    if not path:
        return dict(DEFAULT_DISTRICT_ZONES)
    with open(path, encoding="utf-8") as f:
        table = _canonical_table(json.load(f), str(path))
    logger.info("Loaded %d district zone heuristics from %s", len(table), path)
    return table


def resolve_zone(
    name: str,
    district: str | None,
    zone_names: list[str],
    district_zones: Mapping[str, str],
) -> tuple[str, MatchKind]:
    """Pick the rent zone for one canonical neighbourhood name."""
    if name in zone_names:
        return name, MatchKind.EXACT

    for zone in zone_names:
        if name in zone:
            return zone, MatchKind.SUBSTRING

    if district and district in district_zones:
        return district_zones[district], MatchKind.DISTRICT

    return FALLBACK_ZONE, MatchKind.FALLBACK


def build_zone_mapping(
    neighbourhoods: Iterable[Feature],
    zone_names: Iterable[str],
    district_zones: Mapping[str, str] | None = None,
) -> tuple[dict[str, str], dict[MatchKind, int]]:
    """Generate the artifact: every boundary feature name maps to exactly one zone.

    Returns (mapping, counts per match kind). Deterministic for identical inputs.
    """
    if district_zones is None:
        district_zones = DEFAULT_DISTRICT_ZONES
    zones = [z for z in (canonical_name(z) for z in zone_names) if z]

    mapping: dict[str, str] = {}
    counts = {kind: 0 for kind in MatchKind}
    for feature in neighbourhoods:
        name = feature.name
        if name is None or name in mapping:
            continue
        zone, kind = resolve_zone(name, feature.district, zones, district_zones)
        mapping[name] = zone
        counts[kind] += 1

    return mapping, counts


def fill_missing_zones(names: Iterable[str], mapping: Mapping[str, str]) -> tuple[dict[str, str], list[str]]:
    """Complete a loaded mapping so every neighbourhood has a zone.

    Names the artifact does not cover get FALLBACK_ZONE. Returns
    (completed mapping, names that were missing).
    """
    completed = dict(mapping)
    missing = []
    for name in names:
        if name not in completed:
            completed[name] = FALLBACK_ZONE
            missing.append(name)
    return completed, missing
