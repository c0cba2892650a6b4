"""Offline generator for the neighbourhood -> rent zone mapping artifact.

Usage:
    python -m rentmap.data.zone_cli data/neighbourhoods.geojson data/rent-data-processed.json
    python -m rentmap.data.zone_cli ... --districts district_zones.json -o data/neighbourhood-to-rent-zone.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rentmap.config import settings
from rentmap.data.store import DataLoadError, validate_payload
from rentmap.data.zone_mapping import MatchKind, build_zone_mapping, load_district_zones
from rentmap.models.datasets import DatasetKind

logger = logging.getLogger(__name__)


def _read_json(path: str):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def print_summary(mapping: dict[str, str], counts: dict[MatchKind, int], output: Path) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Zone mapping: {len(mapping)} neighbourhoods")
    print(f"{'=' * 60}")
    for kind in MatchKind:
        print(f"  {kind.value:>10}: {counts[kind]}")
    print(f"\n  Saved to: {output}")
    print()


def generate(
    neighbourhoods_path: str,
    rent_path: str,
    output: Path,
    districts_path: str | None = None,
) -> dict[str, str]:
    neighbourhoods = validate_payload(DatasetKind.NEIGHBOURHOODS, _read_json(neighbourhoods_path))
    rent = validate_payload(DatasetKind.RENT, _read_json(rent_path))
    district_zones = load_district_zones(districts_path)

    zone_names = [r.neighbourhood_name for r in rent.rent_by_neighbourhood]
    mapping, counts = build_zone_mapping(neighbourhoods.features, zone_names, district_zones)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(mapping, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    print_summary(mapping, counts, output)
    return mapping


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate the neighbourhood -> rent zone mapping")
    parser.add_argument("neighbourhoods", help="Neighbourhood boundary GeoJSON")
    parser.add_argument("rent", help="Processed rent JSON (rent_by_neighbourhood)")
    parser.add_argument("--districts", default=None, help="JSON file overriding the district -> zone table")
    parser.add_argument(
        "-o", "--output", default="data/neighbourhood-to-rent-zone.json", help="Output path",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        districts = args.districts or settings.district_zones_path or None
        generate(args.neighbourhoods, args.rent, Path(args.output), districts)
    except (OSError, ValueError, DataLoadError) as e:
        logger.error("Zone mapping generation failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
