"""Quartile tier rankings for crime, school access and park access.

Thresholds are taken at the 25/50/75% *index* of the sorted values (no
interpolation). Tier 1 is always the best end:

  crime    (lower is better):  <= q1 -> 1, <= q2 -> 2, <= q3 -> 3, else 4
  schools  (higher is better): >= q3 -> 1, >= q2 -> 2, >= q1 -> 3, else 4
  parks    (higher is better): same as schools

Ties at a threshold land in the better tier.
"""

import logging
import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from pydantic import BaseModel, ValidationError

from rentmap.data.names import canonical_name
from rentmap.models.datasets import CrimePayload, FeatureCollection, NeighbourhoodCollection
from rentmap.models.quartile import (
    Metric,
    Orientation,
    QuartileDescriptor,
    QuartileThresholds,
    QuartileTier,
)

logger = logging.getLogger(__name__)

METRIC_ORIENTATION: dict[Metric, Orientation] = {
    Metric.CRIME: Orientation.LOWER_IS_BETTER,
    Metric.SCHOOLS: Orientation.HIGHER_IS_BETTER,
    Metric.PARKS: Orientation.HIGHER_IS_BETTER,
}

QUARTILE_DESCRIPTORS: dict[Metric, dict[int, QuartileDescriptor]] = {
    Metric.CRIME: {
        1: QuartileDescriptor("🔵", "Very Safe", "Top 25% safest neighbourhoods"),
        2: QuartileDescriptor("🟢", "Safe", "Above average safety"),
        3: QuartileDescriptor("🟡", "Moderate", "Average safety levels"),
        4: QuartileDescriptor("🔴", "Higher Crime", "Bottom 25% for safety"),
    },
    Metric.SCHOOLS: {
        1: QuartileDescriptor("🔵", "Excellent Schools", "Top 25% for school access"),
        2: QuartileDescriptor("🟢", "Good Schools", "Above average school access"),
        3: QuartileDescriptor("🟡", "Moderate Schools", "Average school access"),
        4: QuartileDescriptor("🔴", "Limited Schools", "Bottom 25% for school access"),
    },
    Metric.PARKS: {
        1: QuartileDescriptor("🔵", "Excellent Parks", "Top 25% for park access"),
        2: QuartileDescriptor("🟢", "Good Parks", "Above average park access"),
        3: QuartileDescriptor("🟡", "Moderate Parks", "Average park access"),
        4: QuartileDescriptor("🔴", "Limited Parks", "Bottom 25% for park access"),
    },
}


def compute_quartile_thresholds(values: Sequence[float]) -> QuartileThresholds:
    """Thresholds at sorted[floor(n * p)] for p in 0.25, 0.50, 0.75.

    An empty sequence yields all-zero thresholds.
    """
    if not values:
        return QuartileThresholds()

    ordered = sorted(values)
    n = len(ordered)
    return QuartileThresholds(
        q1=ordered[math.floor(n * 0.25)],
        q2=ordered[math.floor(n * 0.50)],
        q3=ordered[math.floor(n * 0.75)],
    )


def assign_tier(value: float, thresholds: QuartileThresholds, orientation: Orientation) -> int:
    """Return the tier (1 = best, 4 = worst) for a value."""
    if orientation is Orientation.LOWER_IS_BETTER:
        if value <= thresholds.q1:
            return 1
        if value <= thresholds.q2:
            return 2
        if value <= thresholds.q3:
            return 3
        return 4

    if value >= thresholds.q3:
        return 1
    if value >= thresholds.q2:
        return 2
    if value >= thresholds.q1:
        return 3
    return 4


def quartile_descriptor(metric: Metric, tier: int) -> QuartileDescriptor:
    return QUARTILE_DESCRIPTORS[metric][tier]


def rank_values(
    values: Mapping[str, float],
    metric: Metric,
    population: Sequence[float] | None = None,
) -> dict[str, QuartileTier]:
    """Assign every (name, value) pair a tier.

    Thresholds come from `population` when given (e.g. every source row,
    duplicates included), otherwise from the values themselves.
    """
    if population is None:
        population = list(values.values())
    thresholds = compute_quartile_thresholds(population)
    orientation = METRIC_ORIENTATION[metric]

    ranked: dict[str, QuartileTier] = {}
    for name, value in values.items():
        tier = assign_tier(value, thresholds, orientation)
        d = quartile_descriptor(metric, tier)
        ranked[name] = QuartileTier(
            tier=tier,
            emoji=d.emoji,
            label=d.label,
            description=d.description,
            value=value,
        )
    return ranked


def _coerce(model, data):
    """Accept an already-validated model or its raw dict form."""
    if data is None or isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        # e.g. boundaries validated as a plain FeatureCollection
        data = data.model_dump()
    return model.model_validate(data)


def build_crime_quartiles(crime: CrimePayload | dict | None) -> dict[str, QuartileTier]:
    """Crime tiers keyed by canonical name; only neighbourhoods that report crime get one."""
    try:
        crime = _coerce(CrimePayload, crime)
    except ValidationError as e:
        logger.warning("Crime data malformed, skipping quartile calculation: %s", e)
        return {}
    if crime is None or not crime.crime_by_neighbourhood:
        logger.warning("Crime data not available for quartile calculation")
        return {}

    values: dict[str, float] = {}
    for record in crime.crime_by_neighbourhood:
        name = canonical_name(record.neighbourhood_name)
        if name is not None:
            values[name] = record.violent_weapons_crimes_total_2025

    # thresholds count every row, so a duplicated name still weighs in twice;
    # the tier map keeps the last row per name
    population = [r.violent_weapons_crimes_total_2025 for r in crime.crime_by_neighbourhood]
    ranked = rank_values(values, Metric.CRIME, population)
    logger.info("Crime quartiles calculated for %d neighbourhoods", len(ranked))
    return ranked


def count_features_by_neighbourhood(features: Iterable, names: Iterable[str]) -> dict[str, int]:
    """Count attribute-matched features per neighbourhood; zero when none match."""
    counts = Counter(f.neighbourhood_name for f in features if f.neighbourhood_name)
    return {name: counts.get(name, 0) for name in names}


def _build_feature_quartiles(
    metric: Metric,
    features: FeatureCollection | dict | None,
    neighbourhoods: FeatureCollection | dict | None,
) -> dict[str, QuartileTier]:
    label = metric.value.capitalize()
    try:
        features = _coerce(FeatureCollection, features)
        neighbourhoods = _coerce(NeighbourhoodCollection, neighbourhoods)
    except ValidationError as e:
        logger.warning("%s or neighbourhoods data malformed, skipping quartile calculation: %s", label, e)
        return {}
    if features is None or neighbourhoods is None or not neighbourhoods.features:
        logger.warning("%s or neighbourhoods data not available for quartile calculation", label)
        return {}

    counts = count_features_by_neighbourhood(features.features, neighbourhoods.names)
    ranked = rank_values(counts, metric)
    logger.info("%s quartiles calculated for %d neighbourhoods", label, len(ranked))
    return ranked


def build_schools_quartiles(
    schools: FeatureCollection | dict | None,
    neighbourhoods: FeatureCollection | dict | None,
) -> dict[str, QuartileTier]:
    """School-access tiers for every boundary feature (count of schools, higher is better)."""
    return _build_feature_quartiles(Metric.SCHOOLS, schools, neighbourhoods)


def build_parks_quartiles(
    parks: FeatureCollection | dict | None,
    neighbourhoods: FeatureCollection | dict | None,
) -> dict[str, QuartileTier]:
    """Park-access tiers for every boundary feature (count of parks, higher is better)."""
    return _build_feature_quartiles(Metric.PARKS, parks, neighbourhoods)


def get_neighbourhood_quartile(
    name: str | None, quartile_map: Mapping[str, QuartileTier] | None
) -> QuartileTier | None:
    key = canonical_name(name)
    if key is None or not quartile_map:
        return None
    return quartile_map.get(key)
