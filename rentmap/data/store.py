"""Load-once dataset store with name-keyed indices.

Lifecycle:
    UNINITIALIZED -> LOADING -> READY
    UNINITIALIZED -> LOADING -> FAILED -> UNINITIALIZED

Concurrent load_all() calls made while a load is in flight share one task,
so every dataset is fetched once and every caller sees the same result or
the same error. A failed load, whatever the cause, leaves nothing cached; the next call
starts over. Once READY, everything is served from memory for the life of
the process.

All accessors are synchronous and return None (or an empty list) for names
that are simply absent, including before the store is loaded.
"""

import asyncio
import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from rentmap.data.base import DatasetSource
from rentmap.data.names import canonical_name
from rentmap.data.sources import default_source
from rentmap.data.zone_mapping import FALLBACK_ZONE, ZoneMappingError, fill_missing_zones, parse_zone_mapping
from rentmap.engine.quartile import (
    build_crime_quartiles,
    build_parks_quartiles,
    build_schools_quartiles,
    get_neighbourhood_quartile,
)
from rentmap.models.datasets import (
    CrimePayload,
    CrimeRecord,
    DatasetKind,
    Feature,
    FeatureCollection,
    LoadedDatasets,
    NeighbourhoodCollection,
    RentPayload,
)
from rentmap.models.quartile import Metric, QuartileTier
from rentmap.models.rent import RentRecord

logger = logging.getLogger(__name__)

PAYLOAD_MODELS: dict[DatasetKind, type[BaseModel]] = {
    DatasetKind.CRIME: CrimePayload,
    DatasetKind.RENT: RentPayload,
    DatasetKind.SCHOOLS: FeatureCollection,
    DatasetKind.PARKS: FeatureCollection,
    DatasetKind.NEIGHBOURHOODS: NeighbourhoodCollection,
}

TOP_LEVEL_KEYS: dict[DatasetKind, str] = {
    DatasetKind.CRIME: "crime_by_neighbourhood",
    DatasetKind.RENT: "rent_by_neighbourhood",
    DatasetKind.SCHOOLS: "features",
    DatasetKind.PARKS: "features",
    DatasetKind.NEIGHBOURHOODS: "features",
}


class DataLoadError(Exception):
    """A dataset could not be fetched or did not match its schema."""

    def __init__(self, kind: DatasetKind | None, message: str):
        self.kind = kind
        prefix = f"{kind.value} dataset: " if kind else ""
        super().__init__(f"{prefix}{message}")


class LoadState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def validate_payload(kind: DatasetKind, raw: Any) -> Any:
    """Check one raw payload against its schema; raises DataLoadError."""
    if kind is DatasetKind.ZONE_MAPPING:
        try:
            return parse_zone_mapping(raw)
        except ZoneMappingError as e:
            raise DataLoadError(kind, str(e)) from e

    key = TOP_LEVEL_KEYS[kind]
    if not isinstance(raw, dict) or key not in raw:
        raise DataLoadError(kind, f"missing top-level key '{key}'")
    try:
        return PAYLOAD_MODELS[kind].model_validate(raw)
    except ValidationError as e:
        raise DataLoadError(kind, f"payload does not match schema: {e}") from e


class DataStore:
    def __init__(self, source: DatasetSource | None = None):
        self.source = source or default_source()
        self._state = LoadState.UNINITIALIZED
        self._task: asyncio.Task | None = None
        self._datasets: LoadedDatasets | None = None

        self._crime_index: dict[str, CrimeRecord] = {}
        self._rent_index: dict[str, RentRecord] = {}
        self._neighbourhood_index: dict[str, Feature] = {}
        self._schools_by_name: dict[str, list[Feature]] = {}
        self._parks_by_name: dict[str, list[Feature]] = {}
        self._quartiles: dict[Metric, dict[str, QuartileTier]] = {}

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def datasets(self) -> LoadedDatasets | None:
        return self._datasets

    def is_loaded(self) -> bool:
        return self._state is LoadState.READY

    async def load_all(self) -> LoadedDatasets:
        """Load every dataset once; concurrent callers share the same load."""
        if self._datasets is not None:
            return self._datasets
        if self._task is None:
            self._state = LoadState.LOADING
            self._task = asyncio.create_task(self._load())
        return await asyncio.shield(self._task)

    async def _fetch(self, kind: DatasetKind) -> Any:
        try:
            return await self.source.fetch(kind)
        except Exception as e:
            raise DataLoadError(kind, f"fetch failed: {e}") from e

    async def _load(self) -> LoadedDatasets:
        kinds = list(DatasetKind)
        try:
            results = await asyncio.gather(*(self._fetch(k) for k in kinds), return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    raise result

            validated = {k: validate_payload(k, raw) for k, raw in zip(kinds, results)}
            zone_mapping, missing = fill_missing_zones(
                validated[DatasetKind.NEIGHBOURHOODS].names, validated[DatasetKind.ZONE_MAPPING],
            )
            if missing:
                logger.warning(
                    "Zone mapping has no entry for %d neighbourhoods, using %s: %s",
                    len(missing), FALLBACK_ZONE, ", ".join(missing),
                )
            datasets = LoadedDatasets(
                crime=validated[DatasetKind.CRIME],
                rent=validated[DatasetKind.RENT],
                schools=validated[DatasetKind.SCHOOLS],
                parks=validated[DatasetKind.PARKS],
                neighbourhoods=validated[DatasetKind.NEIGHBOURHOODS],
                zone_mapping=zone_mapping,
            )
            self._build_indices(datasets)
        except BaseException as e:
            self._state = LoadState.FAILED
            logger.warning("Dataset load failed, resetting store: %r", e)
            self._reset()
            raise

        self._datasets = datasets
        self._state = LoadState.READY
        logger.info(
            "Loaded %d neighbourhoods, %d crime records, %d rent zones, %d schools, %d parks",
            len(self._neighbourhood_index),
            len(self._crime_index),
            len(self._rent_index),
            len(datasets.schools.features),
            len(datasets.parks.features),
        )
        return datasets

    def _reset(self) -> None:
        self._task = None
        self._datasets = None
        self._quartiles = {}
        self._crime_index = {}
        self._rent_index = {}
        self._neighbourhood_index = {}
        self._schools_by_name = {}
        self._parks_by_name = {}
        self._state = LoadState.UNINITIALIZED

    def _build_indices(self, datasets: LoadedDatasets) -> None:
        """Build every index from a fully validated dataset set, then swap them in together."""
        crime: dict[str, CrimeRecord] = {}
        for record in datasets.crime.crime_by_neighbourhood:
            key = canonical_name(record.neighbourhood_name)
            if key is not None:
                crime.setdefault(key, record)

        rent: dict[str, RentRecord] = {}
        for record in datasets.rent.rent_by_neighbourhood:
            key = canonical_name(record.neighbourhood_name)
            if key is not None:
                rent.setdefault(key, record)

        neighbourhoods: dict[str, Feature] = {}
        for feature in datasets.neighbourhoods.features:
            neighbourhoods.setdefault(feature.name, feature)

        self._crime_index = crime
        self._rent_index = rent
        self._neighbourhood_index = neighbourhoods
        self._schools_by_name = _group_by_neighbourhood(datasets.schools.features)
        self._parks_by_name = _group_by_neighbourhood(datasets.parks.features)

    # ── Accessors ────────────────────────────────────────────────

    def get_crime_by_neighbourhood(self, name: str | None) -> CrimeRecord | None:
        key = canonical_name(name)
        return self._crime_index.get(key) if key else None

    def get_rent_by_neighbourhood(self, name: str | None) -> RentRecord | None:
        """Direct rent row, else the mapped zone's row marked inherited_from, else None."""
        key = canonical_name(name)
        if key is None or self._datasets is None:
            return None

        record = self._rent_index.get(key)
        if record is not None:
            return record

        zone = self._datasets.zone_mapping.get(key)
        if zone is None:
            return None
        zone_record = self._rent_index.get(zone)
        if zone_record is None:
            logger.debug("Zone %s for %s has no rent record", zone, key)
            return None
        return zone_record.inherit(zone)

    def get_parks_by_neighbourhood(self, name: str | None) -> list[Feature]:
        key = canonical_name(name)
        return list(self._parks_by_name.get(key, [])) if key else []

    def get_schools_by_neighbourhood(self, name: str | None) -> list[Feature]:
        key = canonical_name(name)
        return list(self._schools_by_name.get(key, [])) if key else []

    def get_neighbourhood_by_name(self, name: str | None) -> Feature | None:
        key = canonical_name(name)
        return self._neighbourhood_index.get(key) if key else None

    def get_neighbourhoods(self) -> NeighbourhoodCollection | None:
        return self._datasets.neighbourhoods if self._datasets else None

    def neighbourhood_names(self) -> list[str]:
        return list(self._neighbourhood_index)

    # ── Quartiles ────────────────────────────────────────────────

    def quartile_map(self, metric: Metric) -> dict[str, QuartileTier]:
        """Tier map for a metric; empty until loaded."""
        if self._datasets is None:
            return {}
        if metric not in self._quartiles:
            d = self._datasets
            if metric is Metric.CRIME:
                ranked = build_crime_quartiles(d.crime)
            elif metric is Metric.SCHOOLS:
                ranked = build_schools_quartiles(d.schools, d.neighbourhoods)
            else:
                ranked = build_parks_quartiles(d.parks, d.neighbourhoods)
            self._quartiles[metric] = ranked
        return self._quartiles[metric]

    def get_crime_quartile(self, name: str | None) -> QuartileTier | None:
        return get_neighbourhood_quartile(name, self.quartile_map(Metric.CRIME))

    def get_schools_quartile(self, name: str | None) -> QuartileTier | None:
        return get_neighbourhood_quartile(name, self.quartile_map(Metric.SCHOOLS))

    def get_parks_quartile(self, name: str | None) -> QuartileTier | None:
        return get_neighbourhood_quartile(name, self.quartile_map(Metric.PARKS))


def _group_by_neighbourhood(features: list[Feature]) -> dict[str, list[Feature]]:
    grouped: dict[str, list[Feature]] = {}
    for feature in features:
        key = feature.neighbourhood_name
        if key:
            grouped.setdefault(key, []).append(feature)
    return grouped
