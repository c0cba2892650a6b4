"""Schemas for the raw datasets the store loads.

Each payload is validated once at load time; the rest of the package only
ever sees these typed, frozen models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentmap.data.names import canonical_name
from rentmap.models.rent import RentRecord


class DatasetKind(Enum):
    CRIME = "crime"
    RENT = "rent"
    SCHOOLS = "schools"
    PARKS = "parks"
    NEIGHBOURHOODS = "neighbourhoods"
    ZONE_MAPPING = "zone_mapping"


class CrimeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    neighbourhood_name: str
    violent_weapons_crimes_total_2025: int = Field(ge=0)
    violent_weapons_crimes_monthly_avg: float = Field(ge=0)


class CrimePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    crime_by_neighbourhood: list[CrimeRecord]


class RentPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    rent_by_neighbourhood: list[RentRecord]


class Feature(BaseModel):
    """A GeoJSON feature. Geometry is carried through untouched."""

    model_config = ConfigDict(frozen=True)

    type: str = "Feature"
    geometry: dict[str, Any] | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str | None:
        return canonical_name(self.properties.get("name"))

    @property
    def district(self) -> str | None:
        return canonical_name(self.properties.get("district"))

    @property
    def neighbourhood_name(self) -> str | None:
        value = self.properties.get("neighbourhood_name")
        return canonical_name(value) if isinstance(value, str) else None


class FeatureCollection(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "FeatureCollection"
    features: list[Feature]


class NeighbourhoodCollection(FeatureCollection):
    """Boundary features; every feature must carry a non-blank `name`."""

    @field_validator("features")
    @classmethod
    def _require_names(cls, features: list[Feature]) -> list[Feature]:
        for i, feature in enumerate(features):
            raw = feature.properties.get("name")
            if not isinstance(raw, str) or canonical_name(raw) is None:
                raise ValueError(f"feature {i} has no 'name' property")
        return features

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.features]


@dataclass(frozen=True)
class LoadedDatasets:
    crime: CrimePayload
    rent: RentPayload
    schools: FeatureCollection
    parks: FeatureCollection
    neighbourhoods: NeighbourhoodCollection
    zone_mapping: dict[str, str] = field(default_factory=dict)
