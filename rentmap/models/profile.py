"""Per-neighbourhood statistics as shown in the dashboard's detail panel."""

from dataclasses import dataclass, field

from rentmap.models.datasets import CrimeRecord
from rentmap.models.quartile import QuartileTier
from rentmap.models.rent import RentRecord, UnitType


@dataclass(frozen=True)
class UnitPrice:
    unit_type: UnitType
    label: str
    price: float | None  # None = no figure published


@dataclass(frozen=True)
class NeighbourhoodProfile:
    name: str
    district: str | None = None
    crime: CrimeRecord | None = None
    rent: RentRecord | None = None
    unit_prices: list[UnitPrice] = field(default_factory=list)
    park_count: int = 0
    school_count: int = 0

    crime_quartile: QuartileTier | None = None
    schools_quartile: QuartileTier | None = None
    parks_quartile: QuartileTier | None = None

    @property
    def rent_is_zone_average(self) -> bool:
        return self.rent is not None and self.rent.inherited_from is not None
