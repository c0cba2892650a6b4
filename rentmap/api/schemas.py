"""Pydantic schemas for API responses."""

from pydantic import BaseModel

from rentmap.models.datasets import CrimeRecord
from rentmap.models.profile import NeighbourhoodProfile
from rentmap.models.quartile import QuartileTier


class QuartileTierResponse(BaseModel):
    tier: int
    emoji: str
    label: str
    description: str
    value: float


class UnitPriceResponse(BaseModel):
    unit_type: str
    label: str
    price: float | None = None


class NeighbourhoodProfileResponse(BaseModel):
    name: str
    district: str | None = None
    crime: CrimeRecord | None = None
    rent: dict | None = None  # dataset field names; carries _inheritedFrom on zone averages
    rent_is_zone_average: bool = False
    unit_prices: list[UnitPriceResponse] = []
    park_count: int = 0
    school_count: int = 0
    crime_quartile: QuartileTierResponse | None = None
    schools_quartile: QuartileTierResponse | None = None
    parks_quartile: QuartileTierResponse | None = None


def tier_response(tier: QuartileTier | None) -> QuartileTierResponse | None:
    if tier is None:
        return None
    return QuartileTierResponse(
        tier=tier.tier,
        emoji=tier.emoji,
        label=tier.label,
        description=tier.description,
        value=tier.value,
    )


def profile_response(profile: NeighbourhoodProfile) -> NeighbourhoodProfileResponse:
    return NeighbourhoodProfileResponse(
        name=profile.name,
        district=profile.district,
        crime=profile.crime,
        rent=profile.rent.to_payload() if profile.rent else None,
        rent_is_zone_average=profile.rent_is_zone_average,
        unit_prices=[
            UnitPriceResponse(unit_type=p.unit_type.value, label=p.label, price=p.price)
            for p in profile.unit_prices
        ],
        park_count=profile.park_count,
        school_count=profile.school_count,
        crime_quartile=tier_response(profile.crime_quartile),
        schools_quartile=tier_response(profile.schools_quartile),
        parks_quartile=tier_response(profile.parks_quartile),
    )
