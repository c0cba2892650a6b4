"""Rent data types: per-zone rent figures and the closed set of unit types."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UnitType(Enum):
    STUDIO = "studio"
    ONE_BEDROOM = "1_bedroom"
    TWO_BEDROOM = "2_bedroom"
    THREE_BEDROOM_PLUS = "3_bedroom_plus"
    TOTAL_AVG = "total_avg"


UNIT_TYPE_LABELS: dict[UnitType, str] = {
    UnitType.STUDIO: "Studio",
    UnitType.ONE_BEDROOM: "1 Bedroom",
    UnitType.TWO_BEDROOM: "2 Bedroom",
    UnitType.THREE_BEDROOM_PLUS: "3+ Bedroom",
    UnitType.TOTAL_AVG: "Average (All Units)",
}

# UnitType -> RentRecord attribute
_UNIT_TYPE_FIELDS: dict[UnitType, str] = {
    UnitType.STUDIO: "studio",
    UnitType.ONE_BEDROOM: "one_bedroom",
    UnitType.TWO_BEDROOM: "two_bedroom",
    UnitType.THREE_BEDROOM_PLUS: "three_bedroom_plus",
    UnitType.TOTAL_AVG: "total_avg",
}


class RentRecord(BaseModel):
    """Average monthly rent for one rental-market zone.

    `neighbourhood_name` is usually a zone name. `inherited_from` is only set
    on records handed out for a neighbourhood that has no rent row of its own,
    and serializes as `_inheritedFrom`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    neighbourhood_name: str
    studio: float | None = Field(default=None, ge=0)
    one_bedroom: float | None = Field(default=None, ge=0, alias="1_bedroom")
    two_bedroom: float | None = Field(default=None, ge=0, alias="2_bedroom")
    three_bedroom_plus: float | None = Field(default=None, ge=0, alias="3_bedroom_plus")
    total_avg: float | None = Field(default=None, ge=0)
    inherited_from: str | None = Field(default=None, alias="_inheritedFrom")

    def price_for(self, unit_type: UnitType) -> float | None:
        return getattr(self, _UNIT_TYPE_FIELDS[unit_type])

    def inherit(self, zone_name: str) -> "RentRecord":
        """Copy of this record marked as a zone average for another neighbourhood."""
        return self.model_copy(update={"inherited_from": zone_name})

    def to_payload(self) -> dict:
        """Wire form using the dataset's field names; no marker on direct hits."""
        data = self.model_dump(by_alias=True)
        if data["_inheritedFrom"] is None:
            del data["_inheritedFrom"]
        return data
