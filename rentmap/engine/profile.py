"""Assemble everything known about one neighbourhood from a loaded store."""

from collections.abc import Iterable

from rentmap.data.store import DataStore
from rentmap.models.profile import NeighbourhoodProfile, UnitPrice
from rentmap.models.rent import UNIT_TYPE_LABELS, UnitType

DEFAULT_UNIT_TYPES = (UnitType.TOTAL_AVG,)


def build_neighbourhood_profile(
    store: DataStore,
    name: str | None,
    unit_types: Iterable[UnitType] | None = None,
) -> NeighbourhoodProfile | None:
    """Returns None when the name is not a known neighbourhood boundary."""
    feature = store.get_neighbourhood_by_name(name)
    if feature is None:
        return None

    rent = store.get_rent_by_neighbourhood(feature.name)
    prices = [
        UnitPrice(
            unit_type=ut,
            label=UNIT_TYPE_LABELS[ut],
            price=rent.price_for(ut) if rent else None,
        )
        for ut in (unit_types or DEFAULT_UNIT_TYPES)
    ]

    return NeighbourhoodProfile(
        name=feature.name,
        district=feature.district,
        crime=store.get_crime_by_neighbourhood(feature.name),
        rent=rent,
        unit_prices=prices,
        park_count=len(store.get_parks_by_neighbourhood(feature.name)),
        school_count=len(store.get_schools_by_neighbourhood(feature.name)),
        crime_quartile=store.get_crime_quartile(feature.name),
        schools_quartile=store.get_schools_quartile(feature.name),
        parks_quartile=store.get_parks_quartile(feature.name),
    )
