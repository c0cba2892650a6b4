"""Neighbourhood lookup routes."""

from fastapi import APIRouter, Depends, HTTPException, Query

from rentmap.api.deps import get_loaded_store
from rentmap.api.schemas import NeighbourhoodProfileResponse, profile_response
from rentmap.data.store import DataStore
from rentmap.engine.profile import build_neighbourhood_profile
from rentmap.models.rent import UnitType

router = APIRouter(prefix="/api/v1/neighbourhoods", tags=["neighbourhoods"])


@router.get("", response_model=list[str])
async def list_neighbourhoods(store: DataStore = Depends(get_loaded_store)):
    """Canonical names of every neighbourhood boundary."""
    return store.neighbourhood_names()


@router.get("/{name}", response_model=NeighbourhoodProfileResponse)
async def get_neighbourhood(
    name: str,
    unit_type: list[str] = Query(default=[]),
    store: DataStore = Depends(get_loaded_store),
):
    try:
        unit_types = [UnitType(u) for u in unit_type]
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    profile = build_neighbourhood_profile(store, name, unit_types or None)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Unknown neighbourhood: {name}")
    return profile_response(profile)


@router.get("/{name}/rent")
async def get_neighbourhood_rent(name: str, store: DataStore = Depends(get_loaded_store)):
    """Rent figures, marked with _inheritedFrom when they are a zone average."""
    rent = store.get_rent_by_neighbourhood(name)
    if rent is None:
        raise HTTPException(status_code=404, detail=f"No rent data for {name}")
    return rent.to_payload()
