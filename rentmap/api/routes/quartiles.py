"""Quartile tier routes."""

from fastapi import APIRouter, Depends

from rentmap.api.deps import get_loaded_store
from rentmap.api.schemas import QuartileTierResponse, tier_response
from rentmap.data.store import DataStore
from rentmap.models.quartile import Metric

router = APIRouter(prefix="/api/v1/quartiles", tags=["quartiles"])


@router.get("/{metric}", response_model=dict[str, QuartileTierResponse])
async def get_quartiles(metric: Metric, store: DataStore = Depends(get_loaded_store)):
    """Tier per neighbourhood for crime, schools or parks."""
    return {name: tier_response(tier) for name, tier in store.quartile_map(metric).items()}
