"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rentmap.api.deps import get_store
from rentmap.api.routes import neighbourhoods, quartiles
from rentmap.config import settings
from rentmap.data.store import DataLoadError, DataStore

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await get_store().load_all()
    except DataLoadError as e:
        logger.warning("Initial dataset load failed, will retry on first request: %s", e)
    yield


app = FastAPI(
    title="Rent Map",
    description="Neighbourhood crime, rent, school and park statistics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(neighbourhoods.router)
app.include_router(quartiles.router)


@app.get("/health")
async def health(store: DataStore = Depends(get_store)):
    return {"status": "ok", "data_loaded": store.is_loaded()}
