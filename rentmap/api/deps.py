"""FastAPI dependency injection."""

from fastapi import Depends, HTTPException

from rentmap.data.store import DataLoadError, DataStore

_store: DataStore | None = None


def get_store() -> DataStore:
    global _store
    if _store is None:
        _store = DataStore()
    return _store


async def get_loaded_store(store: DataStore = Depends(get_store)) -> DataStore:
    """The shared store, loading it first if needed. A failed load is a 503; the next request retries."""
    try:
        await store.load_all()
    except DataLoadError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return store
