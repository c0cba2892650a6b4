"""Dataset transports: local static files or an HTTP static host."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx

from rentmap.config import settings
from rentmap.models.datasets import DatasetKind

logger = logging.getLogger(__name__)


def dataset_filenames() -> dict[DatasetKind, str]:
    return {
        DatasetKind.CRIME: settings.crime_file,
        DatasetKind.RENT: settings.rent_file,
        DatasetKind.SCHOOLS: settings.schools_file,
        DatasetKind.PARKS: settings.parks_file,
        DatasetKind.NEIGHBOURHOODS: settings.neighbourhoods_file,
        DatasetKind.ZONE_MAPPING: settings.zone_mapping_file,
    }


class FileDatasetSource:
    def __init__(self, data_dir: str | Path | None = None, filenames: dict[DatasetKind, str] | None = None):
        self.data_dir = Path(data_dir or settings.data_dir)
        self.filenames = filenames or dataset_filenames()

    def _read(self, path: Path) -> Any:
        with path.open(encoding="utf-8") as f:
            return json.load(f)

    async def fetch(self, kind: DatasetKind) -> Any:
        path = self.data_dir / self.filenames[kind]
        logger.debug("Reading %s dataset from %s", kind.value, path)
        return await asyncio.to_thread(self._read, path)


class HttpDatasetSource:
    def __init__(
        self,
        base_url: str | None = None,
        filenames: dict[DatasetKind, str] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.data_base_url).rstrip("/")
        self.filenames = filenames or dataset_filenames()
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def fetch(self, kind: DatasetKind) -> Any:
        url = f"{self.base_url}/{self.filenames[kind]}"
        logger.debug("Fetching %s dataset from %s", kind.value, url)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.json()


def default_source() -> FileDatasetSource | HttpDatasetSource:
    """HTTP when a base URL is configured, otherwise files under data_dir."""
    if settings.data_base_url:
        return HttpDatasetSource()
    return FileDatasetSource()
