"""Protocol definitions for dataset transports.

The store never knows where payloads come from; a source only has to turn a
dataset kind into decoded JSON.
"""

from typing import Any, Protocol, runtime_checkable

from rentmap.models.datasets import DatasetKind


@runtime_checkable
class DatasetSource(Protocol):
    async def fetch(self, kind: DatasetKind) -> Any:
        """Fetch and JSON-decode the payload for one dataset kind."""
        ...
