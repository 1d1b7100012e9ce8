from __future__ import annotations

from typing import Protocol


class BlobStorage(Protocol):
    async def put(self, filename: str, data: bytes) -> None:
        """Persist ``data`` under ``filename``. Raises StorageWriteError."""
        ...
