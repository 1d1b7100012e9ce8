"""Attachment blob storage on the local filesystem."""
from __future__ import annotations

import logging
import re
import time
import uuid
from pathlib import Path, PurePosixPath

import aiofiles

from direct_chat.application.exceptions import StorageWriteError

logger = logging.getLogger(__name__)

_EXT_RE = re.compile(r"^[A-Za-z0-9]{1,16}$")


def derive_filename(client_name: str) -> str:
    """Build a server-side name: ``<epoch-ms>-<random hex>[.ext]``.

    Only the extension of the client-supplied name survives, and only when it
    is short and alphanumeric.
    """
    token = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"
    ext = PurePosixPath(client_name.replace("\\", "/")).suffix.lstrip(".")
    if ext and _EXT_RE.match(ext):
        return f"{token}.{ext.lower()}"
    return token


class LocalBlobStorage:
    """Implements application.ports.storage.BlobStorage."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    async def put(self, filename: str, data: bytes) -> None:
        path = (self._root / filename).resolve()
        if path.parent != self._root:
            raise StorageWriteError(f"refusing to write outside upload dir: {filename!r}")
        try:
            self.ensure_root()
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as exc:
            raise StorageWriteError(f"{filename}: {exc}") from exc
        logger.info("Stored attachment %s (%d bytes)", filename, len(data))
