from __future__ import annotations

from typing import Protocol


class Transport(Protocol):
    """One persistent client link, as seen by the delivery core."""

    async def send_text(self, raw: str) -> None:
        """Send one frame. Raises TransportSendError."""
        ...

    async def ping(self) -> None:
        """Send a liveness probe the client is expected to acknowledge."""
        ...

    async def close(self, code: int = 1000, reason: str = "") -> None: ...
