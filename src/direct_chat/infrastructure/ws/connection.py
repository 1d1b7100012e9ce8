"""Live WebSocket connections and the transport adapter they send through.

Liveness probes are application frames: the server sends ``{"ping": true}``
and the client must answer ``{"pong": ...}``. ASGI has no protocol-level
ping, so a client that only answers control-frame pings is evicted once
the probe grace runs out.
"""
from __future__ import annotations

import itertools
import logging
from uuid import UUID

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import TransportSendError
from direct_chat.application.ports.transport import Transport
from direct_chat.domain.value_objects.enums import LivenessState
from direct_chat.infrastructure.ws.heartbeat import Heartbeat
from direct_chat.infrastructure.ws.protocol import PingFrame

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class WebSocketTransport:
    """Implements application.ports.transport.Transport over a Starlette WebSocket."""

    def __init__(self, ws: WebSocket) -> None:
        self._ws = ws

    async def send_text(self, raw: str) -> None:
        try:
            await self._ws.send_text(raw)
        except Exception as exc:
            raise TransportSendError(str(exc) or type(exc).__name__) from exc

    async def ping(self) -> None:
        await self.send_text(PingFrame().to_json())

    async def close(self, code: int = 1000, reason: str = "") -> None:
        if self._ws.application_state == WebSocketState.DISCONNECTED:
            return
        try:
            await self._ws.close(code=code, reason=reason)
        except RuntimeError:
            logger.debug("WS already closed", exc_info=True)


class Connection:
    """One live transport link plus the identity resolved for it, if any."""

    def __init__(self, transport: Transport) -> None:
        self.id = f"c{next(_ids)}"
        self.transport = transport
        self.identity: Identity | None = None
        self.heartbeat: Heartbeat | None = None

    def __repr__(self) -> str:
        who = self.identity.username if self.identity else "anonymous"
        return f"<Connection {self.id} {who}>"

    @property
    def user_id(self) -> UUID | None:
        return self.identity.user_id if self.identity else None

    @property
    def username(self) -> str | None:
        return self.identity.username if self.identity else None

    @property
    def is_alive(self) -> bool:
        return self.heartbeat is None or self.heartbeat.state is LivenessState.ALIVE

    def acknowledge(self) -> None:
        """The client answered a liveness probe."""
        if self.heartbeat is not None:
            self.heartbeat.acknowledge()
