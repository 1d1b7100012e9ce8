"""In-process registry of live connections; its membership is the presence roster."""
from __future__ import annotations

import functools
import logging
from uuid import UUID

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import TransportSendError
from direct_chat.infrastructure.ws.connection import Connection
from direct_chat.infrastructure.ws.heartbeat import Heartbeat
from direct_chat.infrastructure.ws.protocol import Frame, PresenceFrame

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Tracks live connections, keeps them probed, and fans out frames.

    Every mutation of the live set happens without an intervening ``await``,
    so on the single event loop the set and its presence snapshot are always
    consistent when read. Fan-out iterates over a copy.
    """

    def __init__(self, *, probe_interval: float, probe_grace: float) -> None:
        self._probe_interval = probe_interval
        self._probe_grace = probe_grace
        # dict keeps registration order
        self._connections: dict[Connection, None] = {}

    def __contains__(self, connection: object) -> bool:
        return connection in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    @property
    def connections(self) -> list[Connection]:
        return list(self._connections)

    async def register(self, connection: Connection) -> None:
        if connection in self._connections:
            return
        self._connections[connection] = None
        connection.heartbeat = Heartbeat(
            connection.transport.ping,
            functools.partial(self._evict, connection),
            interval=self._probe_interval,
            grace=self._probe_grace,
            name=f"ws-heartbeat-{connection.id}",
        )
        connection.heartbeat.start()
        logger.debug("WS connected: %s (total=%d)", connection.id, len(self._connections))
        await self.broadcast_presence()

    async def deregister(self, connection: Connection) -> None:
        if connection not in self._connections:
            return
        del self._connections[connection]
        if connection.heartbeat is not None:
            connection.heartbeat.stop()
        logger.debug("WS disconnected: %r (total=%d)", connection, len(self._connections))
        await self.broadcast_presence()

    async def attach_identity(self, connection: Connection, identity: Identity) -> bool:
        """Mark ``connection`` as belonging to ``identity``.

        Returns False, changing nothing, if the connection closed while its
        token was being verified or already carries an identity.
        """
        if connection not in self._connections:
            logger.debug("Identity %s resolved after %s closed", identity.username, connection.id)
            return False
        if connection.identity is not None:
            return False
        connection.identity = identity
        logger.info("WS %s identified as %s", connection.id, identity.username)
        await self.broadcast_presence()
        return True

    def presence_snapshot(self) -> list[Identity]:
        seen: dict[UUID, Identity] = {}
        for conn in self._connections:
            if conn.identity is not None and conn.identity.user_id not in seen:
                seen[conn.identity.user_id] = conn.identity
        return list(seen.values())

    def connections_for(self, user_id: UUID) -> list[Connection]:
        return [c for c in self._connections if c.user_id == user_id]

    async def broadcast_presence(self) -> None:
        frame = PresenceFrame.from_identities(self.presence_snapshot())
        for conn in self.connections:
            await self.send(conn, frame)

    async def send(self, connection: Connection, frame: Frame) -> bool:
        raw = frame.to_json()
        try:
            await connection.transport.send_text(raw)
        except TransportSendError as exc:
            logger.warning("Send to %r failed: %s", connection, exc.detail)
            return False
        return True

    async def close_all(self) -> None:
        """Shutdown: stop every heartbeat and close every transport, without broadcasting."""
        conns = self.connections
        self._connections.clear()
        for conn in conns:
            if conn.heartbeat is not None:
                conn.heartbeat.stop()
            try:
                await conn.transport.close(code=1001, reason="Server shutting down")
            except Exception:
                logger.debug("Close failed for %r", conn, exc_info=True)
        if conns:
            logger.info("Closed %d live connections", len(conns))

    async def _evict(self, connection: Connection) -> None:
        try:
            await connection.transport.close(code=1011, reason="Liveness check failed")
        except Exception:
            logger.debug("Force-close failed for %r", connection, exc_info=True)
        await self.deregister(connection)
        logger.warning("Connection %r terminated due to inactivity", connection)
