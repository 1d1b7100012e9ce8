from __future__ import annotations

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from direct_chat.api.deps import get_token_service
from direct_chat.application.dto.identity import Identity
from direct_chat.application.ports.auth import TokenVerifier
from direct_chat.application.exceptions import InvalidTokenError, MalformedEnvelopeError
from direct_chat.config import settings
from direct_chat.infrastructure.ws.connection import Connection, WebSocketTransport
from direct_chat.infrastructure.ws.manager import ConnectionRegistry
from direct_chat.infrastructure.ws.protocol import PongFrame, parse_inbound
from direct_chat.services import delivery_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


async def _authenticate(token: str | None) -> Identity | None:
    if not token:
        return None
    verifier: TokenVerifier = get_token_service()
    try:
        return await verifier.verify(token)
    except InvalidTokenError as exc:
        logger.info("WS token rejected: %s", exc.detail)
        return None


@router.websocket("/")
@router.websocket("/ws")
async def ws_chat(
    websocket: WebSocket,
    token: str | None = Query(None),
) -> None:
    registry: ConnectionRegistry = websocket.app.state.registry

    await websocket.accept()
    connection = Connection(WebSocketTransport(websocket))
    await registry.register(connection)
    try:
        identity = await _authenticate(websocket.cookies.get(settings.AUTH_COOKIE_NAME) or token)
        if identity is not None:
            await registry.attach_identity(connection, identity)
        await _read_loop(websocket, connection)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %r", connection)
    finally:
        await registry.deregister(connection)


async def _read_loop(ws: WebSocket, connection: Connection) -> None:
    state = ws.app.state
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))
        raw = message.get("text") or message.get("bytes") or ""

        try:
            frame = parse_inbound(raw)
        except MalformedEnvelopeError as exc:
            logger.warning("Ignoring malformed frame from %r: %s", connection, exc.detail)
            continue

        if isinstance(frame, PongFrame):
            connection.acknowledge()
            continue

        try:
            await delivery_service.handle_inbound_message(
                connection,
                frame,
                registry=state.registry,
                storage=state.blob_storage,
                uow_factory=state.uow_factory,
            )
        except Exception:
            logger.exception("Error processing message from %r", connection)
