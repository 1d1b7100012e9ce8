"""Inbound message path: validate, store the attachment, persist, route live."""
from __future__ import annotations

import base64
import binascii
import logging

from direct_chat.application.exceptions import (
    MalformedEnvelopeError,
    PersistenceError,
    StorageWriteError,
)
from direct_chat.application.ports.storage import BlobStorage
from direct_chat.application.uow import UoWFactory
from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.storage.local import derive_filename
from direct_chat.infrastructure.ws.connection import Connection
from direct_chat.infrastructure.ws.manager import ConnectionRegistry
from direct_chat.infrastructure.ws.protocol import DeliveryFrame, InboundEnvelope
from direct_chat.services import message_service

logger = logging.getLogger(__name__)


def decode_attachment(data: str) -> bytes:
    """Decode base64 file data, accepting a ``data:<mime>;base64,`` prefix."""
    if data.startswith("data:"):
        _, sep, data = data.partition(",")
        if not sep:
            raise MalformedEnvelopeError("data URL without payload")
    # MIME encoders wrap lines
    data = "".join(data.split())
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEnvelopeError(f"bad base64 attachment: {exc}") from exc


async def handle_inbound_message(
    connection: Connection,
    envelope: InboundEnvelope,
    *,
    registry: ConnectionRegistry,
    storage: BlobStorage,
    uow_factory: UoWFactory,
) -> Message | None:
    """Persist ``envelope`` from ``connection`` and forward it to the recipient.

    Returns the stored message, or None when it was dropped. Nothing is ever
    reported back to the sender; failures are logged here.
    """
    sender = connection.identity
    if sender is None:
        logger.info("Dropping message from unidentified %r", connection)
        return None

    filename: str | None = None
    if envelope.file is not None:
        try:
            payload = decode_attachment(envelope.file.data)
        except MalformedEnvelopeError as exc:
            logger.warning("Dropping message from %s: %s", sender.username, exc.detail)
            return None
        filename = derive_filename(envelope.file.name)
        try:
            await storage.put(filename, payload)
        except StorageWriteError as exc:
            # The message is still stored; its file reference may dangle.
            logger.error("Attachment %s not saved: %s", filename, exc.detail)

    try:
        async with uow_factory() as uow:
            msg = await message_service.send_message(
                sender, envelope.recipient, envelope.text, filename, uow,
            )
    except PersistenceError as exc:
        logger.error("Message from %s to %s lost: %s", sender.username, envelope.recipient, exc.detail)
        return None
    logger.debug("Created message %s", msg.id)

    frame = DeliveryFrame.for_message(msg, envelope.file)
    targets = registry.connections_for(msg.recipient)
    for conn in targets:
        await registry.send(conn, frame)
    if not targets:
        logger.debug("Recipient %s offline; message %s stored only", msg.recipient, msg.id)
    return msg
