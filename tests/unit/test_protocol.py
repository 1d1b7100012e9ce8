from __future__ import annotations

import json

import pytest

from direct_chat.application.exceptions import MalformedEnvelopeError
from direct_chat.infrastructure.ws.protocol import (
    InboundEnvelope,
    PingFrame,
    PongFrame,
    PresenceFrame,
    parse_inbound,
)
from tests.conftest import ALICE_ID, BOB_ID


def test_parse_text_envelope():
    frame = parse_inbound(json.dumps({"recipient": str(BOB_ID), "text": "hi"}))

    assert isinstance(frame, InboundEnvelope)
    assert frame.recipient == BOB_ID
    assert frame.text == "hi"
    assert frame.file is None


def test_parse_file_envelope_with_blank_text():
    raw = json.dumps({
        "recipient": str(BOB_ID),
        "text": "   ",
        "file": {"name": "a.png", "data": "aGk="},
    })

    frame = parse_inbound(raw)

    assert frame.text is None
    assert frame.file.name == "a.png"


def test_parse_pong():
    assert isinstance(parse_inbound(b'{"pong": true}'), PongFrame)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        json.dumps({"text": "no recipient"}),
        json.dumps({"recipient": str(BOB_ID)}),
        json.dumps({"recipient": str(BOB_ID), "text": "  \n"}),
        json.dumps({"recipient": str(BOB_ID), "text": None, "file": None}),
        json.dumps({"recipient": "not-a-uuid", "text": "hi"}),
        json.dumps({"recipient": str(BOB_ID), "file": {"name": "a.png"}}),
    ],
)
def test_malformed_frames_are_rejected(raw):
    with pytest.raises(MalformedEnvelopeError):
        parse_inbound(raw)


def test_outbound_frames_use_camel_case():
    from direct_chat.application.dto.identity import Identity

    frame = PresenceFrame.from_identities([Identity(user_id=ALICE_ID, username="alice")])

    assert json.loads(frame.to_json()) == {
        "online": [{"userId": str(ALICE_ID), "username": "alice"}],
    }
    assert json.loads(PingFrame().to_json()) == {"ping": True}


def test_envelope_carrying_a_pong_key_is_still_a_message():
    frame = parse_inbound(json.dumps({"recipient": str(BOB_ID), "text": "hi", "pong": 1}))

    assert isinstance(frame, InboundEnvelope)
    assert frame.text == "hi"
