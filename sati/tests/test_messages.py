"""
Tests for the counterparty signing message.
"""

import pytest

from sati.core.encoding import b58encode
from sati.core.errors import ValidationError
from sati.layout.codec import serialize
from sati.layout.content import create_json_content
from sati.layout.model import ContentType, FeedbackPayload, Offsets, Outcome
from sati.signing.messages import (
    build_counterparty_message,
    counterparty_message_for_payload,
    decode_content_for_display,
)

TASK = bytes([1]) * 32
AGENT = bytes([2]) * 32
COUNTERPARTY = bytes([3]) * 32


def make_payload(outcome=Outcome.POSITIVE, content_type=ContentType.NONE, content=b""):
    return FeedbackPayload(
        task_ref=TASK,
        token_account=AGENT,
        counterparty=COUNTERPARTY,
        outcome=outcome,
        content_type=content_type,
        content=content,
    )


def test_message_format():
    """Exact text, line by line."""
    content = create_json_content({"score": 95})
    message = counterparty_message_for_payload("FeedbackV1", make_payload(content_type=ContentType.JSON, content=content))

    expected = (
        "SATI FeedbackV1\n"
        "\n"
        f"Agent: {b58encode(AGENT)}\n"
        f"Task: {b58encode(TASK)}\n"
        "Outcome: Positive\n"
        'Details: {"score":95}\n'
        "\n"
        "Sign to create this attestation."
    )
    assert message.text == expected
    assert message.message_bytes == expected.encode("utf-8")


def test_message_binds_outcome():
    """Each outcome renders a different message."""
    texts = {
        counterparty_message_for_payload("FeedbackV1", make_payload(outcome)).text
        for outcome in Outcome
    }
    assert len(texts) == 3
    negative = counterparty_message_for_payload("FeedbackV1", make_payload(Outcome.NEGATIVE)).text
    assert "Outcome: Negative\n" in negative
    assert "Details: (none)\n" in negative


def test_message_from_raw_record():
    """Building from bytes matches building from the payload."""
    payload = make_payload(content_type=ContentType.UTF8, content=b"quick")
    assert build_counterparty_message("ValidationV1", serialize(payload)) == counterparty_message_for_payload(
        "ValidationV1", payload
    )


def test_message_rejects_short_data():
    """Records shorter than the base layout are rejected."""
    with pytest.raises(ValidationError) as exc:
        build_counterparty_message("FeedbackV1", bytes(100))
    assert str(exc.value) == "Data too small (minimum 131 bytes, got 100)"


def test_message_rejects_bad_outcome():
    """Outcome byte above 2 is rejected."""
    data = bytearray(serialize(make_payload()))
    data[Offsets.OUTCOME] = 5
    with pytest.raises(ValidationError):
        build_counterparty_message("FeedbackV1", bytes(data))


def test_display_rendering():
    """Details line per content type."""
    cid = bytes(range(34))
    assert decode_content_for_display(b"", ContentType.UTF8) == "(none)"
    assert decode_content_for_display(b"abc", ContentType.NONE) == "(none)"
    assert decode_content_for_display(b"abc", ContentType.UTF8) == "abc"
    assert decode_content_for_display(cid, ContentType.IPFS) == f"ipfs://{b58encode(cid)}"
    assert decode_content_for_display(cid, ContentType.ARWEAVE) == f"ar://{b58encode(cid)}"
    assert decode_content_for_display(b"\x01\x02", ContentType.ENCRYPTED) == "(encrypted)"
    assert decode_content_for_display(b"\xff\xfe", ContentType.UTF8) == "(2 bytes)"
