"""
Tests for compressed attestation account data.
"""

import pytest

from sati.core.errors import ValidationError
from sati.layout.codec import serialize
from sati.layout.compressed import CompressedAttestation, parse_compressed_attestation
from sati.layout.model import ContentType, DataType, FeedbackPayload, Outcome, ValidationPayload

SCHEMA = bytes([9]) * 32
AGENT = bytes([2]) * 32


def make_record(cls=FeedbackPayload):
    return serialize(cls(
        task_ref=bytes([1]) * 32,
        token_account=AGENT,
        counterparty=bytes([3]) * 32,
        outcome=Outcome.POSITIVE,
        content_type=ContentType.UTF8,
        content=b"great",
    ))


def make_attestation(num_signatures=2, data_type=DataType.FEEDBACK, cls=FeedbackPayload):
    return CompressedAttestation(
        sas_schema=SCHEMA,
        token_account=AGENT,
        data_type=data_type,
        data=make_record(cls),
        num_signatures=num_signatures,
        signature1=bytes([0xAA]) * 64,
        signature2=bytes([0xBB]) * 64 if num_signatures == 2 else bytes(64),
    )


def test_parse_dual_signature_account():
    """Borsh bytes parse back to the same account and inner payload."""
    attestation = make_attestation()
    parsed = parse_compressed_attestation(attestation.to_bytes())

    assert parsed == attestation
    payload = parsed.decode_payload()
    assert isinstance(payload, FeedbackPayload)
    assert payload.content == b"great"


def test_data_length_prefix():
    """Record length is a little-endian u32 at offset 65."""
    raw = make_attestation().to_bytes()
    assert int.from_bytes(raw[65:69], "little") == len(make_record())
    assert raw[64] == DataType.FEEDBACK


def test_single_signature_zeroes_second_slot():
    """num_signatures < 2 reports an all-zero second signature."""
    raw = bytearray(make_attestation().to_bytes())
    data_end = 69 + len(make_record())
    raw[data_end] = 1
    parsed = parse_compressed_attestation(bytes(raw))
    assert parsed.num_signatures == 1
    assert parsed.signature2 == bytes(64)
    assert parsed.signature1 == bytes([0xAA]) * 64


def test_validation_data_type():
    """Data type byte selects the payload variant."""
    attestation = make_attestation(data_type=DataType.VALIDATION, cls=ValidationPayload)
    parsed = parse_compressed_attestation(attestation.to_bytes())
    assert isinstance(parsed.decode_payload(), ValidationPayload)
    assert parsed.to_dict()["data_type"] == "VALIDATION"


def test_truncated_account_rejected():
    """Buffers shorter than header or declared data fail."""
    with pytest.raises(ValidationError):
        parse_compressed_attestation(bytes(40))
    raw = make_attestation().to_bytes()
    with pytest.raises(ValidationError) as exc:
        parse_compressed_attestation(raw[:100])
    assert exc.value.invariant == "data_len"


def test_unknown_data_type_rejected():
    """Data type byte outside the enum fails."""
    raw = bytearray(make_attestation().to_bytes())
    raw[64] = 7
    with pytest.raises(ValidationError) as exc:
        parse_compressed_attestation(bytes(raw))
    assert exc.value.invariant == "data_type"
