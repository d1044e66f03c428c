"""
Tests for commitment address derivation.

Critical tests:
1. Seed and address construction
2. Determinism and counterparty separation
3. Results are BN254 field elements
"""

import pytest

from sati.addressing.bn254 import (
    hash_to_bn254_field_size_be,
    hashv_to_bn254_field_size_be,
    hashv_to_bn254_field_size_be_with_bump,
    is_smaller_than_field_size,
)
from sati.addressing.derive import (
    attestation_seeds,
    commitment_for_payload,
    derive_address,
    derive_address_seed,
    derive_address_seed_v2,
    derive_address_v2,
    derive_commitment,
    derive_reputation_attestation_pda,
    derive_reputation_schema_pda,
    derive_sati_credential_pda,
    derive_sati_pda,
)
from sati.core.constants import ADDRESS_TREE, BN254_FIELD_SIZE, SATI_PROGRAM_ID
from sati.core.encoding import b58decode, b58encode
from sati.core.errors import InvalidLengthError
from sati.core.hashing import attestation_nonce, keccak256
from sati.layout.model import FeedbackPayload, Outcome

TASK = bytes([1]) * 32
SCHEMA = bytes([9]) * 32
SUBJECT = bytes([2]) * 32
COUNTERPARTY = bytes([3]) * 32


def test_field_size_check():
    """Values at or above the modulus are rejected."""
    modulus = BN254_FIELD_SIZE.to_bytes(32, "big")
    below = (BN254_FIELD_SIZE - 1).to_bytes(32, "big")
    assert not is_smaller_than_field_size(modulus)
    assert is_smaller_than_field_size(below)
    assert not is_smaller_than_field_size(b"\xff" * 32)


def test_truncated_hash_zeroes_first_byte():
    """hashv truncation is keccak with byte 0 cleared."""
    digest = keccak256(b"a", b"b")
    assert hashv_to_bn254_field_size_be([b"a", b"b"]) == b"\x00" + digest[1:]


def test_bump_search_returns_first_bump():
    """Truncated digests always fit, so the first bump (255) wins."""
    result = hash_to_bn254_field_size_be(b"data")
    assert result is not None
    digest, bump = result
    assert bump == 255
    assert digest == b"\x00" + keccak256(b"data", b"\xff")[1:]


def test_address_seed_layout():
    """Seed is hashv([program_id, "attestation", schema, subject, nonce])."""
    nonce = attestation_nonce(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    seed = derive_address_seed(attestation_seeds(SCHEMA, SUBJECT, nonce), SATI_PROGRAM_ID)
    expected = hashv_to_bn254_field_size_be(
        [b58decode(SATI_PROGRAM_ID), b"attestation", SCHEMA, SUBJECT, nonce]
    )
    assert seed == expected


def test_commitment_fields():
    """Commitment carries its seed material and a field-element address."""
    commitment = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY)

    assert commitment.nonce == attestation_nonce(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    assert commitment.address == derive_address(commitment.address_seed, ADDRESS_TREE)
    assert commitment.address[0] == 0
    assert is_smaller_than_field_size(commitment.address)
    assert commitment.address_tree == b58decode(ADDRESS_TREE)
    assert commitment.seeds == [b"attestation", SCHEMA, SUBJECT, commitment.nonce]


def test_commitment_deterministic():
    """Same tuple, same address, whatever the input encoding."""
    a = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    b = derive_commitment(TASK, b58encode(SCHEMA), b58encode(SUBJECT), b58encode(COUNTERPARTY))
    assert a == b


def test_commitment_separates_counterparties():
    """Different counterparty, different address."""
    a = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    b = derive_commitment(TASK, SCHEMA, SUBJECT, bytes([5]) * 32)
    assert a.address != b.address


def test_commitment_depends_on_tree_and_program():
    """Changing the tree or program moves the address."""
    base = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    other_tree = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY, address_tree=bytes([7]) * 32)
    other_program = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY, program_id=bytes([8]) * 32)
    assert base.address != other_tree.address
    assert base.address_seed == other_tree.address_seed
    assert base.address_seed != other_program.address_seed


def test_commitment_for_payload():
    """Payload commitments use its task, subject and counterparty."""
    payload = FeedbackPayload(
        task_ref=TASK,
        token_account=SUBJECT,
        counterparty=COUNTERPARTY,
        outcome=Outcome.NEUTRAL,
    )
    assert commitment_for_payload(payload, SCHEMA) == derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    # Outcome is not part of the address
    assert commitment_for_payload(payload.with_outcome(Outcome.POSITIVE), SCHEMA).address == \
        commitment_for_payload(payload, SCHEMA).address


def test_commitment_to_dict():
    """Dict form uses base58 addresses and hex hashes."""
    commitment = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    out = commitment.to_dict()
    assert out["address"] == b58encode(commitment.address)
    assert out["nonce"] == commitment.nonce.hex()
    assert out["address_tree"] == ADDRESS_TREE
    assert out["program_id"] == SATI_PROGRAM_ID


def test_derive_address_rejects_bad_seed():
    """Seeds must be 32 bytes."""
    with pytest.raises(InvalidLengthError):
        derive_address(bytes(31))


def test_v2_address_differs():
    """V2 derivation uses its own hashing scheme."""
    commitment = derive_commitment(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    v2 = derive_address_v2(commitment.address_seed, ADDRESS_TREE, SATI_PROGRAM_ID)
    assert v2 != commitment.address
    assert v2[0] == 0
    assert derive_address_seed_v2([b"a", b"b"]) == hashv_to_bn254_field_size_be_with_bump([b"a", b"b"])
    assert derive_address_seed_v2([b"a", b"b"]) == b"\x00" + keccak256(b"ab", b"\xff")[1:]


def test_reputation_pdas():
    """SAS PDA chain is deterministic and keyed by (provider, subject)."""
    sati_pda, bump = derive_sati_pda()
    assert 0 <= bump <= 255
    assert derive_sati_pda() == (sati_pda, bump)

    credential, _ = derive_sati_credential_pda()
    schema, _ = derive_reputation_schema_pda()
    assert len({sati_pda, credential, schema}) == 3

    a, _ = derive_reputation_attestation_pda(COUNTERPARTY, SUBJECT)
    b, _ = derive_reputation_attestation_pda(COUNTERPARTY, bytes([6]) * 32)
    assert a != b
    assert derive_reputation_attestation_pda(COUNTERPARTY, SUBJECT)[0] == a
