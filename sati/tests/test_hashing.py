"""
Tests for domain-separated hashing.

Critical tests:
1. keccak-256 known vector
2. Interaction hash layout (domain || schema || task || data_hash)
3. Nonce sensitivity to every input
4. Fixed-width input enforcement
"""

import pytest

from sati.core import constants
from sati.core.constants import DOMAIN_EVM_LINK, DOMAIN_INTERACTION
from sati.core.encoding import b58encode
from sati.core.errors import InvalidLengthError
from sati.core.hashing import (
    attestation_nonce,
    cross_chain_link_hash,
    data_hash,
    data_hash_from_hashes,
    data_hash_from_strings,
    delegation_nonce,
    interaction_hash,
    keccak256,
    reputation_nonce,
    zero_data_hash,
)

SCHEMA = bytes([7]) * 32
TASK = bytes([1]) * 32
DATA = bytes([2]) * 32
SUBJECT = bytes([3]) * 32
COUNTERPARTY = bytes([4]) * 32


def test_keccak256_empty_vector():
    """keccak-256 (not SHA3-256) of the empty string."""
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_keccak256_parts_concatenate():
    """Hashing parts equals hashing their concatenation."""
    assert keccak256(b"ab", b"cd") == keccak256(b"abcd")


def test_interaction_hash_layout():
    """Interaction hash is keccak(domain || schema || task_ref || data_hash)."""
    expected = keccak256(DOMAIN_INTERACTION + SCHEMA + TASK + DATA)
    assert interaction_hash(SCHEMA, TASK, DATA) == expected


def test_interaction_hash_accepts_base58_schema():
    """Schema may be given as raw bytes or base58."""
    assert interaction_hash(b58encode(SCHEMA), TASK, DATA) == interaction_hash(SCHEMA, TASK, DATA)


def test_interaction_hash_changes_with_each_input():
    """Changing any field changes the digest."""
    base = interaction_hash(SCHEMA, TASK, DATA)
    assert interaction_hash(bytes([8]) * 32, TASK, DATA) != base
    assert interaction_hash(SCHEMA, bytes([9]) * 32, DATA) != base
    assert interaction_hash(SCHEMA, TASK, bytes(32)) != base


def test_interaction_hash_rejects_wrong_lengths():
    """Short task_ref or data_hash raises before hashing."""
    with pytest.raises(InvalidLengthError):
        interaction_hash(SCHEMA, TASK[:31], DATA)
    with pytest.raises(InvalidLengthError):
        interaction_hash(SCHEMA, TASK, DATA + b"\x00")
    with pytest.raises(InvalidLengthError):
        interaction_hash(SCHEMA[:16], TASK, DATA)


def test_attestation_nonce_includes_counterparty():
    """Two counterparties on the same (task, subject) never share a nonce."""
    a = attestation_nonce(TASK, SCHEMA, SUBJECT, COUNTERPARTY)
    b = attestation_nonce(TASK, SCHEMA, SUBJECT, bytes([5]) * 32)
    assert a != b
    assert a == keccak256(TASK + SCHEMA + SUBJECT + COUNTERPARTY)


def test_attestation_nonce_deterministic():
    """Same tuple, same nonce."""
    assert attestation_nonce(TASK, SCHEMA, SUBJECT, COUNTERPARTY) == attestation_nonce(
        TASK, b58encode(SCHEMA), b58encode(SUBJECT), b58encode(COUNTERPARTY)
    )


def test_reputation_nonce_is_ordered():
    """Provider and subject are not interchangeable."""
    assert reputation_nonce(SUBJECT, COUNTERPARTY) != reputation_nonce(COUNTERPARTY, SUBJECT)
    assert reputation_nonce(SUBJECT, COUNTERPARTY) == keccak256(SUBJECT + COUNTERPARTY)


def test_delegation_nonce():
    """Delegation nonce hashes schema, delegate, agent in order."""
    assert delegation_nonce(SCHEMA, SUBJECT, COUNTERPARTY) == keccak256(SCHEMA + SUBJECT + COUNTERPARTY)


def test_cross_chain_link_hash():
    """EVM link hash binds the chain id and a 20-byte address."""
    evm = bytes(range(20))
    digest = cross_chain_link_hash(SUBJECT, evm, "eip155:1")
    assert digest == keccak256(DOMAIN_EVM_LINK + SUBJECT + evm + b"eip155:1")
    assert digest != cross_chain_link_hash(SUBJECT, evm, "eip155:8453")

    with pytest.raises(InvalidLengthError):
        cross_chain_link_hash(SUBJECT, bytes(32), "eip155:1")


def test_data_hash_helpers():
    """String, raw and pre-hashed forms agree with their definitions."""
    assert data_hash_from_strings("req", "resp") == data_hash(b"req", b"resp")
    assert data_hash(b"req", b"resp") == keccak256(b"reqresp")
    assert data_hash_from_hashes(TASK, DATA) == keccak256(TASK + DATA)
    assert zero_data_hash() == bytes(32)

    with pytest.raises(InvalidLengthError):
        data_hash_from_hashes(TASK, b"short")


@pytest.mark.parametrize("position", [0, 1, 2, 3])
def test_attestation_nonce_changes_with_each_component(position):
    """Replacing any one of task, schema, subject or counterparty changes the nonce."""
    inputs = [TASK, SCHEMA, SUBJECT, COUNTERPARTY]
    changed = list(inputs)
    changed[position] = bytes([9]) * 32

    assert attestation_nonce(*changed) != attestation_nonce(*inputs)


def test_domain_tags():
    """Only the interaction and EVM-link tags are defined; both are versioned."""
    tags = sorted(name for name in dir(constants) if name.startswith("DOMAIN_"))
    assert tags == ["DOMAIN_EVM_LINK", "DOMAIN_INTERACTION"]
    assert DOMAIN_INTERACTION == b"SATI:interaction:v1"
    assert DOMAIN_EVM_LINK == b"SATI:evm_link:v1"
