"""
Domain-separated keccak-256 digests.

Every digest is keccak256(domain_tag || field_1 || field_2 || ...) with
fixed-width fields in a fixed order and no length prefixes. Output must match
the on-chain program byte for byte.

Signature model:
- Subject (agent owner) signs interaction_hash, blind to the outcome
- Counterparty signs a human-readable message (see sati.signing.messages)
"""

from Crypto.Hash import keccak

from .constants import DOMAIN_INTERACTION, DOMAIN_EVM_LINK
from .encoding import AddressLike, require_length, to_address_bytes


def keccak256(*parts: bytes) -> bytes:
    """
    keccak-256 over the concatenation of parts.

    Args:
        *parts: Byte strings hashed in order

    Returns:
        32-byte digest
    """
    h = keccak.new(digest_bits=256)
    for part in parts:
        h.update(part)
    return h.digest()


def interaction_hash(schema: AddressLike, task_ref: bytes, data_hash: bytes) -> bytes:
    """
    Compute the interaction hash the subject signs.

    Excludes outcome and the subject's own identity so the subject commits
    to the interaction before the outcome exists.

    Args:
        schema: SAS schema address
        task_ref: 32-byte task reference (e.g. CAIP-220 tx hash)
        data_hash: 32-byte commitment to request/response data

    Returns:
        32-byte digest

    Raises:
        InvalidLengthError: If any input has the wrong width
    """
    schema_bytes = to_address_bytes(schema, "schema")
    task_ref = require_length(task_ref, 32, "task_ref")
    data_hash = require_length(data_hash, 32, "data_hash")
    return keccak256(DOMAIN_INTERACTION, schema_bytes, task_ref, data_hash)


def attestation_nonce(
    task_ref: bytes,
    schema: AddressLike,
    subject: AddressLike,
    counterparty: AddressLike,
) -> bytes:
    """
    Compute the deterministic nonce for compressed attestation addressing.

    Includes counterparty so two counterparties never collide on one
    (task, subject) pair.

    Returns:
        32-byte nonce
    """
    task_ref = require_length(task_ref, 32, "task_ref")
    return keccak256(
        task_ref,
        to_address_bytes(schema, "schema"),
        to_address_bytes(subject, "subject"),
        to_address_bytes(counterparty, "counterparty"),
    )


def reputation_nonce(provider: AddressLike, subject: AddressLike) -> bytes:
    """
    Compute the nonce for a regular ReputationScore attestation.

    One current score per (provider, subject): resubmitting reuses the slot.
    """
    return keccak256(
        to_address_bytes(provider, "provider"),
        to_address_bytes(subject, "subject"),
    )


def delegation_nonce(
    delegate_schema: AddressLike,
    delegate: AddressLike,
    agent_mint: AddressLike,
) -> bytes:
    """Compute the nonce for a delegation attestation (one per schema, delegate, agent)."""
    return keccak256(
        to_address_bytes(delegate_schema, "delegate_schema"),
        to_address_bytes(delegate, "delegate"),
        to_address_bytes(agent_mint, "agent_mint"),
    )


def cross_chain_link_hash(subject: AddressLike, external_address: bytes, chain_id: str) -> bytes:
    """
    Compute the hash signed when linking an EVM address to an agent.

    Args:
        subject: Agent mint address
        external_address: 20-byte EVM address (no 0x prefix)
        chain_id: CAIP-2 chain identifier (e.g. "eip155:1")

    Returns:
        32-byte digest
    """
    subject_bytes = to_address_bytes(subject, "subject")
    external_address = require_length(external_address, 20, "external_address")
    return keccak256(DOMAIN_EVM_LINK, subject_bytes, external_address, chain_id.encode("utf-8"))


# Data hash helpers: the subject's commitment to interaction content.

def data_hash(request: bytes, response: bytes) -> bytes:
    """Compute data_hash from raw request and response bytes."""
    return keccak256(bytes(request), bytes(response))


def data_hash_from_hashes(request_hash: bytes, response_hash: bytes) -> bytes:
    """Compute data_hash from pre-computed 32-byte request/response hashes."""
    request_hash = require_length(request_hash, 32, "request_hash")
    response_hash = require_length(response_hash, 32, "response_hash")
    return keccak256(request_hash, response_hash)


def data_hash_from_strings(request: str, response: str) -> bytes:
    """Compute data_hash from UTF-8 strings."""
    return data_hash(request.encode("utf-8"), response.encode("utf-8"))


def zero_data_hash() -> bytes:
    """Zero data_hash for schemas without a blind commitment."""
    return bytes(32)
