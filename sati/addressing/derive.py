"""
Commitment address derivation.

Compressed attestations live at:

    seed    = hashv_to_bn254([program_id, "attestation", schema, subject, nonce])
    address = hash_to_bn254(address_tree || seed)

with nonce = attestation_nonce(task_ref, schema, subject, counterparty).
Identical (task, schema, subject, counterparty) tuples always land on the
same address, so a duplicate create collides in the address tree.

Regular ReputationScore attestations live at SAS program-derived addresses
keyed by reputation_nonce(provider, subject).
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..core.constants import (
    ADDRESS_TREE,
    ATTESTATION_SEED,
    CREDENTIAL_SEED,
    REPUTATION_SCHEMA_NAME,
    REPUTATION_SCHEMA_VERSION,
    SAS_PROGRAM_ID,
    SATI_ATTESTATION_SEED,
    SATI_CREDENTIAL_NAME,
    SATI_PROGRAM_ID,
    SCHEMA_SEED,
)
from ..core.encoding import AddressLike, b58encode, require_length, to_address_bytes
from ..core.errors import AddressDerivationError
from ..core.hashing import attestation_nonce, reputation_nonce
from ..layout.model import AttestationPayload
from .bn254 import (
    hash_to_bn254_field_size_be,
    hashv_to_bn254_field_size_be,
    hashv_to_bn254_field_size_be_with_bump,
)
from .pda import find_program_address


@dataclass(frozen=True)
class Commitment:
    """
    Derived address plus the seed material that produced it.

    Fields:
        address: 32-byte compressed account address
        address_seed: BN254 seed fed to the address tree hash
        nonce: attestation_nonce output
        schema: SAS schema address
        subject: Agent mint address
        address_tree: Address tree the address belongs to
        program_id: Owning program
    """
    address: bytes
    address_seed: bytes
    nonce: bytes
    schema: bytes
    subject: bytes
    address_tree: bytes
    program_id: bytes
    tag: bytes = ATTESTATION_SEED

    @property
    def seeds(self) -> List[bytes]:
        return [self.tag, self.schema, self.subject, self.nonce]

    def to_dict(self) -> dict:
        return {
            "address": b58encode(self.address),
            "address_seed": self.address_seed.hex(),
            "nonce": self.nonce.hex(),
            "schema": b58encode(self.schema),
            "subject": b58encode(self.subject),
            "address_tree": b58encode(self.address_tree),
            "program_id": b58encode(self.program_id),
        }


def derive_address_seed(seeds: Sequence[bytes], program_id: AddressLike = SATI_PROGRAM_ID) -> bytes:
    """Address seed: hashv_to_bn254([program_id, *seeds])."""
    program_bytes = to_address_bytes(program_id, "program_id")
    return hashv_to_bn254_field_size_be([program_bytes, *[bytes(s) for s in seeds]])


def derive_address(seed: bytes, address_tree: AddressLike = ADDRESS_TREE) -> bytes:
    """
    Address from seed within an address tree.

    Raises:
        InvalidLengthError: If seed is not 32 bytes
        AddressDerivationError: If no bump yields a field element
    """
    seed = require_length(seed, 32, "seed")
    result = hash_to_bn254_field_size_be(to_address_bytes(address_tree, "address_tree") + seed)
    if result is None:
        raise AddressDerivationError("Failed to find valid bump seed")
    return result[0]


def derive_address_seed_v2(seeds: Sequence[bytes]) -> bytes:
    """V2 address seed (no program id, trailing 0xFF bump)."""
    return hashv_to_bn254_field_size_be_with_bump([bytes(s) for s in seeds])


def derive_address_v2(seed: bytes, address_tree: AddressLike, program_id: AddressLike) -> bytes:
    """V2 address: hashv_with_bump([seed, address_tree, program_id])."""
    seed = require_length(seed, 32, "seed")
    return hashv_to_bn254_field_size_be_with_bump([
        seed,
        to_address_bytes(address_tree, "address_tree"),
        to_address_bytes(program_id, "program_id"),
    ])


def attestation_seeds(schema: AddressLike, subject: AddressLike, nonce: bytes) -> List[bytes]:
    """Ordered seed list for a compressed attestation."""
    return [
        ATTESTATION_SEED,
        to_address_bytes(schema, "schema"),
        to_address_bytes(subject, "subject"),
        require_length(nonce, 32, "nonce"),
    ]


def derive_address_from_seeds(
    seeds: Sequence[bytes],
    program_id: AddressLike = SATI_PROGRAM_ID,
    address_tree: AddressLike = ADDRESS_TREE,
) -> Tuple[bytes, bytes]:
    """
    Derive (address, address_seed) from an ordered seed list.
    """
    address_seed = derive_address_seed(seeds, program_id)
    return derive_address(address_seed, address_tree), address_seed


def derive_commitment(
    task_ref: bytes,
    schema: AddressLike,
    subject: AddressLike,
    counterparty: AddressLike,
    program_id: AddressLike = SATI_PROGRAM_ID,
    address_tree: AddressLike = ADDRESS_TREE,
) -> Commitment:
    """
    Derive the commitment for one logical attestation.

    Args:
        task_ref: 32-byte task reference
        schema: SAS schema address
        subject: Agent mint address
        counterparty: Counterparty address
        program_id: Owning program (default SATI)
        address_tree: Address tree (default V1 tree)

    Returns:
        Commitment
    """
    schema_bytes = to_address_bytes(schema, "schema")
    subject_bytes = to_address_bytes(subject, "subject")
    nonce = attestation_nonce(task_ref, schema_bytes, subject_bytes, counterparty)
    address, address_seed = derive_address_from_seeds(
        attestation_seeds(schema_bytes, subject_bytes, nonce), program_id, address_tree
    )
    return Commitment(
        address=address,
        address_seed=address_seed,
        nonce=nonce,
        schema=schema_bytes,
        subject=subject_bytes,
        address_tree=to_address_bytes(address_tree, "address_tree"),
        program_id=to_address_bytes(program_id, "program_id"),
    )


def commitment_for_payload(
    payload: AttestationPayload,
    schema: AddressLike,
    program_id: AddressLike = SATI_PROGRAM_ID,
    address_tree: AddressLike = ADDRESS_TREE,
) -> Commitment:
    """Derive the commitment for a payload's (task, subject, counterparty)."""
    return derive_commitment(
        payload.task_ref,
        schema,
        payload.token_account,
        payload.counterparty,
        program_id,
        address_tree,
    )


# SAS program-derived addresses for regular (non-compressed) storage

def derive_sati_pda(program_id: AddressLike = SATI_PROGRAM_ID) -> Tuple[bytes, int]:
    """SATI program authority PDA (seed "sati_attestation")."""
    return find_program_address([SATI_ATTESTATION_SEED], program_id)


def derive_sati_credential_pda(program_id: AddressLike = SATI_PROGRAM_ID) -> Tuple[bytes, int]:
    """SAS credential owned by the SATI authority PDA."""
    sati_pda, _ = derive_sati_pda(program_id)
    return find_program_address([CREDENTIAL_SEED, sati_pda, SATI_CREDENTIAL_NAME], SAS_PROGRAM_ID)


def derive_reputation_schema_pda(program_id: AddressLike = SATI_PROGRAM_ID) -> Tuple[bytes, int]:
    """SAS ReputationScore schema (version 1) under the SATI credential."""
    credential, _ = derive_sati_credential_pda(program_id)
    return find_program_address(
        [SCHEMA_SEED, credential, REPUTATION_SCHEMA_NAME, bytes([REPUTATION_SCHEMA_VERSION])],
        SAS_PROGRAM_ID,
    )


def derive_reputation_attestation_pda(
    provider: AddressLike,
    subject: AddressLike,
    program_id: AddressLike = SATI_PROGRAM_ID,
) -> Tuple[bytes, int]:
    """
    SAS attestation PDA for one (provider, subject) reputation score.

    Returns:
        (address, bump)
    """
    nonce = reputation_nonce(provider, subject)
    credential, _ = derive_sati_credential_pda(program_id)
    schema, _ = derive_reputation_schema_pda(program_id)
    return find_program_address([ATTESTATION_SEED, credential, schema, nonce], SAS_PROGRAM_ID)
