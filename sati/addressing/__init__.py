"""
Commitment addressing: BN254 hashing, program-derived addresses, attestation seeds.
"""

from .bn254 import (
    is_smaller_than_field_size,
    hashv_to_bn254_field_size_be,
    hashv_to_bn254_field_size_be_with_bump,
    hash_to_bn254_field_size_be,
)
from .pda import is_on_curve, create_program_address, find_program_address
from .derive import (
    Commitment,
    derive_address_seed,
    derive_address,
    derive_address_seed_v2,
    derive_address_v2,
    attestation_seeds,
    derive_address_from_seeds,
    derive_commitment,
    commitment_for_payload,
    derive_sati_pda,
    derive_sati_credential_pda,
    derive_reputation_schema_pda,
    derive_reputation_attestation_pda,
)

__all__ = [
    "is_smaller_than_field_size",
    "hashv_to_bn254_field_size_be",
    "hashv_to_bn254_field_size_be_with_bump",
    "hash_to_bn254_field_size_be",
    "is_on_curve",
    "create_program_address",
    "find_program_address",
    "Commitment",
    "derive_address_seed",
    "derive_address",
    "derive_address_seed_v2",
    "derive_address_v2",
    "attestation_seeds",
    "derive_address_from_seeds",
    "derive_commitment",
    "commitment_for_payload",
    "derive_sati_pda",
    "derive_sati_credential_pda",
    "derive_reputation_schema_pda",
    "derive_reputation_attestation_pda",
]
