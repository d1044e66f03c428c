"""
Core protocol primitives.

- Errors: Typed exception hierarchy
- Encoding: base58 / fixed-width byte helpers
- Hashing: Domain-separated keccak-256 digests
- Constants: Program ids, trees, domain tags, seeds
"""

from .errors import (
    SatiError,
    ValidationError,
    InvalidLengthError,
    ContentTooLargeError,
    SignatureVerificationError,
    SelfAttestationError,
    StaleProofError,
    RpcError,
    ProofAssemblyError,
    AddressDerivationError,
    EncryptionError,
)
from .encoding import b58encode, b58decode, to_address_bytes, to_address, require_length
from .hashing import (
    keccak256,
    interaction_hash,
    attestation_nonce,
    reputation_nonce,
    delegation_nonce,
    cross_chain_link_hash,
    data_hash,
    data_hash_from_hashes,
    data_hash_from_strings,
    zero_data_hash,
)

__all__ = [
    "SatiError",
    "ValidationError",
    "InvalidLengthError",
    "ContentTooLargeError",
    "SignatureVerificationError",
    "SelfAttestationError",
    "StaleProofError",
    "RpcError",
    "ProofAssemblyError",
    "AddressDerivationError",
    "EncryptionError",
    "b58encode",
    "b58decode",
    "to_address_bytes",
    "to_address",
    "require_length",
    "keccak256",
    "interaction_hash",
    "attestation_nonce",
    "reputation_nonce",
    "delegation_nonce",
    "cross_chain_link_hash",
    "data_hash",
    "data_hash_from_hashes",
    "data_hash_from_strings",
    "zero_data_hash",
]
