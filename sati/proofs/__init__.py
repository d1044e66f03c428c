"""
Validity proofs and packed accounts for compressed attestations.
"""

from .accounts import (
    AccountMeta,
    AccountRole,
    PackedAccounts,
    SystemAccountMetaConfig,
    cpi_signer,
    light_system_account_metas,
)
from .assembler import ProofAssembler, ProofContext, ProofOperation
from .model import (
    AddressWithTree,
    CompressedAccount,
    CompressedAccountData,
    CompressedProof,
    HashWithTree,
    MerkleProof,
    PackedAddressTreeInfo,
    PackedStateTreeInfo,
    ProofBundle,
    ProofState,
    TreeInfo,
    ValidityProofResult,
    ValidityProofWithContext,
)
from .rpc import PhotonRpc, parse_compressed_account

__all__ = [
    "AccountMeta",
    "AccountRole",
    "PackedAccounts",
    "SystemAccountMetaConfig",
    "cpi_signer",
    "light_system_account_metas",
    "ProofAssembler",
    "ProofContext",
    "ProofOperation",
    "ProofState",
    "AddressWithTree",
    "CompressedAccount",
    "CompressedAccountData",
    "CompressedProof",
    "HashWithTree",
    "MerkleProof",
    "PackedAddressTreeInfo",
    "PackedStateTreeInfo",
    "ProofBundle",
    "TreeInfo",
    "ValidityProofResult",
    "ValidityProofWithContext",
    "PhotonRpc",
    "parse_compressed_account",
]
