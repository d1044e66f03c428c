"""
Proof and tree data model.

Prover-side shapes (what the indexer returns) and instruction-side shapes
(what the on-chain program consumes, with trees referenced by index into
remaining accounts).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.encoding import b58encode


class ProofState(str, Enum):
    START = "start"
    ADDRESS_DERIVED = "address_derived"
    PROOF_FETCHED = "proof_fetched"
    ACCOUNTS_PACKED = "accounts_packed"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class CompressedProof:
    """Groth16 proof as three compressed group elements (a: 32, b: 64, c: 32 bytes)."""
    a: bytes
    b: bytes
    c: bytes

    def to_dict(self) -> Dict[str, List[int]]:
        return {"a": list(self.a), "b": list(self.b), "c": list(self.c)}


@dataclass(frozen=True)
class TreeInfo:
    tree: str
    queue: str
    tree_type: int = 1


@dataclass(frozen=True)
class ValidityProofWithContext:
    """
    Prover response.

    Fields:
        compressed_proof: None when the prover returned no proof
        roots: Root each input was proven against (base58-decoded)
        root_indices: Root index per input (existing leaves first, then addresses)
        leaf_indices: Leaf index per input
        leaves: Leaf hash or new address per input
        tree_infos: Tree/queue per input
        prove_by_indices: Whether each leaf is proven by index
        slot: Indexer slot the proof was produced at
    """
    compressed_proof: Optional[CompressedProof]
    roots: List[bytes]
    root_indices: List[int]
    leaf_indices: List[int]
    leaves: List[bytes]
    tree_infos: List[TreeInfo]
    prove_by_indices: List[bool]
    slot: int = 0


@dataclass(frozen=True)
class CompressedAccountData:
    discriminator: bytes
    data: bytes
    data_hash: bytes


@dataclass(frozen=True)
class CompressedAccount:
    """Compressed account as reported by the indexer."""
    hash: bytes
    address: Optional[bytes]
    owner: str
    lamports: int
    data: Optional[CompressedAccountData]
    tree_info: TreeInfo
    leaf_index: int
    prove_by_index: bool = False


@dataclass(frozen=True)
class MerkleProof:
    hash: bytes
    tree_info: TreeInfo
    leaf_index: int
    root: bytes
    root_index: int
    proof: List[bytes] = field(default_factory=list)
    prove_by_index: bool = False


@dataclass(frozen=True)
class PackedAddressTreeInfo:
    root_index: int
    address_merkle_tree_pubkey_index: int
    address_queue_pubkey_index: int


@dataclass(frozen=True)
class PackedStateTreeInfo:
    merkle_tree_pubkey_index: int
    queue_pubkey_index: int
    leaf_index: int
    root_index: int
    prove_by_index: bool = False


@dataclass(frozen=True)
class ValidityProofResult:
    """Proof in instruction-layer shape."""
    compressed_proof: CompressedProof
    root_indices: List[int]
    leaf_indices: List[int]


@dataclass(frozen=True)
class HashWithTree:
    """Existing leaf to prove, with the tree/queue it lives in."""
    hash: bytes
    tree: str
    queue: str


@dataclass(frozen=True)
class AddressWithTree:
    """New address to prove non-existent, with its address tree/queue."""
    address: bytes
    tree: str
    queue: str


@dataclass(frozen=True)
class ProofBundle:
    """
    Everything an instruction builder needs for one create/close operation.

    Fields:
        proof: Proof in instruction shape
        output_state_tree_index: Packed index of the output state tree
        remaining_accounts: Flat remaining-accounts list (AccountMeta)
        address_tree_info: Present for create and combined operations
        state_tree_info: Present for mutation and combined operations
        address: New address (create/combined)
        roots: Roots the proof was produced against
        system_start: Index of the first system account
        packed_start: Index of the first packed tree account
        hashes: Proof inputs for existing leaves (re-used by freshness checks)
        new_addresses: Proof inputs for new addresses
        history: States the producing operation went through
    """
    proof: ValidityProofResult
    output_state_tree_index: int
    remaining_accounts: List[Any]
    address_tree_info: Optional[PackedAddressTreeInfo] = None
    state_tree_info: Optional[PackedStateTreeInfo] = None
    address: Optional[bytes] = None
    roots: List[bytes] = field(default_factory=list)
    system_start: int = 0
    packed_start: int = 0
    hashes: List[HashWithTree] = field(default_factory=list)
    new_addresses: List[AddressWithTree] = field(default_factory=list)
    history: List[ProofState] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "proof": self.proof.compressed_proof.to_dict(),
            "root_indices": list(self.proof.root_indices),
            "leaf_indices": list(self.proof.leaf_indices),
            "output_state_tree_index": self.output_state_tree_index,
            "remaining_accounts": [m.to_dict() for m in self.remaining_accounts],
            "system_start": self.system_start,
            "packed_start": self.packed_start,
            "history": [state.value for state in self.history],
        }
        if self.address is not None:
            out["address"] = b58encode(self.address)
        if self.address_tree_info is not None:
            out["address_tree_info"] = vars(self.address_tree_info).copy()
        if self.state_tree_info is not None:
            out["state_tree_info"] = vars(self.state_tree_info).copy()
        return out
