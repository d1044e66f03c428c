"""
Validity proof assembly for compressed attestation instructions.

Each operation walks a small state machine:

    START -> ADDRESS_DERIVED -> PROOF_FETCHED -> ACCOUNTS_PACKED -> READY
                                                      \\-> FAILED(reason)

Create:    new address, no existing leaves. Packs address tree, address
           queue, output state tree.
Mutation:  existing leaf (close). Packs state tree, queue; output is the
           same tree.
Combined:  existing leaf is proof input 0, new address input 1. Packs
           address tree, address queue, then state tree and queue.

Roots can rotate between fetch and submit. ensure_fresh() re-requests the
same proof and raises StaleProofError when any root moved;
with_fresh_proof() re-runs the whole operation on that error only.

State lives on a ProofOperation per call, so one assembler can serve
concurrent operations.
"""

from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable, List, Optional, Union

from ..addressing.derive import Commitment
from ..config import Settings
from ..core.encoding import b58encode, require_length
from ..core.errors import ProofAssemblyError, SatiError, StaleProofError
from ..logging_config import get_logger
from .accounts import PackedAccounts, SystemAccountMetaConfig
from .model import (
    AddressWithTree,
    CompressedAccount,
    HashWithTree,
    PackedAddressTreeInfo,
    PackedStateTreeInfo,
    ProofBundle,
    ProofState,
    ValidityProofResult,
    ValidityProofWithContext,
)
from .rpc import PhotonRpc


@dataclass
class ProofContext:
    """
    Explicit dependencies of the assembler.

    Fields:
        rpc: Photon client (owned by the caller)
        settings: Program id and default trees
        system_config: Light system accounts; defaults to settings.program_id
    """
    rpc: PhotonRpc
    settings: Settings = field(default_factory=Settings)
    system_config: Optional[SystemAccountMetaConfig] = None

    def system_accounts(self) -> SystemAccountMetaConfig:
        return self.system_config or SystemAccountMetaConfig(self_program=self.settings.program_id)


class ProofOperation:
    """
    State of a single proof operation.

    Operations create their own unless one is passed in; pass one to
    inspect the state and failure reason of an operation that raised.
    """

    def __init__(self, trace_id: Optional[str] = None):
        self.trace_id = trace_id
        self.state = ProofState.START
        self.failure_reason: Optional[str] = None
        self.history: List[ProofState] = [ProofState.START]

    @property
    def logger(self):
        return get_logger(__name__, self.trace_id)

    def advance(self, state: ProofState) -> None:
        self.state = state
        self.history.append(state)
        self.logger.debug("Proof state transition", extra={"state": state.value})

    def fail(self, reason: str) -> None:
        self.state = ProofState.FAILED
        self.failure_reason = reason
        self.history.append(ProofState.FAILED)
        self.logger.warning("Proof assembly failed", extra={"reason": reason})

    def finish(self, bundle: ProofBundle) -> ProofBundle:
        self.advance(ProofState.READY)
        return replace(bundle, history=list(self.history))


class ProofAssembler:
    """
    Builds ProofBundles for create, mutation and combined operations.

    The assembler holds only its context; every call tracks its state on
    its own ProofOperation.
    """

    def __init__(self, context: ProofContext, trace_id: Optional[str] = None):
        self.context = context
        self.trace_id = trace_id
        self.logger = get_logger(__name__, trace_id)

    def _begin(self, operation: Optional[ProofOperation], trace_id: Optional[str]) -> ProofOperation:
        if operation is None:
            return ProofOperation(self.trace_id or trace_id)
        if operation.trace_id is None:
            operation.trace_id = self.trace_id or trace_id
        return operation

    def _packed_accounts(self) -> PackedAccounts:
        return PackedAccounts.with_system_accounts(self.context.system_accounts())

    @staticmethod
    def _convert(proof: ValidityProofWithContext, expected_inputs: int) -> ValidityProofResult:
        if proof.compressed_proof is None:
            raise ProofAssemblyError("Prover returned no compressedProof")
        if len(proof.root_indices) < expected_inputs:
            raise ProofAssemblyError(
                f"Prover returned {len(proof.root_indices)} root indices, expected {expected_inputs}"
            )
        return ValidityProofResult(
            compressed_proof=proof.compressed_proof,
            root_indices=list(proof.root_indices),
            leaf_indices=list(proof.leaf_indices),
        )

    def _address_input(self, target: Union[Commitment, bytes]) -> AddressWithTree:
        settings = self.context.settings
        if isinstance(target, Commitment):
            tree = b58encode(target.address_tree)
            queue = settings.address_queue
            return AddressWithTree(address=target.address, tree=tree, queue=queue)
        address = require_length(target, 32, "address")
        return AddressWithTree(address=address, tree=settings.address_tree, queue=settings.address_queue)

    @staticmethod
    def _hash_input(account: CompressedAccount) -> HashWithTree:
        info = account.tree_info
        if not info.queue:
            raise ProofAssemblyError(f"No queue known for state tree {info.tree}")
        return HashWithTree(hash=account.hash, tree=info.tree, queue=info.queue)

    async def create_proof(
        self,
        target: Union[Commitment, bytes],
        operation: Optional[ProofOperation] = None,
    ) -> ProofBundle:
        """
        Proof bundle for creating a compressed account at a new address.

        Args:
            target: Commitment (uses its address tree) or raw 32-byte address
                (uses the configured address tree)
            operation: Optional state holder to observe this call

        Returns:
            ProofBundle with address_tree_info set

        Raises:
            ProofAssemblyError: If the prover response is unusable
            RpcError: If the indexer call fails
        """
        trace = b58encode(target.address) if isinstance(target, Commitment) else None
        op = self._begin(operation, trace)
        try:
            new_address = self._address_input(target)
            op.advance(ProofState.ADDRESS_DERIVED)

            proof = await self.context.rpc.get_validity_proof(new_addresses=[new_address])
            op.advance(ProofState.PROOF_FETCHED)

            packed = self._packed_accounts()
            tree_index = packed.insert_or_get(new_address.tree)
            queue_index = packed.insert_or_get(new_address.queue)
            output_index = packed.insert_or_get(self.context.settings.state_tree)
            remaining, system_start, packed_start = packed.to_account_metas()
            op.advance(ProofState.ACCOUNTS_PACKED)

            result = self._convert(proof, 1)
            bundle = ProofBundle(
                proof=result,
                output_state_tree_index=output_index,
                remaining_accounts=remaining,
                address_tree_info=PackedAddressTreeInfo(
                    root_index=result.root_indices[0],
                    address_merkle_tree_pubkey_index=tree_index,
                    address_queue_pubkey_index=queue_index,
                ),
                address=new_address.address,
                roots=list(proof.roots),
                system_start=system_start,
                packed_start=packed_start,
                new_addresses=[new_address],
            )
        except SatiError as e:
            op.fail(str(e))
            raise
        return op.finish(bundle)

    async def mutation_proof(
        self,
        account: CompressedAccount,
        operation: Optional[ProofOperation] = None,
    ) -> ProofBundle:
        """
        Proof bundle for consuming (closing) an existing compressed account.

        Returns:
            ProofBundle with state_tree_info set; output is the same tree

        Raises:
            ProofAssemblyError: If the prover response is unusable or the
                account's queue is unknown
            RpcError: If the indexer call fails
        """
        op = self._begin(operation, b58encode(account.hash))
        try:
            leaf = self._hash_input(account)
            op.advance(ProofState.ADDRESS_DERIVED)

            proof = await self.context.rpc.get_validity_proof(hashes=[leaf])
            op.advance(ProofState.PROOF_FETCHED)

            packed = self._packed_accounts()
            tree_index = packed.insert_or_get(leaf.tree)
            queue_index = packed.insert_or_get(leaf.queue)
            remaining, system_start, packed_start = packed.to_account_metas()
            op.advance(ProofState.ACCOUNTS_PACKED)

            result = self._convert(proof, 1)
            bundle = ProofBundle(
                proof=result,
                output_state_tree_index=tree_index,
                remaining_accounts=remaining,
                state_tree_info=self._state_tree_info(proof, result, 0, tree_index, queue_index, account),
                roots=list(proof.roots),
                system_start=system_start,
                packed_start=packed_start,
                hashes=[leaf],
            )
        except SatiError as e:
            op.fail(str(e))
            raise
        return op.finish(bundle)

    async def combined_proof(
        self,
        target: Union[Commitment, bytes],
        account: CompressedAccount,
        operation: Optional[ProofOperation] = None,
    ) -> ProofBundle:
        """
        One proof covering an existing leaf and a new address.

        The existing leaf is proof input 0, the new address input 1.
        Remaining accounts hold the address tree and queue first, then the
        state tree and queue; the output goes to the state tree.
        """
        trace = b58encode(target.address) if isinstance(target, Commitment) else b58encode(account.hash)
        op = self._begin(operation, trace)
        try:
            leaf = self._hash_input(account)
            new_address = self._address_input(target)
            op.advance(ProofState.ADDRESS_DERIVED)

            proof = await self.context.rpc.get_validity_proof(hashes=[leaf], new_addresses=[new_address])
            op.advance(ProofState.PROOF_FETCHED)

            packed = self._packed_accounts()
            address_tree_index = packed.insert_or_get(new_address.tree)
            address_queue_index = packed.insert_or_get(new_address.queue)
            tree_index = packed.insert_or_get(leaf.tree)
            queue_index = packed.insert_or_get(leaf.queue)
            remaining, system_start, packed_start = packed.to_account_metas()
            op.advance(ProofState.ACCOUNTS_PACKED)

            result = self._convert(proof, 2)
            bundle = ProofBundle(
                proof=result,
                output_state_tree_index=tree_index,
                remaining_accounts=remaining,
                address_tree_info=PackedAddressTreeInfo(
                    root_index=result.root_indices[1],
                    address_merkle_tree_pubkey_index=address_tree_index,
                    address_queue_pubkey_index=address_queue_index,
                ),
                state_tree_info=self._state_tree_info(proof, result, 0, tree_index, queue_index, account),
                address=new_address.address,
                roots=list(proof.roots),
                system_start=system_start,
                packed_start=packed_start,
                hashes=[leaf],
                new_addresses=[new_address],
            )
        except SatiError as e:
            op.fail(str(e))
            raise
        return op.finish(bundle)

    @staticmethod
    def _state_tree_info(
        proof: ValidityProofWithContext,
        result: ValidityProofResult,
        position: int,
        tree_index: int,
        queue_index: int,
        account: CompressedAccount,
    ) -> PackedStateTreeInfo:
        leaf_index = result.leaf_indices[position] if len(result.leaf_indices) > position else account.leaf_index
        prove_by_index = account.prove_by_index
        if len(proof.prove_by_indices) > position:
            prove_by_index = prove_by_index or proof.prove_by_indices[position]
        return PackedStateTreeInfo(
            merkle_tree_pubkey_index=tree_index,
            queue_pubkey_index=queue_index,
            leaf_index=leaf_index,
            root_index=result.root_indices[position],
            prove_by_index=prove_by_index,
        )

    async def ensure_fresh(self, bundle: ProofBundle) -> ProofBundle:
        """
        Re-request the bundle's proof and compare roots.

        Returns:
            The same bundle when every root is unchanged

        Raises:
            StaleProofError: If any root differs from the fetched one
        """
        current = await self.context.rpc.get_validity_proof(
            hashes=bundle.hashes, new_addresses=bundle.new_addresses
        )
        if list(current.roots) != list(bundle.roots):
            raise StaleProofError(
                f"Proof roots changed since fetch ({len(bundle.roots)} root(s) checked)"
            )
        return bundle

    async def with_fresh_proof(
        self,
        operation: Callable[[], Awaitable[ProofBundle]],
        attempts: int = 3,
    ) -> ProofBundle:
        """
        Run operation until it yields a bundle that passes ensure_fresh.

        Only StaleProofError is retried; every other error propagates.

        Args:
            operation: Zero-argument coroutine function, e.g.
                lambda: assembler.create_proof(commitment)
            attempts: Maximum number of runs

        Raises:
            StaleProofError: If every attempt produced a stale proof
        """
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        last_error: Optional[StaleProofError] = None
        for attempt in range(1, attempts + 1):
            bundle = await operation()
            try:
                return await self.ensure_fresh(bundle)
            except StaleProofError as e:
                last_error = e
                self.logger.warning(
                    "Stale proof, retrying", extra={"attempt": attempt, "attempts": attempts}
                )
        raise last_error
