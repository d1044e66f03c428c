"""
Photon JSON-RPC client (compression indexer and prover).

Requests are JSON-RPC 2.0 POSTs to a single endpoint. Most results are
wrapped as {"context": {"slot": N}, "value": ...}.

Usage:
    async with PhotonRpc("http://127.0.0.1:8784") as rpc:
        proof = await rpc.get_validity_proof(new_addresses=[...])
"""

import base64
import itertools
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from ..core.constants import MERKLE_TREE_PUBKEY, NULLIFIER_QUEUE_PUBKEY
from ..core.encoding import b58decode, b58encode, hex_to_bytes
from ..core.errors import RpcError
from .model import (
    AddressWithTree,
    CompressedAccount,
    CompressedAccountData,
    CompressedProof,
    HashWithTree,
    MerkleProof,
    TreeInfo,
    ValidityProofWithContext,
)

logger = logging.getLogger(__name__)

# V1 state trees report no queue; pair them with their nullifier queue
V1_STATE_QUEUES = {MERKLE_TREE_PUBKEY: NULLIFIER_QUEUE_PUBKEY}


def _bytes_value(value: Any) -> bytes:
    """Decode an int list, 0x-hex string or base58 string."""
    if isinstance(value, list):
        return bytes(value)
    if isinstance(value, str) and value.startswith(("0x", "0X")):
        return hex_to_bytes(value)
    return b58decode(value)


def _proof_part(value: Any) -> bytes:
    if isinstance(value, list):
        return bytes(value)
    return hex_to_bytes(value)


def _parse_compressed_proof(value: Optional[Dict[str, Any]]) -> Optional[CompressedProof]:
    if not value:
        return None
    return CompressedProof(a=_proof_part(value["a"]), b=_proof_part(value["b"]), c=_proof_part(value["c"]))


def _parse_discriminator(value: Any) -> bytes:
    if isinstance(value, int):
        return value.to_bytes(8, "little")
    if isinstance(value, list):
        return bytes(value)
    return hex_to_bytes(value)


def _tree_info(item: Dict[str, Any]) -> TreeInfo:
    context = item.get("merkleContext") or item.get("treeContext")
    if context:
        return TreeInfo(tree=context["tree"], queue=context.get("queue") or "", tree_type=context.get("treeType", 1))
    tree = item.get("tree") or item.get("merkleTree")
    return TreeInfo(tree=tree, queue=item.get("queue") or V1_STATE_QUEUES.get(tree, ""))


def parse_compressed_account(item: Dict[str, Any]) -> CompressedAccount:
    """Convert an indexer account item into a CompressedAccount."""
    data = item.get("data")
    account_data = None
    if data:
        account_data = CompressedAccountData(
            discriminator=_parse_discriminator(data.get("discriminator", 0)),
            data=base64.b64decode(data.get("data") or ""),
            data_hash=_bytes_value(data["dataHash"]) if data.get("dataHash") else bytes(32),
        )
    address = item.get("address")
    return CompressedAccount(
        hash=_bytes_value(item["hash"]),
        address=_bytes_value(address) if address else None,
        owner=item["owner"],
        lamports=int(item.get("lamports", 0)),
        data=account_data,
        tree_info=_tree_info(item),
        leaf_index=int(item["leafIndex"]),
        prove_by_index=bool(item.get("proveByIndex", False)),
    )


def _root_index(value: Any) -> Tuple[int, bool]:
    if isinstance(value, dict):
        return int(value["rootIndex"]), bool(value.get("proveByIndex", False))
    return int(value), False


def _parse_validity_proof_v1(
    value: Dict[str, Any],
    inputs: Sequence[TreeInfo],
    slot: int,
) -> ValidityProofWithContext:
    trees = value.get("merkleTrees") or [info.tree for info in inputs]
    tree_infos = []
    for i, tree in enumerate(trees):
        queue = inputs[i].queue if i < len(inputs) else V1_STATE_QUEUES.get(tree, "")
        tree_infos.append(TreeInfo(tree=tree, queue=queue))
    count = len(value.get("rootIndices", []))
    return ValidityProofWithContext(
        compressed_proof=_parse_compressed_proof(value.get("compressedProof")),
        roots=[_bytes_value(r) for r in value.get("roots", [])],
        root_indices=[int(i) for i in value.get("rootIndices", [])],
        leaf_indices=[int(i) for i in value.get("leafIndices", [])],
        leaves=[_bytes_value(leaf) for leaf in value.get("leaves", [])],
        tree_infos=tree_infos,
        prove_by_indices=[False] * count,
        slot=slot,
    )


def _parse_validity_proof_v2(value: Dict[str, Any], slot: int) -> ValidityProofWithContext:
    roots, root_indices, leaf_indices, leaves, tree_infos, by_index = [], [], [], [], [], []
    for account in value.get("accounts", []):
        index, prove_by_index = _root_index(account["rootIndex"])
        roots.append(_bytes_value(account["root"]))
        root_indices.append(index)
        leaf_indices.append(int(account["leafIndex"]))
        leaves.append(_bytes_value(account["hash"]))
        tree_infos.append(_tree_info(account))
        by_index.append(prove_by_index)
    for address in value.get("addresses", []):
        index, _ = _root_index(address["rootIndex"])
        roots.append(_bytes_value(address["root"]))
        root_indices.append(index)
        leaf_indices.append(0)
        leaves.append(_bytes_value(address["address"]))
        tree_infos.append(_tree_info(address))
        by_index.append(False)
    return ValidityProofWithContext(
        compressed_proof=_parse_compressed_proof(value.get("compressedProof")),
        roots=roots,
        root_indices=root_indices,
        leaf_indices=leaf_indices,
        leaves=leaves,
        tree_infos=tree_infos,
        prove_by_indices=by_index,
        slot=slot,
    )


class PhotonRpc:
    """
    Async client for the Photon indexer/prover API.

    Args:
        endpoint: RPC URL
        timeout: Request timeout in seconds
        api_key: Optional key sent as the api-key query parameter
        client: Optional pre-built httpx.AsyncClient (not closed by aclose)
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self._params = {"api-key": api_key} if api_key else None
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "PhotonRpc":
        return cls(settings.photon_url, settings.timeout, settings.api_key, transport=transport)

    async def __aenter__(self) -> "PhotonRpc":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def call(self, method: str, params: Any) -> Any:
        """
        Send one JSON-RPC request and return its result member.

        Raises:
            RpcError: On transport failure, HTTP error status or JSON-RPC error
        """
        request_id = next(self._ids)
        body = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}
        logger.debug("RPC request", extra={"method": method, "request_id": request_id})

        try:
            response = await self._client.post(self.endpoint, json=body, params=self._params)
        except httpx.HTTPError as e:
            raise RpcError(method, f"transport error: {e}") from e

        if response.status_code >= 400:
            raise RpcError(method, f"HTTP {response.status_code}: {response.text[:200]}", response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise RpcError(method, "response is not valid JSON") from e

        error = payload.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(method, error.get("message", "unknown error"), error.get("code"))
            raise RpcError(method, str(error))
        if "result" not in payload:
            raise RpcError(method, "response has no result")
        return payload["result"]

    async def _call_value(self, method: str, params: Any) -> Tuple[Any, int]:
        result = await self.call(method, params)
        if isinstance(result, dict) and "value" in result:
            return result["value"], int(result.get("context", {}).get("slot", 0))
        return result, 0

    async def get_indexer_health(self) -> str:
        value, _ = await self._call_value("getIndexerHealth", {})
        return value

    async def get_indexer_slot(self) -> int:
        value, _ = await self._call_value("getIndexerSlot", {})
        return int(value)

    async def get_validity_proof(
        self,
        hashes: Sequence[HashWithTree] = (),
        new_addresses: Sequence[AddressWithTree] = (),
    ) -> ValidityProofWithContext:
        """
        Request a validity proof for existing leaves and/or new addresses.

        Proof entries are ordered existing leaves first, then new addresses.

        Raises:
            RpcError: If the call fails
        """
        params = {
            "hashes": [
                {"hash": b58encode(h.hash), "tree": h.tree, "queue": h.queue} for h in hashes
            ],
            "newAddresses": [
                {"address": b58encode(a.address), "tree": a.tree, "queue": a.queue} for a in new_addresses
            ],
        }
        value, slot = await self._call_value("getValidityProof", params)
        if value is None:
            raise RpcError("getValidityProof", "empty proof response")

        if "accounts" in value or "addresses" in value:
            proof = _parse_validity_proof_v2(value, slot)
        else:
            inputs = [TreeInfo(h.tree, h.queue) for h in hashes]
            inputs += [TreeInfo(a.tree, a.queue) for a in new_addresses]
            proof = _parse_validity_proof_v1(value, inputs, slot)

        logger.debug(
            "Validity proof received",
            extra={"root_indices": proof.root_indices, "slot": slot},
        )
        return proof

    async def get_compressed_account(
        self,
        address: Optional[bytes] = None,
        hash: Optional[bytes] = None,
    ) -> Optional[CompressedAccount]:
        """
        Look up one compressed account by address or hash.

        Returns:
            CompressedAccount, or None if the indexer has no such account
        """
        if (address is None) == (hash is None):
            raise ValueError("Pass exactly one of address or hash")
        params = {"address": b58encode(address)} if address is not None else {"hash": b58encode(hash)}
        value, _ = await self._call_value("getCompressedAccount", params)
        if value is None:
            return None
        return parse_compressed_account(value)

    async def get_compressed_accounts_by_owner(
        self,
        owner: str,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Tuple[List[CompressedAccount], Optional[str]]:
        """
        One page of accounts owned by a program.

        Returns:
            (accounts, next_cursor); next_cursor is None on the last page
        """
        params: Dict[str, Any] = {"owner": owner}
        if cursor is not None:
            params["cursor"] = cursor
        if limit is not None:
            params["limit"] = limit
        value, _ = await self._call_value("getCompressedAccountsByOwner", params)
        items = [parse_compressed_account(item) for item in value.get("items", [])]
        return items, value.get("cursor")

    async def get_compressed_account_proof(self, hash: bytes) -> MerkleProof:
        """Merkle inclusion proof for one leaf hash."""
        value, _ = await self._call_value("getCompressedAccountProof", {"hash": b58encode(hash)})
        if value is None:
            raise RpcError("getCompressedAccountProof", f"no proof for {b58encode(hash)}")
        return MerkleProof(
            hash=_bytes_value(value["hash"]),
            tree_info=_tree_info(value),
            leaf_index=int(value["leafIndex"]),
            root=_bytes_value(value["root"]),
            root_index=int(value.get("rootSeq", 0)),
            proof=[_bytes_value(node) for node in value.get("proof", [])],
            prove_by_index=bool(value.get("proveByIndex", False)),
        )
