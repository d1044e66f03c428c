"""
Runtime settings loaded from environment variables.

Environment Variables:
    SATI_PHOTON_URL: Photon indexer / prover endpoint (default: http://127.0.0.1:8784)
    SATI_API_KEY: Optional API key, sent as the api-key query parameter
    SATI_PROGRAM_ID: Attestation program id
    SATI_ADDRESS_TREE: Address tree for new commitments
    SATI_ADDRESS_QUEUE: Address queue paired with the tree
    SATI_STATE_TREE: Output state tree
    SATI_RPC_TIMEOUT: Request timeout in seconds (default: 30)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .core.constants import (
    ADDRESS_QUEUE,
    ADDRESS_TREE,
    MERKLE_TREE_PUBKEY,
    SATI_PROGRAM_ID,
)

DEFAULT_PHOTON_URL = "http://127.0.0.1:8784"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    photon_url: str = DEFAULT_PHOTON_URL
    api_key: Optional[str] = None
    program_id: str = SATI_PROGRAM_ID
    address_tree: str = ADDRESS_TREE
    address_queue: str = ADDRESS_QUEUE
    state_tree: str = MERKLE_TREE_PUBKEY
    timeout: float = DEFAULT_TIMEOUT


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env: Mapping to read (default: os.environ)

    Raises:
        ValueError: If a numeric variable is malformed
    """
    env = os.environ if env is None else env
    return Settings(
        photon_url=env.get("SATI_PHOTON_URL", DEFAULT_PHOTON_URL),
        api_key=env.get("SATI_API_KEY") or None,
        program_id=env.get("SATI_PROGRAM_ID", SATI_PROGRAM_ID),
        address_tree=env.get("SATI_ADDRESS_TREE", ADDRESS_TREE),
        address_queue=env.get("SATI_ADDRESS_QUEUE", ADDRESS_QUEUE),
        state_tree=env.get("SATI_STATE_TREE", MERKLE_TREE_PUBKEY),
        timeout=_float(env, "SATI_RPC_TIMEOUT", DEFAULT_TIMEOUT),
    )
