"""
Hashing into the BN254 scalar field.

Compressed-state addresses must be valid BN254 field elements. Two schemes:
- truncation: keccak digest with the first byte zeroed (always < field size)
- bump search: append bump 255..0 until the truncated digest is < field size
"""

from typing import Iterable, Optional, Tuple

from ..core.constants import BN254_FIELD_SIZE
from ..core.hashing import keccak256


def is_smaller_than_field_size(value: bytes) -> bool:
    """Big-endian value compared against the BN254 modulus."""
    return int.from_bytes(value, "big") < BN254_FIELD_SIZE


def _truncate(digest: bytes) -> bytes:
    return b"\x00" + digest[1:]


def hashv_to_bn254_field_size_be(inputs: Iterable[bytes]) -> bytes:
    """keccak over concatenated inputs, first byte zeroed."""
    return _truncate(keccak256(*inputs))


def hashv_to_bn254_field_size_be_with_bump(inputs: Iterable[bytes]) -> bytes:
    """keccak over concatenated inputs plus a trailing 0xFF, first byte zeroed."""
    return _truncate(keccak256(*inputs, b"\xff"))


def hash_to_bn254_field_size_be(data: bytes) -> Optional[Tuple[bytes, int]]:
    """
    Find the first bump (255 down to 0) whose truncated digest fits the field.

    Returns:
        (hash, bump) or None if no bump works
    """
    for bump in range(255, -1, -1):
        candidate = _truncate(keccak256(data, bytes([bump])))
        if is_smaller_than_field_size(candidate):
            return candidate, bump
    return None
