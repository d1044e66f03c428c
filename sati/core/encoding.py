"""
Byte encoding helpers.

Addresses travel as base58 strings at the edges and as raw 32-byte values
inside the protocol. Every fixed-width field goes through these helpers so
length errors surface before hashing or serialization.
"""

from typing import Union

import base58

from .errors import InvalidLengthError

AddressLike = Union[bytes, bytearray, str]


def b58encode(data: bytes) -> str:
    """Encode bytes as a base58 string (Bitcoin alphabet)."""
    return base58.b58encode(bytes(data)).decode("ascii")


def b58decode(value: str) -> bytes:
    """
    Decode a base58 string.

    Raises:
        InvalidLengthError: If the string is not valid base58
    """
    try:
        return base58.b58decode(value)
    except ValueError as e:
        raise InvalidLengthError(f"Invalid base58 string: {value!r}", "base58") from e


def require_length(value: Union[bytes, bytearray], length: int, name: str) -> bytes:
    """
    Check that value is exactly `length` bytes.

    Raises:
        InvalidLengthError: If the length differs
    """
    if not isinstance(value, (bytes, bytearray)):
        raise InvalidLengthError(f"{name} must be bytes, got {type(value).__name__}", name)
    if len(value) != length:
        raise InvalidLengthError(f"{name} must be {length} bytes, got {len(value)}", name)
    return bytes(value)


def to_address_bytes(value: AddressLike, name: str = "address") -> bytes:
    """
    Normalize an address to 32 raw bytes.

    Args:
        value: Raw 32 bytes or base58 string
        name: Field name used in error messages

    Returns:
        32-byte address

    Raises:
        InvalidLengthError: If the decoded value is not 32 bytes
    """
    if isinstance(value, str):
        value = b58decode(value)
    return require_length(value, 32, name)


def to_address(value: AddressLike, name: str = "address") -> str:
    """Normalize an address to its base58 string form."""
    return b58encode(to_address_bytes(value, name))


def hex_to_bytes(value: str) -> bytes:
    """Decode hex with optional 0x prefix."""
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)
