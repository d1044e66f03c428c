"""
Ed25519 keys for attestation signing.

Public keys are raw 32-byte values (Solana addresses); signatures are
64 bytes over the exact message bytes, with no pre-hashing.
"""

from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from ..core.encoding import AddressLike, b58encode, require_length, to_address_bytes
from ..core.errors import InvalidLengthError


def _raw_public_bytes(public_key: Ed25519PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


class SigningKey:
    """
    Ed25519 signing key wrapper.

    Provides:
    - Key generation
    - Loading from a 32-byte seed or a 64-byte Solana keypair
    - Signing raw message bytes
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def generate(cls) -> "SigningKey":
        """Generate new Ed25519 keypair."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "SigningKey":
        """Load from 32-byte private seed."""
        seed = require_length(seed, 32, "seed")
        return cls(Ed25519PrivateKey.from_private_bytes(seed))

    @classmethod
    def from_keypair_bytes(cls, keypair: Union[bytes, list]) -> "SigningKey":
        """
        Load from a 64-byte Solana keypair (seed || public key).

        Args:
            keypair: 64 bytes, or the JSON int list written by solana-keygen

        Raises:
            InvalidLengthError: If keypair is not 64 bytes or the public half
                does not match the seed
        """
        keypair = require_length(bytes(keypair), 64, "keypair")
        key = cls.from_seed(keypair[:32])
        if key.public_key_bytes != keypair[32:]:
            raise InvalidLengthError("Keypair public key does not match seed", "keypair")
        return key

    @property
    def public_key_bytes(self) -> bytes:
        """Raw 32-byte public key."""
        return _raw_public_bytes(self.public_key)

    @property
    def address(self) -> str:
        """Base58 public key."""
        return b58encode(self.public_key_bytes)

    def sign(self, message: bytes) -> bytes:
        """
        Sign message bytes.

        Returns:
            64-byte signature
        """
        return self.private_key.sign(bytes(message))

    def verifying_key(self) -> "VerifyingKey":
        return VerifyingKey(self.public_key)


class VerifyingKey:
    """
    Ed25519 verifying key (public key only).
    """

    def __init__(self, public_key: Ed25519PublicKey):
        self.public_key = public_key

    @classmethod
    def from_address(cls, address: AddressLike) -> "VerifyingKey":
        """
        Build from raw 32 bytes or a base58 address.

        Raises:
            InvalidLengthError: If the address is not 32 bytes
        """
        raw = to_address_bytes(address, "public_key")
        return cls(Ed25519PublicKey.from_public_bytes(raw))

    @property
    def public_key_bytes(self) -> bytes:
        return _raw_public_bytes(self.public_key)

    def verify(self, message: bytes, signature: bytes) -> bool:
        """
        Verify signature on message.

        Returns:
            True if signature is valid, False otherwise
        """
        if len(signature) != 64:
            return False
        try:
            self.public_key.verify(bytes(signature), bytes(message))
            return True
        except InvalidSignature:
            return False


def verify_signature(public_key: AddressLike, message: bytes, signature: bytes) -> bool:
    """
    Verify an Ed25519 signature given a raw or base58 public key.

    Malformed keys verify as False rather than raising.
    """
    try:
        key = VerifyingKey.from_address(public_key)
    except (InvalidLengthError, ValueError):
        return False
    return key.verify(message, signature)
