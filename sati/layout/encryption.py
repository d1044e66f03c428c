"""
End-to-end encrypted attestation content (ContentType.ENCRYPTED).

Scheme: ephemeral X25519 key agreement, HKDF-SHA256 key derivation
(salt = ephemeral public key, info = "sati-v1"), XChaCha20-Poly1305.
Ed25519 wallet keys convert to X25519 so content can be encrypted to a
Solana address.

Wire format (stored as the record's content bytes):
- version: 1 byte (0x01)
- ephemeral X25519 public key: 32 bytes
- XChaCha20 nonce: 24 bytes
- ciphertext + Poly1305 tag: len(plaintext) + 16 bytes

Usage:
    keypair = derive_encryption_keypair(wallet_seed)
    content = encrypt_content(b"great service", keypair.public_key).to_bytes()
    plaintext = decrypt_content(deserialize_encrypted_payload(content), keypair.private_key)
"""

from dataclasses import dataclass

import nacl.bindings
import nacl.exceptions
import nacl.utils
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..core.encoding import AddressLike, require_length, to_address_bytes
from ..core.errors import ContentTooLargeError, EncryptionError, ValidationError
from .model import MAX_CONTENT_SIZE

ENCRYPTION_VERSION = 1
PUBKEY_SIZE = 32
PRIVKEY_SIZE = 32
NONCE_SIZE = 24
TAG_SIZE = 16

# version + ephemeral pubkey + nonce + tag
MIN_ENCRYPTED_SIZE = 1 + PUBKEY_SIZE + NONCE_SIZE + TAG_SIZE
MAX_PLAINTEXT_SIZE = MAX_CONTENT_SIZE - MIN_ENCRYPTED_SIZE

HKDF_INFO = b"sati-v1"


@dataclass(frozen=True)
class EncryptionKeypair:
    """X25519 keypair (raw 32-byte keys)."""
    public_key: bytes
    private_key: bytes


@dataclass(frozen=True)
class EncryptedPayload:
    version: int
    ephemeral_pubkey: bytes
    nonce: bytes
    ciphertext: bytes

    def to_bytes(self) -> bytes:
        return serialize_encrypted_payload(self)


def derive_encryption_keypair(ed25519_private_key: bytes) -> EncryptionKeypair:
    """
    Derive the X25519 keypair belonging to an Ed25519 wallet key.

    Deterministic: the same wallet key always yields the same keypair.

    Args:
        ed25519_private_key: 32-byte seed or 64-byte seed || public key

    Raises:
        InvalidLengthError: If the key is neither 32 nor 64 bytes
    """
    seed = ed25519_private_key[:32] if len(ed25519_private_key) == 64 else ed25519_private_key
    seed = require_length(seed, 32, "ed25519_private_key")
    public_key, secret_key = nacl.bindings.crypto_sign_seed_keypair(seed)
    return EncryptionKeypair(
        public_key=nacl.bindings.crypto_sign_ed25519_pk_to_curve25519(public_key),
        private_key=nacl.bindings.crypto_sign_ed25519_sk_to_curve25519(secret_key),
    )


def derive_encryption_public_key(ed25519_public_key: AddressLike) -> bytes:
    """
    X25519 public key for an Ed25519 public key or base58 address.

    Raises:
        InvalidLengthError: If the key is not 32 bytes
        ValidationError: If the bytes are not an Ed25519 point
    """
    raw = to_address_bytes(ed25519_public_key, "ed25519_public_key")
    try:
        return nacl.bindings.crypto_sign_ed25519_pk_to_curve25519(raw)
    except nacl.exceptions.CryptoError as e:
        raise ValidationError("Not a valid Ed25519 public key", "encryption_key") from e


def _content_key(shared_secret: bytes, ephemeral_pubkey: bytes) -> bytes:
    return HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=ephemeral_pubkey,
        info=HKDF_INFO,
    ).derive(shared_secret)


def _exchange(private_key: X25519PrivateKey, public_key: bytes) -> bytes:
    try:
        return private_key.exchange(X25519PublicKey.from_public_bytes(public_key))
    except ValueError as e:
        raise EncryptionError(f"Key agreement failed: {e}") from e


def encrypt_content(plaintext: bytes, recipient_pubkey: bytes) -> EncryptedPayload:
    """
    Encrypt content for a recipient's X25519 public key.

    A fresh ephemeral keypair and nonce are generated per call.

    Raises:
        ContentTooLargeError: If plaintext exceeds MAX_PLAINTEXT_SIZE
        InvalidLengthError: If the recipient key is not 32 bytes
    """
    if len(plaintext) > MAX_PLAINTEXT_SIZE:
        raise ContentTooLargeError(
            f"Plaintext too large: {len(plaintext)} bytes (max {MAX_PLAINTEXT_SIZE})"
        )
    recipient = require_length(recipient_pubkey, PUBKEY_SIZE, "recipient_pubkey")

    ephemeral = X25519PrivateKey.generate()
    ephemeral_pubkey = ephemeral.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    key = _content_key(_exchange(ephemeral, recipient), ephemeral_pubkey)
    nonce = nacl.utils.random(NONCE_SIZE)
    ciphertext = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(bytes(plaintext), None, nonce, key)

    return EncryptedPayload(
        version=ENCRYPTION_VERSION,
        ephemeral_pubkey=ephemeral_pubkey,
        nonce=nonce,
        ciphertext=ciphertext,
    )


def decrypt_content(payload: EncryptedPayload, private_key: bytes) -> bytes:
    """
    Decrypt content with the recipient's X25519 private key.

    Raises:
        ValidationError: On unsupported version or malformed fields
        EncryptionError: On wrong key or tampered ciphertext
    """
    if payload.version != ENCRYPTION_VERSION:
        raise ValidationError(f"Unsupported encryption version: {payload.version}", "encryption_version")
    secret = require_length(private_key, PRIVKEY_SIZE, "private_key")
    require_length(payload.ephemeral_pubkey, PUBKEY_SIZE, "ephemeral_pubkey")
    require_length(payload.nonce, NONCE_SIZE, "nonce")

    shared = _exchange(X25519PrivateKey.from_private_bytes(secret), payload.ephemeral_pubkey)
    key = _content_key(shared, payload.ephemeral_pubkey)
    try:
        return nacl.bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(payload.ciphertext, None, payload.nonce, key)
    except nacl.exceptions.CryptoError as e:
        raise EncryptionError("Decryption failed: wrong key or tampered content") from e


def serialize_encrypted_payload(payload: EncryptedPayload) -> bytes:
    return b"".join([
        bytes([payload.version]),
        payload.ephemeral_pubkey,
        payload.nonce,
        payload.ciphertext,
    ])


def deserialize_encrypted_payload(data: bytes) -> EncryptedPayload:
    """
    Parse encrypted content bytes.

    Raises:
        ValidationError: If the data is shorter than MIN_ENCRYPTED_SIZE or
            carries an unsupported version
    """
    data = bytes(data)
    if len(data) < MIN_ENCRYPTED_SIZE:
        raise ValidationError(
            f"Encrypted payload too small: {len(data)} bytes (minimum {MIN_ENCRYPTED_SIZE})",
            "encrypted_size",
        )
    version = data[0]
    if version != ENCRYPTION_VERSION:
        raise ValidationError(
            f"Unsupported encryption version: {version} (supported: {ENCRYPTION_VERSION})",
            "encryption_version",
        )
    nonce_start = 1 + PUBKEY_SIZE
    ciphertext_start = nonce_start + NONCE_SIZE
    return EncryptedPayload(
        version=version,
        ephemeral_pubkey=data[1:nonce_start],
        nonce=data[nonce_start:ciphertext_start],
        ciphertext=data[ciphertext_start:],
    )
