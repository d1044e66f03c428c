"""
Tests for encrypted attestation content.

Critical tests:
1. Encrypt/decrypt with keys derived from an Ed25519 wallet key
2. Wire format: version | ephemeral pubkey | nonce | ciphertext + tag
3. Tampered ciphertext and wrong keys fail authentication
4. Plaintext cap keeps the encrypted record within the content cap
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey

from sati.core.errors import ContentTooLargeError, EncryptionError, InvalidLengthError, ValidationError
from sati.layout.codec import deserialize, serialize
from sati.layout.encryption import (
    ENCRYPTION_VERSION,
    MAX_PLAINTEXT_SIZE,
    MIN_ENCRYPTED_SIZE,
    EncryptedPayload,
    decrypt_content,
    derive_encryption_keypair,
    derive_encryption_public_key,
    deserialize_encrypted_payload,
    encrypt_content,
)
from sati.layout.model import ContentType, FeedbackPayload, Outcome
from sati.signing.keys import SigningKey

SEED = bytes([0x42]) * 32
WALLET = SigningKey.from_seed(SEED)
RECIPIENT = derive_encryption_keypair(SEED)
OTHER = derive_encryption_keypair(bytes([0x43]) * 32)


def test_round_trip():
    """Content encrypted to a wallet decrypts with its derived private key."""
    payload = encrypt_content(b"great service", RECIPIENT.public_key)
    assert decrypt_content(payload, RECIPIENT.private_key) == b"great service"


def test_round_trip_through_bytes():
    """Serialized content parses back and decrypts."""
    data = encrypt_content(b'{"score":90}', RECIPIENT.public_key).to_bytes()
    assert decrypt_content(deserialize_encrypted_payload(data), RECIPIENT.private_key) == b'{"score":90}'


def test_wire_format():
    """version | ephemeral pubkey (32) | nonce (24) | ciphertext + 16-byte tag."""
    payload = encrypt_content(b"hello", RECIPIENT.public_key)
    data = payload.to_bytes()

    assert len(data) == MIN_ENCRYPTED_SIZE + 5
    assert data[0] == ENCRYPTION_VERSION
    assert data[1:33] == payload.ephemeral_pubkey
    assert data[33:57] == payload.nonce
    assert data[57:] == payload.ciphertext
    assert len(payload.ciphertext) == 5 + 16


def test_fresh_ephemeral_key_and_nonce():
    """Encrypting the same plaintext twice gives different ciphertexts."""
    a = encrypt_content(b"same", RECIPIENT.public_key)
    b = encrypt_content(b"same", RECIPIENT.public_key)
    assert a.ephemeral_pubkey != b.ephemeral_pubkey
    assert a.nonce != b.nonce
    assert a.ciphertext != b.ciphertext


def test_keypair_derivation():
    """Derived keys are deterministic, consistent and reachable from the public address."""
    assert derive_encryption_keypair(SEED) == RECIPIENT
    assert derive_encryption_keypair(SEED + WALLET.public_key_bytes) == RECIPIENT
    assert derive_encryption_public_key(WALLET.address) == RECIPIENT.public_key

    public = X25519PrivateKey.from_private_bytes(RECIPIENT.private_key).public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    assert public == RECIPIENT.public_key


def test_keypair_rejects_bad_length():
    with pytest.raises(InvalidLengthError):
        derive_encryption_keypair(bytes(31))


def test_tampered_ciphertext_fails():
    """A single flipped ciphertext bit fails authentication."""
    payload = encrypt_content(b"great service", RECIPIENT.public_key)
    flipped = bytes([payload.ciphertext[0] ^ 0x01]) + payload.ciphertext[1:]
    tampered = EncryptedPayload(payload.version, payload.ephemeral_pubkey, payload.nonce, flipped)

    with pytest.raises(EncryptionError):
        decrypt_content(tampered, RECIPIENT.private_key)


def test_tampered_nonce_fails():
    payload = encrypt_content(b"great service", RECIPIENT.public_key)
    tampered = EncryptedPayload(payload.version, payload.ephemeral_pubkey, bytes(24), payload.ciphertext)

    with pytest.raises(EncryptionError):
        decrypt_content(tampered, RECIPIENT.private_key)


def test_wrong_key_fails():
    payload = encrypt_content(b"great service", RECIPIENT.public_key)
    with pytest.raises(EncryptionError):
        decrypt_content(payload, OTHER.private_key)


def test_plaintext_cap():
    """Largest plaintext fills the 512-byte content cap exactly; one more byte is rejected."""
    data = encrypt_content(bytes(MAX_PLAINTEXT_SIZE), RECIPIENT.public_key).to_bytes()
    assert MAX_PLAINTEXT_SIZE == 439
    assert len(data) == 512

    with pytest.raises(ContentTooLargeError):
        encrypt_content(bytes(MAX_PLAINTEXT_SIZE + 1), RECIPIENT.public_key)


def test_encrypted_content_in_record():
    """Encrypted bytes travel as record content and decrypt after decoding."""
    content = encrypt_content(b"private note", RECIPIENT.public_key).to_bytes()
    payload = FeedbackPayload(
        task_ref=bytes([1]) * 32,
        token_account=bytes([2]) * 32,
        counterparty=bytes([3]) * 32,
        outcome=Outcome.POSITIVE,
        content_type=ContentType.ENCRYPTED,
        content=content,
    )

    decoded = deserialize(serialize(payload))

    assert decoded.content_type == ContentType.ENCRYPTED
    parsed = deserialize_encrypted_payload(decoded.content)
    assert decrypt_content(parsed, RECIPIENT.private_key) == b"private note"


def test_deserialize_rejects_short_data():
    with pytest.raises(ValidationError) as exc:
        deserialize_encrypted_payload(bytes(MIN_ENCRYPTED_SIZE - 1))
    assert exc.value.invariant == "encrypted_size"


def test_deserialize_rejects_unknown_version():
    data = bytearray(encrypt_content(b"x", RECIPIENT.public_key).to_bytes())
    data[0] = 2
    with pytest.raises(ValidationError) as exc:
        deserialize_encrypted_payload(bytes(data))
    assert exc.value.invariant == "encryption_version"


def test_encrypt_rejects_short_recipient_key():
    with pytest.raises(InvalidLengthError):
        encrypt_content(b"x", bytes(31))
