"""
Two-party attestation signing and bundle verification.

Workflows (selected by SchemaConfig.signature_mode):
- DUAL_SIGNATURE: subject signs interaction_hash blind to the outcome,
  counterparty signs the human-readable message that binds the outcome.
  Bundle order: [subject, counterparty].
- COUNTERPARTY_SIGNED: counterparty signs the message only.
- AGENT_OWNER_SIGNED / SINGLE_SIGNER: the privileged party signs
  interaction_hash only.

Verification recomputes each role's expected message from the payload and
reports per-role validity. Bad signatures never raise.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..core.encoding import AddressLike, b58encode, require_length, to_address_bytes
from ..core.errors import (
    SelfAttestationError,
    SignatureVerificationError,
    ValidationError,
)
from ..core.hashing import interaction_hash
from ..layout.model import AttestationPayload, SchemaConfig, SignatureMode, required_signatures
from .keys import SigningKey, verify_signature
from .messages import SigningMessage, counterparty_message_for_payload


class SignerRole(str, Enum):
    SUBJECT = "subject"
    COUNTERPARTY = "counterparty"


_ROLES = {
    SignatureMode.DUAL_SIGNATURE: (SignerRole.SUBJECT, SignerRole.COUNTERPARTY),
    SignatureMode.COUNTERPARTY_SIGNED: (SignerRole.COUNTERPARTY,),
    SignatureMode.AGENT_OWNER_SIGNED: (SignerRole.SUBJECT,),
}


def roles_for_mode(mode: SignatureMode) -> Tuple[SignerRole, ...]:
    """Signer roles in bundle order."""
    return _ROLES[SignatureMode(mode)]


@dataclass(frozen=True)
class SignatureEntry:
    """One (pubkey, signature) pair."""
    pubkey: bytes
    signature: bytes

    def __post_init__(self):
        require_length(self.pubkey, 32, "pubkey")
        require_length(self.signature, 64, "signature")

    @property
    def address(self) -> str:
        return b58encode(self.pubkey)


@dataclass(frozen=True)
class SignatureBundle:
    """
    Signatures in the order the on-chain program expects them.

    Fields:
        entries: One or two SignatureEntry values
        counterparty_message: Exact message bytes signed by the counterparty
            (None when the mode has no counterparty signature)
    """
    entries: Tuple[SignatureEntry, ...]
    counterparty_message: Optional[bytes] = None

    def swapped(self) -> "SignatureBundle":
        """Copy with entries in reverse order."""
        return SignatureBundle(tuple(reversed(self.entries)), self.counterparty_message)


@dataclass
class BundleVerificationResult:
    """
    Result of bundle verification.

    Fields:
        valid: Overall validity (all required roles verified)
        subject_valid: Subject signature verified (None if not required)
        counterparty_valid: Counterparty signature verified (None if not required)
        error: Error message if verification failed
    """
    valid: bool
    subject_valid: Optional[bool] = None
    counterparty_valid: Optional[bool] = None
    error: Optional[str] = None

    def raise_for_failure(self) -> None:
        """
        Raises:
            SignatureVerificationError: If the bundle is not valid
        """
        if not self.valid:
            raise SignatureVerificationError(self.error or "Signature verification failed", self)


def _require_schema(config: SchemaConfig) -> bytes:
    if config.sas_schema is None:
        raise ValidationError(f"Schema {config.name} has no SAS schema address", "sas_schema")
    return to_address_bytes(config.sas_schema, "sas_schema")


def check_self_attestation(payload: AttestationPayload) -> None:
    """
    Reject payloads where subject and counterparty coincide.

    Raises:
        SelfAttestationError: If token_account equals counterparty
    """
    if bytes(payload.token_account) == bytes(payload.counterparty):
        raise SelfAttestationError(
            f"Self-attestation not allowed: subject and counterparty are both "
            f"{b58encode(payload.token_account)}"
        )


def expected_messages(config: SchemaConfig, payload: AttestationPayload) -> List[Tuple[SignerRole, bytes]]:
    """
    Messages the on-chain program recomputes for each signer role.

    Args:
        config: Schema config (sas_schema must be set)
        payload: Attestation payload

    Returns:
        [(role, message_bytes), ...] in bundle order
    """
    schema = _require_schema(config)
    messages = []
    for role in roles_for_mode(config.signature_mode):
        if role == SignerRole.SUBJECT:
            messages.append((role, interaction_hash(schema, payload.task_ref, payload.data_hash)))
        else:
            message = counterparty_message_for_payload(config.name, payload)
            messages.append((role, message.message_bytes))
    return messages


def sign_interaction(
    key: SigningKey,
    schema: AddressLike,
    task_ref: bytes,
    data_hash: bytes,
) -> SignatureEntry:
    """
    Subject-side blind signature over interaction_hash.

    Needs no outcome, so the subject cannot condition on it.
    """
    digest = interaction_hash(schema, task_ref, data_hash)
    return SignatureEntry(pubkey=key.public_key_bytes, signature=key.sign(digest))


def sign_counterparty(
    key: SigningKey,
    config: SchemaConfig,
    payload: AttestationPayload,
) -> Tuple[SignatureEntry, SigningMessage]:
    """
    Counterparty-side signature over the message binding the outcome.

    Raises:
        ValidationError: If the key is not the payload's counterparty
    """
    if key.public_key_bytes != bytes(payload.counterparty):
        raise ValidationError(
            f"Signing key {key.address} is not the payload counterparty "
            f"{b58encode(payload.counterparty)}",
            "counterparty",
        )
    message = counterparty_message_for_payload(config.name, payload)
    entry = SignatureEntry(pubkey=key.public_key_bytes, signature=key.sign(message.message_bytes))
    return entry, message


def build_bundle(
    config: SchemaConfig,
    payload: AttestationPayload,
    subject: Optional[SignatureEntry] = None,
    counterparty: Optional[SignatureEntry] = None,
    counterparty_message: Optional[bytes] = None,
) -> SignatureBundle:
    """
    Assemble a bundle for the schema's signature mode.

    Raises:
        SelfAttestationError: If subject equals counterparty, or both
            signers share one key in dual mode
        ValidationError: If a signature required by the mode is missing
            or an unexpected one is supplied
    """
    check_self_attestation(payload)
    mode = SignatureMode(config.signature_mode)
    supplied = {SignerRole.SUBJECT: subject, SignerRole.COUNTERPARTY: counterparty}

    entries = []
    for role in roles_for_mode(mode):
        entry = supplied.pop(role)
        if entry is None:
            raise ValidationError(f"{mode.name} requires a {role.value} signature", "signature_count")
        entries.append(entry)
    for role, entry in supplied.items():
        if entry is not None:
            raise ValidationError(f"{mode.name} takes no {role.value} signature", "signature_count")

    if mode == SignatureMode.DUAL_SIGNATURE and entries[0].pubkey == entries[1].pubkey:
        raise SelfAttestationError("Duplicate signers: subject and counterparty keys are identical")

    if SignerRole.COUNTERPARTY not in roles_for_mode(mode):
        counterparty_message = None
    return SignatureBundle(entries=tuple(entries), counterparty_message=counterparty_message)


def verify_bundle(
    config: SchemaConfig,
    payload: AttestationPayload,
    bundle: SignatureBundle,
    expected_subject_signer: Optional[AddressLike] = None,
) -> BundleVerificationResult:
    """
    Verify a bundle against messages recomputed from the payload.

    The counterparty entry must be signed by the payload's counterparty.
    The subject entry is checked against expected_subject_signer when given
    (the agent NFT owner, resolved by the caller).

    Args:
        config: Schema config (sas_schema must be set)
        payload: Payload the bundle claims to authenticate
        bundle: Signature bundle
        expected_subject_signer: Optional subject signer address

    Returns:
        BundleVerificationResult with per-role validity
    """
    mode = SignatureMode(config.signature_mode)
    roles = roles_for_mode(mode)
    count = len(bundle.entries)

    if count != required_signatures(mode):
        return BundleVerificationResult(
            valid=False,
            subject_valid=False if SignerRole.SUBJECT in roles else None,
            counterparty_valid=False if SignerRole.COUNTERPARTY in roles else None,
            error=f"{mode.name} requires {required_signatures(mode)} signature(s), got {count}",
        )

    if mode == SignatureMode.DUAL_SIGNATURE and bundle.entries[0].pubkey == bundle.entries[1].pubkey:
        return BundleVerificationResult(
            valid=False,
            subject_valid=False,
            counterparty_valid=False,
            error="Duplicate signers in dual-signature bundle",
        )

    role_valid = {}
    errors = []
    for (role, message), entry in zip(expected_messages(config, payload), bundle.entries):
        if role == SignerRole.SUBJECT:
            ok = verify_signature(entry.pubkey, message, entry.signature)
            if ok and expected_subject_signer is not None:
                ok = entry.pubkey == to_address_bytes(expected_subject_signer, "expected_subject_signer")
        else:
            ok = (
                entry.pubkey == bytes(payload.counterparty)
                and verify_signature(entry.pubkey, message, entry.signature)
            )
            if ok and bundle.counterparty_message is not None and bundle.counterparty_message != message:
                ok = False
                errors.append("Counterparty message does not match payload")
        role_valid[role] = ok
        if not ok:
            errors.append(f"Invalid {role.value} signature")

    valid = all(role_valid.values())
    return BundleVerificationResult(
        valid=valid,
        subject_valid=role_valid.get(SignerRole.SUBJECT),
        counterparty_valid=role_valid.get(SignerRole.COUNTERPARTY),
        error=None if valid else "; ".join(errors),
    )
