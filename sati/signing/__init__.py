"""
Signature protocol: keys, counterparty messages, bundles, verification.
"""

from .keys import SigningKey, VerifyingKey, verify_signature
from .messages import (
    SigningMessage,
    build_counterparty_message,
    counterparty_message_for_payload,
    decode_content_for_display,
)
from .protocol import (
    SignerRole,
    SignatureEntry,
    SignatureBundle,
    BundleVerificationResult,
    roles_for_mode,
    check_self_attestation,
    expected_messages,
    sign_interaction,
    sign_counterparty,
    build_bundle,
    verify_bundle,
)

__all__ = [
    "SigningKey",
    "VerifyingKey",
    "verify_signature",
    "SigningMessage",
    "build_counterparty_message",
    "counterparty_message_for_payload",
    "decode_content_for_display",
    "SignerRole",
    "SignatureEntry",
    "SignatureBundle",
    "BundleVerificationResult",
    "roles_for_mode",
    "check_self_attestation",
    "expected_messages",
    "sign_interaction",
    "sign_counterparty",
    "build_bundle",
    "verify_bundle",
]
