"""
Attestation layout: data model, binary codec, content helpers, encrypted content.
"""

from .model import (
    CURRENT_LAYOUT_VERSION,
    MIN_BASE_LAYOUT_SIZE,
    MAX_CONTENT_SIZE,
    MAX_ATTESTATION_DATA_SIZE,
    Offsets,
    Outcome,
    ContentType,
    DataType,
    ValidationType,
    SignatureMode,
    StorageType,
    AttestationPayload,
    FeedbackPayload,
    ValidationPayload,
    ReputationScorePayload,
    SchemaConfig,
    SCHEMA_CONFIGS,
    required_signatures,
)
from .codec import (
    ContentSizeResult,
    serialize,
    deserialize,
    validate,
    max_content_size,
    validate_content_size,
)
from .content import (
    create_json_content,
    parse_feedback_content,
    parse_validation_content,
    parse_reputation_score_content,
    outcome_label,
    content_type_label,
    validation_type_label,
    outcome_to_score,
)
from .compressed import CompressedAttestation, parse_compressed_attestation
from .encryption import (
    MAX_PLAINTEXT_SIZE,
    EncryptedPayload,
    EncryptionKeypair,
    derive_encryption_keypair,
    derive_encryption_public_key,
    encrypt_content,
    decrypt_content,
    serialize_encrypted_payload,
    deserialize_encrypted_payload,
)

__all__ = [
    "CURRENT_LAYOUT_VERSION",
    "MIN_BASE_LAYOUT_SIZE",
    "MAX_CONTENT_SIZE",
    "MAX_ATTESTATION_DATA_SIZE",
    "Offsets",
    "Outcome",
    "ContentType",
    "DataType",
    "ValidationType",
    "SignatureMode",
    "StorageType",
    "AttestationPayload",
    "FeedbackPayload",
    "ValidationPayload",
    "ReputationScorePayload",
    "SchemaConfig",
    "SCHEMA_CONFIGS",
    "required_signatures",
    "ContentSizeResult",
    "serialize",
    "deserialize",
    "validate",
    "max_content_size",
    "validate_content_size",
    "create_json_content",
    "parse_feedback_content",
    "parse_validation_content",
    "parse_reputation_score_content",
    "outcome_label",
    "content_type_label",
    "validation_type_label",
    "outcome_to_score",
    "CompressedAttestation",
    "parse_compressed_attestation",
    "MAX_PLAINTEXT_SIZE",
    "EncryptedPayload",
    "EncryptionKeypair",
    "derive_encryption_keypair",
    "derive_encryption_public_key",
    "encrypt_content",
    "decrypt_content",
    "serialize_encrypted_payload",
    "deserialize_encrypted_payload",
]
