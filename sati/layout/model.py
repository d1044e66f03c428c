"""
Attestation data model.

Universal base layout shared by every payload kind:
- layout_version: 1 byte
- task_ref: 32 bytes
- token_account: 32 bytes (subject, the agent's mint address)
- counterparty: 32 bytes
- outcome: 1 byte
- data_hash: 32 bytes
- content_type: 1 byte
- content: variable (length implied by record length)
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import ClassVar, Dict, Optional, Union

from ..core.encoding import b58encode


CURRENT_LAYOUT_VERSION = 1
MIN_BASE_LAYOUT_SIZE = 131
MAX_CONTENT_SIZE = 512
MAX_ATTESTATION_DATA_SIZE = 768

MAX_DUAL_SIGNATURE_CONTENT_SIZE = 70
MAX_SINGLE_SIGNATURE_CONTENT_SIZE = 240


class Offsets:
    """Fixed byte offsets (stable across payload kinds for memcmp filters)."""
    LAYOUT_VERSION = 0
    TASK_REF = 1
    TOKEN_ACCOUNT = 33
    COUNTERPARTY = 65
    OUTCOME = 97
    DATA_HASH = 98
    CONTENT_TYPE = 130
    CONTENT = 131


class Outcome(IntEnum):
    NEGATIVE = 0
    NEUTRAL = 1
    POSITIVE = 2


class ContentType(IntEnum):
    NONE = 0
    JSON = 1
    UTF8 = 2
    IPFS = 3
    ARWEAVE = 4
    ENCRYPTED = 5


class DataType(IntEnum):
    FEEDBACK = 0
    VALIDATION = 1
    REPUTATION_SCORE = 2


class ValidationType(IntEnum):
    TEE = 0
    ZKML = 1
    REEXECUTION = 2
    CONSENSUS = 3


class SignatureMode(IntEnum):
    """
    Signature policy of a schema.

    SINGLE_SIGNER is the single-party name for AGENT_OWNER_SIGNED: one
    privileged signer authenticates the interaction hash.
    """
    DUAL_SIGNATURE = 0
    COUNTERPARTY_SIGNED = 1
    AGENT_OWNER_SIGNED = 2
    SINGLE_SIGNER = 2


class StorageType(IntEnum):
    COMPRESSED = 0
    REGULAR = 1


def required_signatures(mode: SignatureMode) -> int:
    """Number of signatures a bundle must carry for the mode."""
    return 2 if mode == SignatureMode.DUAL_SIGNATURE else 1


@dataclass(frozen=True)
class AttestationPayload:
    """
    Universal base fields shared by every payload kind.

    Use the concrete subclasses; the class itself selects the data type.
    """
    task_ref: bytes
    token_account: bytes
    counterparty: bytes
    outcome: Outcome
    data_hash: bytes = field(default=bytes(32))
    content_type: ContentType = ContentType.NONE
    content: bytes = b""
    layout_version: int = CURRENT_LAYOUT_VERSION

    data_type: ClassVar[DataType]

    @property
    def subject(self) -> bytes:
        return self.token_account

    def with_outcome(self, outcome: Outcome) -> "AttestationPayload":
        """Copy with a different outcome (all other fields unchanged)."""
        return replace(self, outcome=outcome)

    def to_dict(self) -> dict:
        """Convert to JSON-safe dict (addresses base58, hashes hex)."""
        return {
            "data_type": self.data_type.name,
            "layout_version": self.layout_version,
            "task_ref": b58encode(self.task_ref),
            "token_account": b58encode(self.token_account),
            "counterparty": b58encode(self.counterparty),
            "outcome": Outcome(self.outcome).name,
            "data_hash": self.data_hash.hex(),
            "content_type": ContentType(self.content_type).name,
            "content": self.content.hex(),
        }


@dataclass(frozen=True)
class FeedbackPayload(AttestationPayload):
    data_type: ClassVar[DataType] = DataType.FEEDBACK


@dataclass(frozen=True)
class ValidationPayload(AttestationPayload):
    data_type: ClassVar[DataType] = DataType.VALIDATION


@dataclass(frozen=True)
class ReputationScorePayload(AttestationPayload):
    data_type: ClassVar[DataType] = DataType.REPUTATION_SCORE


PAYLOAD_TYPES: Dict[DataType, type] = {
    DataType.FEEDBACK: FeedbackPayload,
    DataType.VALIDATION: ValidationPayload,
    DataType.REPUTATION_SCORE: ReputationScorePayload,
}

AnyPayload = Union[FeedbackPayload, ValidationPayload, ReputationScorePayload]


@dataclass(frozen=True)
class SchemaConfig:
    """
    Per-schema policy supplied by the external registry.

    Fields:
        signature_mode: Which signing workflow applies
        storage_type: Compressed (Light Protocol) or Regular (SAS account)
        closeable: Whether the record may be closed
        name: Schema name rendered in the counterparty message
        sas_schema: SAS schema address (None until deployed)
    """
    signature_mode: SignatureMode
    storage_type: StorageType
    closeable: bool
    name: str
    sas_schema: Optional[bytes] = None

    def with_schema(self, sas_schema: bytes) -> "SchemaConfig":
        return replace(self, sas_schema=sas_schema)


SCHEMA_CONFIGS: Dict[str, SchemaConfig] = {
    "Feedback": SchemaConfig(
        signature_mode=SignatureMode.DUAL_SIGNATURE,
        storage_type=StorageType.COMPRESSED,
        closeable=False,
        name="FeedbackV1",
    ),
    "FeedbackPublic": SchemaConfig(
        signature_mode=SignatureMode.COUNTERPARTY_SIGNED,
        storage_type=StorageType.COMPRESSED,
        closeable=False,
        name="FeedbackPublicV1",
    ),
    "Validation": SchemaConfig(
        signature_mode=SignatureMode.DUAL_SIGNATURE,
        storage_type=StorageType.COMPRESSED,
        closeable=False,
        name="ValidationV1",
    ),
    "ReputationScore": SchemaConfig(
        signature_mode=SignatureMode.COUNTERPARTY_SIGNED,
        storage_type=StorageType.REGULAR,
        closeable=True,
        name="ReputationScoreV1",
    ),
    "Delegate": SchemaConfig(
        signature_mode=SignatureMode.AGENT_OWNER_SIGNED,
        storage_type=StorageType.REGULAR,
        closeable=True,
        name="DelegateV1",
    ),
}
