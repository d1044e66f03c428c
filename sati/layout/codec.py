"""
Binary codec for the universal attestation layout.

Serialization is offset-stable: every payload kind shares the same fixed
fields at the same offsets, followed by raw content whose length is implied
by the record length.

Validation order (mirrors the on-chain program):
1. minimum size
2. supported layout version
3. outcome in {0, 1, 2}
4. content type in the supported set
5. content size against the active cap
"""

from dataclasses import dataclass
from typing import Optional

from ..core.encoding import require_length
from ..core.errors import ContentTooLargeError, ValidationError
from .model import (
    CURRENT_LAYOUT_VERSION,
    MAX_ATTESTATION_DATA_SIZE,
    MAX_CONTENT_SIZE,
    MAX_DUAL_SIGNATURE_CONTENT_SIZE,
    MAX_SINGLE_SIGNATURE_CONTENT_SIZE,
    MIN_BASE_LAYOUT_SIZE,
    PAYLOAD_TYPES,
    AttestationPayload,
    ContentType,
    DataType,
    Offsets,
    Outcome,
    SignatureMode,
)


@dataclass
class ContentSizeResult:
    """
    Result of a content size check.

    Fields:
        valid: Content fits the cap
        max_size: Cap for the signature mode
        actual_size: Content length in bytes
        error: Error message if invalid
    """
    valid: bool
    max_size: int
    actual_size: int
    error: Optional[str] = None


def max_content_size(mode: SignatureMode) -> int:
    """
    Maximum inline content for a signature mode.

    Dual-signature transactions carry two Ed25519 verifications plus the
    counterparty message, leaving less room for content.
    """
    if mode == SignatureMode.DUAL_SIGNATURE:
        return MAX_DUAL_SIGNATURE_CONTENT_SIZE
    return MAX_SINGLE_SIGNATURE_CONTENT_SIZE


def validate_content_size(
    content: bytes,
    mode: SignatureMode,
    raise_on_error: bool = True,
) -> ContentSizeResult:
    """
    Pre-validate content against the signature mode's cap.

    Args:
        content: Content bytes
        mode: Signature mode of the target schema
        raise_on_error: Raise instead of returning an invalid result

    Returns:
        ContentSizeResult

    Raises:
        ContentTooLargeError: If content exceeds the cap and raise_on_error is set
    """
    max_size = max_content_size(mode)
    actual_size = len(content)
    if actual_size <= max_size:
        return ContentSizeResult(valid=True, max_size=max_size, actual_size=actual_size)

    mode_name = "DualSignature" if mode == SignatureMode.DUAL_SIGNATURE else "SingleSignature"
    error = (
        f"Content too large for {mode_name} mode: {actual_size} bytes exceeds maximum "
        f"{max_size} bytes. Use ContentType.IPFS or ContentType.Arweave to store "
        f"larger content off-chain and reference it by CID or transaction id."
    )
    if raise_on_error:
        raise ContentTooLargeError(error)
    return ContentSizeResult(valid=False, max_size=max_size, actual_size=actual_size, error=error)


def _check_outcome(value: int) -> None:
    try:
        Outcome(value)
    except ValueError as e:
        raise ValidationError(f"Invalid outcome: {value} (must be 0, 1, or 2)", "outcome") from e


def _check_content_type(value: int) -> None:
    try:
        ContentType(value)
    except ValueError as e:
        raise ValidationError(f"Invalid content type: {value} (must be 0-5)", "content_type") from e


def _check_content(content: bytes, signature_mode: Optional[SignatureMode]) -> None:
    if len(content) > MAX_CONTENT_SIZE:
        raise ContentTooLargeError(
            f"Content too large: {len(content)} bytes exceeds maximum {MAX_CONTENT_SIZE} bytes"
        )
    if signature_mode is not None:
        validate_content_size(content, signature_mode)


def serialize(payload: AttestationPayload, signature_mode: Optional[SignatureMode] = None) -> bytes:
    """
    Serialize a payload to the universal layout.

    Args:
        payload: Payload variant
        signature_mode: Optional mode; when set the mode's content cap applies

    Returns:
        Record bytes (131 + len(content))

    Raises:
        InvalidLengthError: If a fixed-width field has the wrong width
        ValidationError: If an enum value is out of range
        ContentTooLargeError: If content exceeds the cap
    """
    if payload.layout_version != CURRENT_LAYOUT_VERSION:
        raise ValidationError(
            f"Unsupported layout version: {payload.layout_version}", "layout_version"
        )
    task_ref = require_length(payload.task_ref, 32, "task_ref")
    token_account = require_length(payload.token_account, 32, "token_account")
    counterparty = require_length(payload.counterparty, 32, "counterparty")
    data_hash = require_length(payload.data_hash, 32, "data_hash")
    _check_outcome(int(payload.outcome))
    _check_content_type(int(payload.content_type))
    content = bytes(payload.content)
    _check_content(content, signature_mode)

    return b"".join([
        bytes([payload.layout_version]),
        task_ref,
        token_account,
        counterparty,
        bytes([int(payload.outcome)]),
        data_hash,
        bytes([int(payload.content_type)]),
        content,
    ])


def validate(data: bytes, signature_mode: Optional[SignatureMode] = None) -> None:
    """
    Validate a serialized record without decoding it.

    Raises:
        ValidationError: Naming the first violated rule
    """
    if len(data) < MIN_BASE_LAYOUT_SIZE:
        raise ValidationError(
            f"Data too small: {len(data)} bytes (minimum {MIN_BASE_LAYOUT_SIZE})", "min_size"
        )
    if len(data) > MAX_ATTESTATION_DATA_SIZE:
        raise ValidationError(
            f"Data too large: {len(data)} bytes (maximum {MAX_ATTESTATION_DATA_SIZE})", "max_size"
        )
    version = data[Offsets.LAYOUT_VERSION]
    if version != CURRENT_LAYOUT_VERSION:
        raise ValidationError(f"Unsupported layout version: {version}", "layout_version")
    _check_outcome(data[Offsets.OUTCOME])
    _check_content_type(data[Offsets.CONTENT_TYPE])
    _check_content(data[Offsets.CONTENT:], signature_mode)


def deserialize(
    data: bytes,
    data_type: DataType = DataType.FEEDBACK,
    signature_mode: Optional[SignatureMode] = None,
) -> AttestationPayload:
    """
    Deserialize a record into the payload variant for data_type.

    Args:
        data: Record bytes
        data_type: Payload kind (stored outside the record)
        signature_mode: Optional mode whose content cap applies

    Returns:
        FeedbackPayload, ValidationPayload or ReputationScorePayload

    Raises:
        ValidationError: If the record violates the layout
    """
    data = bytes(data)
    validate(data, signature_mode)

    try:
        payload_cls = PAYLOAD_TYPES[DataType(data_type)]
    except ValueError as e:
        raise ValidationError(f"Unknown data type: {data_type}", "data_type") from e

    return payload_cls(
        task_ref=data[Offsets.TASK_REF:Offsets.TOKEN_ACCOUNT],
        token_account=data[Offsets.TOKEN_ACCOUNT:Offsets.COUNTERPARTY],
        counterparty=data[Offsets.COUNTERPARTY:Offsets.OUTCOME],
        outcome=Outcome(data[Offsets.OUTCOME]),
        data_hash=data[Offsets.DATA_HASH:Offsets.CONTENT_TYPE],
        content_type=ContentType(data[Offsets.CONTENT_TYPE]),
        content=data[Offsets.CONTENT:],
        layout_version=data[Offsets.LAYOUT_VERSION],
    )
