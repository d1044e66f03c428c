"""
Counterparty signing message.

The counterparty signs a human-readable message rebuilt from the serialized
record, so a wallet can render what is being attested. The on-chain program
rebuilds the same text from the submitted data; any difference in
whitespace, labels or base58 rendering invalidates the signature.

Format:

    SATI {schema_name}

    Agent: {token_account_base58}
    Task: {task_ref_base58}
    Outcome: {Negative|Neutral|Positive}
    Details: {details}

    Sign to create this attestation.
"""

from dataclasses import dataclass

from ..core.encoding import b58encode
from ..core.errors import ValidationError
from ..layout.codec import serialize
from ..layout.content import outcome_label
from ..layout.model import AttestationPayload, ContentType, Offsets, Outcome


@dataclass(frozen=True)
class SigningMessage:
    """Message text plus the exact bytes that get signed."""
    text: str
    message_bytes: bytes


def decode_content_for_display(content: bytes, content_type: int) -> str:
    """Render content for the Details line."""
    if not content:
        return "(none)"
    if content_type == ContentType.NONE:
        return "(none)"
    if content_type in (ContentType.JSON, ContentType.UTF8):
        try:
            return bytes(content).decode("utf-8")
        except UnicodeDecodeError:
            return f"({len(content)} bytes)"
    if content_type == ContentType.IPFS:
        return f"ipfs://{b58encode(content)}"
    if content_type == ContentType.ARWEAVE:
        return f"ar://{b58encode(content)}"
    if content_type == ContentType.ENCRYPTED:
        return "(encrypted)"
    return f"({len(content)} bytes)"


def build_counterparty_message(schema_name: str, data: bytes) -> SigningMessage:
    """
    Build the counterparty message from a serialized record.

    Args:
        schema_name: Schema name from SchemaConfig (e.g. "FeedbackV1")
        data: Universal-layout record bytes

    Returns:
        SigningMessage

    Raises:
        ValidationError: If data is shorter than the base layout or the
            outcome is out of range
    """
    data = bytes(data)
    if len(data) < Offsets.CONTENT:
        raise ValidationError(
            f"Data too small (minimum {Offsets.CONTENT} bytes, got {len(data)})", "min_size"
        )

    task_ref = data[Offsets.TASK_REF:Offsets.TOKEN_ACCOUNT]
    token_account = data[Offsets.TOKEN_ACCOUNT:Offsets.COUNTERPARTY]
    outcome = data[Offsets.OUTCOME]
    content_type = data[Offsets.CONTENT_TYPE]
    content = data[Offsets.CONTENT:]

    if outcome > Outcome.POSITIVE:
        raise ValidationError(f"Invalid outcome value: {outcome} (must be 0, 1, or 2)", "outcome")

    text = (
        f"SATI {schema_name}\n"
        f"\n"
        f"Agent: {b58encode(token_account)}\n"
        f"Task: {b58encode(task_ref)}\n"
        f"Outcome: {outcome_label(outcome)}\n"
        f"Details: {decode_content_for_display(content, content_type)}\n"
        f"\n"
        f"Sign to create this attestation."
    )
    return SigningMessage(text=text, message_bytes=text.encode("utf-8"))


def counterparty_message_for_payload(schema_name: str, payload: AttestationPayload) -> SigningMessage:
    """Serialize payload and build its counterparty message."""
    return build_counterparty_message(schema_name, serialize(payload))
