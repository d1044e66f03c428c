"""
Attestation content helpers.

JSON content is written in canonical form (sorted keys, no whitespace) so
the same object always yields the same content bytes, and therefore the same
counterparty message and signature.
"""

import json
from typing import Any, Dict, Optional

from .model import ContentType, Outcome, ValidationType


def canonicalize(obj: Any) -> Any:
    """
    Convert nested dict/list to canonical form.

    Rules:
    - dict keys sorted
    - tuples converted to lists
    """
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def create_json_content(obj: Any) -> bytes:
    """
    Encode an object as canonical UTF-8 JSON content bytes.

    Pair with ContentType.JSON.
    """
    s = json.dumps(canonicalize(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def parse_json_content(content: bytes, content_type: int) -> Optional[Dict[str, Any]]:
    """
    Parse JSON content.

    Returns:
        Decoded object, or None when content is not JSON typed, empty,
        or not valid JSON
    """
    if content_type != ContentType.JSON or not content:
        return None
    try:
        parsed = json.loads(bytes(content).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def parse_feedback_content(content: bytes, content_type: int) -> Optional[Dict[str, Any]]:
    """Parse Feedback content (score, tags, m)."""
    return parse_json_content(content, content_type)


def parse_validation_content(content: bytes, content_type: int) -> Optional[Dict[str, Any]]:
    """Parse Validation content (type, confidence, methodology)."""
    return parse_json_content(content, content_type)


def parse_reputation_score_content(content: bytes, content_type: int) -> Optional[Dict[str, Any]]:
    """Parse ReputationScore content (score, methodology, components)."""
    return parse_json_content(content, content_type)


_OUTCOME_LABELS = {
    Outcome.NEGATIVE: "Negative",
    Outcome.NEUTRAL: "Neutral",
    Outcome.POSITIVE: "Positive",
}

_CONTENT_TYPE_LABELS = {
    ContentType.NONE: "None",
    ContentType.JSON: "JSON",
    ContentType.UTF8: "UTF-8",
    ContentType.IPFS: "IPFS",
    ContentType.ARWEAVE: "Arweave",
    ContentType.ENCRYPTED: "Encrypted",
}

_VALIDATION_TYPE_LABELS = {
    ValidationType.TEE: "TEE",
    ValidationType.ZKML: "ZKML",
    ValidationType.REEXECUTION: "Re-execution",
    ValidationType.CONSENSUS: "Consensus",
}

_OUTCOME_SCORES = {
    Outcome.NEGATIVE: 0,
    Outcome.NEUTRAL: 50,
    Outcome.POSITIVE: 100,
}


def outcome_label(outcome: int) -> str:
    return _OUTCOME_LABELS.get(outcome, "Unknown")


def content_type_label(content_type: int) -> str:
    return _CONTENT_TYPE_LABELS.get(content_type, "Unknown")


def validation_type_label(validation_type: int) -> str:
    return _VALIDATION_TYPE_LABELS.get(validation_type, "Unknown")


def outcome_to_score(outcome: int) -> int:
    """Map outcome to an ERC-8004 compatible 0-100 score (unknown -> 50)."""
    return _OUTCOME_SCORES.get(outcome, 50)
