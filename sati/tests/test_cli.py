"""
Tests for the sati CLI.
"""

import json

import httpx
from typer.testing import CliRunner

from cli.commands import proof as proof_commands
from cli.main import app
from sati.addressing.derive import derive_commitment, derive_reputation_attestation_pda
from sati.core.encoding import b58encode
from sati.core.hashing import interaction_hash, reputation_nonce
from sati.proofs.rpc import PhotonRpc

runner = CliRunner()

TASK_HEX = "01" * 32
SCHEMA = b58encode(bytes([9]) * 32)
AGENT = b58encode(bytes([2]) * 32)
COUNTERPARTY = b58encode(bytes([3]) * 32)


def invoke_json(*args):
    result = runner.invoke(app, [*args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "SATI CLI" in result.output


def test_hash_interaction():
    """Digest matches the library function."""
    out = invoke_json("hash", "interaction", "--schema", SCHEMA, "--task-ref", TASK_HEX)
    expected = interaction_hash(SCHEMA, bytes([1]) * 32, bytes(32))
    assert out == {"interaction_hash": expected.hex()}


def test_hash_reputation():
    out = invoke_json("hash", "reputation", "--provider", COUNTERPARTY, "--subject", AGENT)
    assert out["nonce"] == reputation_nonce(COUNTERPARTY, AGENT).hex()


def test_hash_rejects_bad_hex():
    """Invalid input prints an error and exits 1."""
    result = runner.invoke(app, ["hash", "interaction", "--schema", SCHEMA, "--task-ref", "zz"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_hash_rejects_short_task_ref():
    result = runner.invoke(app, ["hash", "interaction", "--schema", SCHEMA, "--task-ref", "01" * 31, "--json"])
    assert result.exit_code == 1
    assert "task_ref must be 32 bytes" in json.loads(result.stdout)["error"]


def test_layout_encode_decode():
    """Encoded hex decodes back to the same fields."""
    encoded = invoke_json(
        "layout", "encode",
        "--task-ref", TASK_HEX,
        "--agent", AGENT,
        "--counterparty", COUNTERPARTY,
        "--outcome", "positive",
        "--content-type", "json",
        "--content", '{"score":90}',
        "--mode", "dual",
    )
    assert encoded["size"] == 131 + len('{"score":90}')

    decoded = invoke_json("layout", "decode", encoded["data"])
    assert decoded["outcome"] == "POSITIVE"
    assert decoded["token_account"] == AGENT
    assert decoded["counterparty"] == COUNTERPARTY
    assert decoded["parsed_content"] == {"score": 90}


def test_layout_encode_enforces_mode_cap():
    """Dual mode refuses content above 70 bytes."""
    result = runner.invoke(app, [
        "layout", "encode",
        "--task-ref", TASK_HEX,
        "--agent", AGENT,
        "--counterparty", COUNTERPARTY,
        "--content-type", "utf8",
        "--content", "x" * 71,
        "--mode", "dual",
    ])
    assert result.exit_code == 1


def test_layout_decode_rejects_short_record():
    result = runner.invoke(app, ["layout", "decode", "01" * 100, "--json"])
    assert result.exit_code == 1
    assert "Data too small" in json.loads(result.stdout)["error"]


def test_layout_message():
    """Message command renders the counterparty text."""
    encoded = invoke_json(
        "layout", "encode", "--task-ref", TASK_HEX, "--agent", AGENT, "--counterparty", COUNTERPARTY,
        "--outcome", "negative",
    )
    out = invoke_json("layout", "message", encoded["data"], "--schema-name", "FeedbackPublicV1")
    assert out["text"].startswith("SATI FeedbackPublicV1\n\n")
    assert "Outcome: Negative\n" in out["text"]


def test_address_derive(monkeypatch):
    """Derived commitment matches the library."""
    monkeypatch.delenv("SATI_PROGRAM_ID", raising=False)
    monkeypatch.delenv("SATI_ADDRESS_TREE", raising=False)
    out = invoke_json(
        "address", "derive", "--task-ref", TASK_HEX, "--schema", SCHEMA,
        "--subject", AGENT, "--counterparty", COUNTERPARTY,
    )
    expected = derive_commitment(bytes([1]) * 32, SCHEMA, AGENT, COUNTERPARTY)
    assert out == expected.to_dict()


def test_address_reputation(monkeypatch):
    monkeypatch.delenv("SATI_PROGRAM_ID", raising=False)
    out = invoke_json("address", "reputation", "--provider", COUNTERPARTY, "--subject", AGENT)
    address, bump = derive_reputation_attestation_pda(COUNTERPARTY, AGENT)
    assert out == {"address": b58encode(address), "bump": bump}


def test_proof_create(monkeypatch):
    """Proof command drives the assembler against the configured indexer."""
    value = {
        "compressedProof": {"a": [1] * 32, "b": [2] * 64, "c": [3] * 32},
        "roots": [b58encode(bytes([5]) * 32)],
        "rootIndices": [6],
        "leafIndices": [0],
        "leaves": [b58encode(bytes([0]) + bytes([1]) * 31)],
    }

    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": {"context": {"slot": 1}, "value": value}})

    monkeypatch.setattr(
        proof_commands,
        "build_rpc",
        lambda settings: PhotonRpc(settings.photon_url, transport=httpx.MockTransport(handler)),
    )
    monkeypatch.setenv("SATI_LOG_LEVEL", "ERROR")

    out = invoke_json("proof", "create", b58encode(bytes([0]) + bytes([1]) * 31))
    assert out["address_tree_info"]["root_index"] == 6
    assert out["output_state_tree_index"] == 2
    assert out["packed_start"] == 8
    assert out["history"][-1] == "ready"


def test_proof_create_reports_rpc_failure(monkeypatch):
    """Indexer errors exit 1."""

    def handler(request):
        return httpx.Response(502, text="bad gateway")

    monkeypatch.setattr(
        proof_commands,
        "build_rpc",
        lambda settings: PhotonRpc(settings.photon_url, transport=httpx.MockTransport(handler)),
    )
    monkeypatch.setenv("SATI_LOG_LEVEL", "ERROR")

    result = runner.invoke(app, ["proof", "create", b58encode(bytes([0]) + bytes([1]) * 31), "--json"])
    assert result.exit_code == 1
    assert "HTTP 502" in json.loads(result.stdout)["error"]
