"""
Tests for environment-driven settings.
"""

import pytest

from sati.config import DEFAULT_PHOTON_URL, Settings, load_settings
from sati.core.constants import ADDRESS_TREE, SATI_PROGRAM_ID


def test_defaults():
    """Empty environment yields defaults."""
    settings = load_settings({})
    assert settings == Settings()
    assert settings.photon_url == DEFAULT_PHOTON_URL
    assert settings.program_id == SATI_PROGRAM_ID
    assert settings.address_tree == ADDRESS_TREE
    assert settings.api_key is None
    assert settings.timeout == 30.0


def test_overrides():
    """Every variable is read."""
    settings = load_settings({
        "SATI_PHOTON_URL": "https://photon.example",
        "SATI_API_KEY": "k",
        "SATI_PROGRAM_ID": "prog",
        "SATI_ADDRESS_TREE": "tree",
        "SATI_ADDRESS_QUEUE": "queue",
        "SATI_STATE_TREE": "state",
        "SATI_RPC_TIMEOUT": "2.5",
    })
    assert settings.photon_url == "https://photon.example"
    assert settings.api_key == "k"
    assert settings.program_id == "prog"
    assert settings.address_tree == "tree"
    assert settings.address_queue == "queue"
    assert settings.state_tree == "state"
    assert settings.timeout == 2.5


def test_empty_api_key_is_none():
    assert load_settings({"SATI_API_KEY": ""}).api_key is None


def test_invalid_timeout():
    """Malformed or non-positive timeouts name the variable."""
    with pytest.raises(ValueError, match="SATI_RPC_TIMEOUT must be a number"):
        load_settings({"SATI_RPC_TIMEOUT": "soon"})
    with pytest.raises(ValueError, match="SATI_RPC_TIMEOUT must be positive"):
        load_settings({"SATI_RPC_TIMEOUT": "0"})


def test_reads_process_environment(monkeypatch):
    """Without an explicit mapping, os.environ is used."""
    monkeypatch.setenv("SATI_PHOTON_URL", "http://env.example")
    assert load_settings().photon_url == "http://env.example"
