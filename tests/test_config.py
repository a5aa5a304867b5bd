"""
Tests for environment resolution and ClientSettings defaults.
"""

from __future__ import annotations

import json

import pytest

from lookup_client.config import env
from lookup_client.config.settings import (
    DEFAULT_POLL_INTERVAL_SEC,
    MAX_EXTEND_CHUNK_SIZE,
    ClientSettings,
)

_VARS = (
    "SOLANA_NETWORK",
    "SOLANA_CLUSTER",
    "SOLANA_RPC_URL",
    "SOLANA_COMMITMENT",
    "PAYER_PRIVATE_KEY",
    "PAYER_KEYPAIR_PATH",
    "POLL_INTERVAL_SEC",
    "POLL_TIMEOUT_SEC",
    "EXTEND_CHUNK_SIZE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate from the developer's shell and .env."""
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(env, "load_client_env", lambda: None)


def test_defaults_to_devnet():
    assert env.get_solana_network() == "devnet"
    assert env.get_solana_rpc_url() == env.DEVNET_RPC_URL


@pytest.mark.parametrize(
    "raw,expected",
    [("mainnet-beta", "mainnet"), ("MAINNET", "mainnet"), ("testnet", "testnet"), ("localnet", "localnet"), ("bogus", "devnet")],
)
def test_network_aliases(monkeypatch, raw, expected):
    monkeypatch.setenv("SOLANA_NETWORK", raw)
    assert env.get_solana_network() == expected


def test_rpc_url_override(monkeypatch):
    monkeypatch.setenv("SOLANA_NETWORK", "mainnet")
    monkeypatch.setenv("SOLANA_RPC_URL", "https://rpc.example.com")
    assert env.get_solana_rpc_url() == "https://rpc.example.com"


def test_commitment(monkeypatch):
    assert env.get_commitment() == "confirmed"
    monkeypatch.setenv("SOLANA_COMMITMENT", "finalized")
    assert env.get_commitment() == "finalized"
    monkeypatch.setenv("SOLANA_COMMITMENT", "eventually")
    assert env.get_commitment() == "confirmed"


def test_payer_secret_from_file(monkeypatch, tmp_path):
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(range(64))), encoding="utf-8")
    monkeypatch.setenv("PAYER_KEYPAIR_PATH", str(path))
    assert json.loads(env.get_payer_secret()) == list(range(64))
    monkeypatch.setenv("PAYER_PRIVATE_KEY", "abc")
    assert env.get_payer_secret() == "abc"


def test_payer_secret_missing():
    assert env.get_payer_secret() == ""


def test_explorer_cluster_param():
    assert env.explorer_cluster_param("mainnet") == ""
    assert env.explorer_cluster_param("devnet") == "?cluster=devnet"
    assert env.explorer_cluster_param("localnet").startswith("?cluster=custom")


def test_mask_rpc_url():
    masked = env.mask_rpc_url("https://mainnet.helius-rpc.com/?api-key=secret")
    assert "secret" not in masked
    assert masked.endswith("api-key=***")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("POLL_INTERVAL_SEC", "3")
    monkeypatch.setenv("POLL_TIMEOUT_SEC", "30")
    monkeypatch.setenv("EXTEND_CHUNK_SIZE", "10")
    s = ClientSettings()
    assert s.poll_interval_sec == 3.0
    assert s.poll_timeout_sec == 30.0
    assert s.extend_chunk_size == 10
    assert s.rpc_url == env.DEVNET_RPC_URL


def test_settings_clamped():
    s = ClientSettings(poll_interval_sec=0, poll_timeout_sec=0.1, extend_chunk_size=500, transfer_lamports=0)
    assert s.poll_interval_sec == DEFAULT_POLL_INTERVAL_SEC
    assert s.poll_timeout_sec == DEFAULT_POLL_INTERVAL_SEC
    assert s.extend_chunk_size == MAX_EXTEND_CHUNK_SIZE
    assert s.transfer_lamports > 0


def test_settings_bad_number_falls_back(monkeypatch):
    monkeypatch.setenv("POLL_INTERVAL_SEC", "soon")
    assert ClientSettings().poll_interval_sec == DEFAULT_POLL_INTERVAL_SEC
