"""
Environment variable loading for the lookup client.

- SOLANA_NETWORK: devnet | testnet | mainnet | localnet (default: devnet)
- SOLANA_RPC_URL: RPC endpoint (overrides the network default)
- SOLANA_COMMITMENT: processed | confirmed | finalized (default: confirmed)
- PAYER_PRIVATE_KEY: base58 secret key or JSON array of 64 bytes
- PAYER_KEYPAIR_PATH: path to a Solana CLI keypair file (JSON array)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is lookup_client/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEVNET_RPC_URL = "https://api.devnet.solana.com"
TESTNET_RPC_URL = "https://api.testnet.solana.com"
MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
LOCALNET_RPC_URL = "http://127.0.0.1:8899"

_NETWORK_RPC_URLS = {
    "devnet": DEVNET_RPC_URL,
    "testnet": TESTNET_RPC_URL,
    "mainnet": MAINNET_RPC_URL,
    "localnet": LOCALNET_RPC_URL,
}

EXPLORER_BASE_URL = "https://explorer.solana.com"
COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")


def load_client_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def get_solana_network() -> str:
    """
    Return SOLANA_NETWORK from env: devnet | testnet | mainnet | localnet.
    Unknown values fall back to devnet.
    """
    load_client_env()
    raw = (os.getenv("SOLANA_NETWORK") or os.getenv("SOLANA_CLUSTER") or "devnet").strip().lower()
    if raw == "mainnet-beta":
        return "mainnet"
    if raw in _NETWORK_RPC_URLS:
        return raw
    return "devnet"


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > network default.
    """
    load_client_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    return _NETWORK_RPC_URLS[get_solana_network()]


def get_commitment() -> str:
    """Return SOLANA_COMMITMENT (default: confirmed)."""
    load_client_env()
    raw = (os.getenv("SOLANA_COMMITMENT") or "confirmed").strip().lower()
    return raw if raw in COMMITMENT_LEVELS else "confirmed"


def get_payer_secret() -> str:
    """
    Return the payer secret key string.
    PAYER_PRIVATE_KEY wins; otherwise the contents of PAYER_KEYPAIR_PATH; otherwise "".
    """
    load_client_env()
    secret = (os.getenv("PAYER_PRIVATE_KEY") or "").strip()
    if secret:
        return secret
    path = (os.getenv("PAYER_KEYPAIR_PATH") or "").strip()
    if path:
        keypair_file = Path(path).expanduser()
        if keypair_file.is_file():
            return keypair_file.read_text(encoding="utf-8").strip()
    return ""


def explorer_cluster_param(network: str) -> str:
    """Query string suffix for explorer links (empty on mainnet)."""
    if network == "mainnet":
        return ""
    if network == "localnet":
        return "?cluster=custom&customUrl=" + LOCALNET_RPC_URL
    return f"?cluster={network}"


def mask_rpc_url(rpc: str) -> str:
    """Hide API keys embedded in RPC URLs before logging them."""
    if "api-key=" in rpc:
        rpc = rpc.split("api-key=")[0] + "api-key=***"
    return rpc[:50] + "..." if len(rpc) > 50 else rpc
