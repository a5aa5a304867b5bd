"""
Client settings.

Responsibilities:
- Read configuration from environment variables (and .env via config.env).
- Provide defaults for optional values and clamp out-of-range ones.
- Expose a typed settings object passed explicitly to the client and steps.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from lookup_client.config.env import (
    get_commitment,
    get_payer_secret,
    get_solana_network,
    get_solana_rpc_url,
)

DEFAULT_POLL_INTERVAL_SEC = 2.0
DEFAULT_POLL_TIMEOUT_SEC = 90.0
DEFAULT_CONFIRM_SLEEP_SEC = 0.5
DEFAULT_EXTEND_CHUNK_SIZE = 20
# 0.01 * 100_000_000, the amount used by the comparison transfers
DEFAULT_TRANSFER_LAMPORTS = 1_000_000
MAX_EXTEND_CHUNK_SIZE = 30


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass
class ClientSettings:
    """Settings for AccountLookupClient and the step sequence (env or explicit)."""

    network: str = field(default_factory=get_solana_network)
    rpc_url: str = field(default_factory=get_solana_rpc_url)
    commitment: str = field(default_factory=get_commitment)
    payer_secret: str = field(default_factory=get_payer_secret)
    poll_interval_sec: float = field(default_factory=lambda: _env_float("POLL_INTERVAL_SEC", DEFAULT_POLL_INTERVAL_SEC))
    poll_timeout_sec: float = field(default_factory=lambda: _env_float("POLL_TIMEOUT_SEC", DEFAULT_POLL_TIMEOUT_SEC))
    confirm_sleep_sec: float = field(default_factory=lambda: _env_float("CONFIRM_SLEEP_SEC", DEFAULT_CONFIRM_SLEEP_SEC))
    extend_chunk_size: int = field(default_factory=lambda: _env_int("EXTEND_CHUNK_SIZE", DEFAULT_EXTEND_CHUNK_SIZE))
    transfer_lamports: int = field(default_factory=lambda: _env_int("TRANSFER_LAMPORTS", DEFAULT_TRANSFER_LAMPORTS))

    def __post_init__(self) -> None:
        if self.poll_interval_sec <= 0:
            self.poll_interval_sec = DEFAULT_POLL_INTERVAL_SEC
        if self.poll_timeout_sec < self.poll_interval_sec:
            self.poll_timeout_sec = self.poll_interval_sec
        if self.confirm_sleep_sec <= 0:
            self.confirm_sleep_sec = DEFAULT_CONFIRM_SLEEP_SEC
        if self.extend_chunk_size < 1:
            self.extend_chunk_size = 1
        if self.extend_chunk_size > MAX_EXTEND_CHUNK_SIZE:
            self.extend_chunk_size = MAX_EXTEND_CHUNK_SIZE
        if self.transfer_lamports < 1:
            self.transfer_lamports = DEFAULT_TRANSFER_LAMPORTS


def get_settings() -> ClientSettings:
    """Return settings resolved from the current environment."""
    return ClientSettings()
