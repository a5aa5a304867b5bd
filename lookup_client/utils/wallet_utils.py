"""Key and address helpers."""

from __future__ import annotations

import json
from typing import Iterable

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from lookup_client.core.exceptions import ConfigurationError

SECRET_KEY_LEN = 64


def is_valid_wallet(w: str) -> bool:
    """Return True if w is a valid Solana address (Pubkey)."""
    try:
        Pubkey.from_string(w.strip())
        return True
    except Exception:
        return False


def load_keypair(private_key: str) -> Keypair:
    """
    Load the signer Keypair from a base58 secret key or a JSON array of 64 bytes.
    Raises ConfigurationError when the key is missing or cannot be decoded.
    """
    raw = (private_key or "").strip()
    if not raw:
        raise ConfigurationError("Payer secret key is not set (PAYER_PRIVATE_KEY or PAYER_KEYPAIR_PATH)")
    try:
        if raw.startswith("["):
            secret = bytes(json.loads(raw))
        else:
            secret = base58.b58decode(raw)
    except (json.JSONDecodeError, TypeError, ValueError) as e:
        raise ConfigurationError("Invalid payer secret key encoding") from e
    if len(secret) != SECRET_KEY_LEN:
        raise ConfigurationError(f"Payer secret key must be {SECRET_KEY_LEN} bytes, got {len(secret)}")
    try:
        return Keypair.from_bytes(secret)
    except Exception as e:
        raise ConfigurationError("Invalid payer secret key") from e


def parse_pubkeys(values: Iterable[str]) -> list[Pubkey]:
    """Parse base58 addresses in order; raises ValueError naming the first bad one."""
    out: list[Pubkey] = []
    for value in values:
        value = value.strip()
        if not value:
            continue
        if not is_valid_wallet(value):
            raise ValueError(f"Invalid Solana address: {value}")
        out.append(Pubkey.from_string(value))
    return out
