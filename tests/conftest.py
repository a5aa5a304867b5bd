"""
Pytest fixtures for lookup client tests. RPC is a MagicMock; keys, instructions and
transactions are real solders objects.
"""

from __future__ import annotations

import struct
from unittest.mock import MagicMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from lookup_client.config.settings import ClientSettings
from lookup_client.lookup_table.instructions import LOOKUP_TABLE_PROGRAM_ID

ACTIVE = 2**64 - 1


@pytest.fixture
def payer():
    """Deterministic signer."""
    return Keypair.from_seed(bytes(range(32)))


@pytest.fixture
def settings():
    """Explicit settings so tests do not depend on the environment."""
    return ClientSettings(
        network="devnet",
        rpc_url="http://127.0.0.1:8899",
        commitment="confirmed",
        payer_secret="",
        poll_interval_sec=0.01,
        poll_timeout_sec=0.05,
        confirm_sleep_sec=0.01,
        extend_chunk_size=20,
        transfer_lamports=1_000_000,
    )


@pytest.fixture
def addresses():
    return [Keypair.from_seed(bytes([i + 1]) * 32).pubkey() for i in range(8)]


@pytest.fixture
def table_data():
    """Factory: raw lookup table account bytes."""

    def _build(
        addresses: list[Pubkey],
        authority: Pubkey | None = None,
        deactivation_slot: int = ACTIVE,
        last_extended_slot: int = 0,
        start_index: int = 0,
    ) -> bytes:
        header = struct.pack("<IQQB", 1, deactivation_slot, last_extended_slot, start_index)
        if authority is not None:
            header += b"\x01" + bytes(authority)
        else:
            header += b"\x00" + bytes(32)
        header += b"\x00\x00"
        return header + b"".join(bytes(a) for a in addresses)

    return _build


def _account_resp(data: bytes | None, owner: Pubkey = LOOKUP_TABLE_PROGRAM_ID) -> MagicMock:
    """get_account_info response: value is None when data is None."""
    resp = MagicMock()
    resp.value = None if data is None else MagicMock(owner=owner, data=data)
    return resp


@pytest.fixture
def rpc():
    """Mock solana Client that accepts and confirms every transaction."""
    client = MagicMock()
    client.get_slot.return_value = MagicMock(value=1234)
    client.get_latest_blockhash.return_value = MagicMock(
        value=MagicMock(blockhash=Hash.default(), last_valid_block_height=5000)
    )
    client.send_raw_transaction.return_value = MagicMock(value=Signature.default())
    client.confirm_transaction.return_value = MagicMock(value=[MagicMock(err=None)])
    client.get_account_info.return_value = _account_resp(None)
    return client


@pytest.fixture
def account_resp():
    """Factory for get_account_info responses."""
    return _account_resp
