"""
Tests for transaction size comparison. Fully offline: fixed blockhash, real solders messages.
"""

from __future__ import annotations

import pytest
from solders.address_lookup_table_account import AddressLookupTableAccount
from solders.hash import Hash
from solders.pubkey import Pubkey

from lookup_client.lookup_table.sizing import (
    BYTES_SAVED_PER_ADDRESS,
    TABLE_REFERENCE_OVERHEAD,
    build_transfer_instructions,
    compare_transaction_sizes,
    compile_transaction,
    expected_size_delta,
    transaction_size,
)

TABLE = Pubkey.from_string("2JBnRGupE5MCJkAjSLk7wpa4fkuuEVZVXcndwSqDWj8c")
BLOCKHASH = Hash.default()
LAMPORTS = 1_000_000


def _compare(payer, addresses):
    table = AddressLookupTableAccount(TABLE, addresses)
    return compare_transaction_sizes(payer, table, BLOCKHASH, LAMPORTS)


def test_constants():
    assert BYTES_SAVED_PER_ADDRESS == 31
    assert TABLE_REFERENCE_OVERHEAD == 34


def test_expected_size_delta():
    assert expected_size_delta(0) == 0
    assert expected_size_delta(1) == -3
    assert expected_size_delta(4) == 4 * 31 - 34
    with pytest.raises(ValueError):
        expected_size_delta(200)


def test_transfer_instructions_order(payer, addresses):
    ixs = build_transfer_instructions(payer.pubkey(), addresses[:3], LAMPORTS)
    assert len(ixs) == 3
    assert [ix.accounts[1].pubkey for ix in ixs] == addresses[:3]
    assert all(ix.accounts[0].pubkey == payer.pubkey() for ix in ixs)


def test_four_addresses_match_formula(payer, addresses):
    """Four table entries: 31 bytes each minus the fixed table reference."""
    result = _compare(payer, addresses[:4])
    assert result.referenced_addresses == 4
    assert result.size_with_table < result.size_without_table
    assert result.bytes_saved == expected_size_delta(4)
    assert result.as_tuple() == (result.size_without_table, result.size_with_table)


@pytest.mark.parametrize("count", [2, 3, 5, 8])
def test_with_table_smaller(payer, addresses, count):
    result = _compare(payer, addresses[:count])
    assert result.size_with_table < result.size_without_table
    assert result.bytes_saved == expected_size_delta(count)


def test_each_extra_address_saves_31_bytes(payer, addresses):
    """Holding everything else fixed, one more referenced address saves exactly 31 more bytes."""
    savings = [_compare(payer, addresses[:n]).bytes_saved for n in range(1, 8)]
    deltas = [b - a for a, b in zip(savings, savings[1:])]
    assert deltas == [31] * 6


def test_single_address_not_worth_a_table(payer, addresses):
    """One address saves 31 bytes but the table reference costs 34."""
    result = _compare(payer, addresses[:1])
    assert result.bytes_saved == -3


def test_unrelated_table_is_not_referenced(payer, addresses):
    """Instructions that touch none of the table's entries compile without a lookup."""
    table = AddressLookupTableAccount(TABLE, addresses[4:])
    ixs = build_transfer_instructions(payer.pubkey(), addresses[:2], LAMPORTS)
    with_table = compile_transaction(payer, ixs, BLOCKHASH, [table])
    without_table = compile_transaction(payer, ixs, BLOCKHASH)
    assert len(with_table.message.address_table_lookups) == 0
    assert transaction_size(with_table) == transaction_size(without_table)


def test_compiled_transaction_is_signed(payer, addresses):
    ixs = build_transfer_instructions(payer.pubkey(), addresses[:1], LAMPORTS)
    tx = compile_transaction(payer, ixs, BLOCKHASH)
    assert len(tx.signatures) == 1
    assert tx.message.account_keys[0] == payer.pubkey()
