"""
Versioned transaction sizing with and without a lookup table.

A v0 message lists each account key once (32 bytes). When an account is found in a
referenced lookup table it is dropped from the static keys and replaced by a 1-byte
index, saving 31 bytes per address. Referencing a table costs a fixed 34 bytes:
the 32-byte table key plus the compact-u16 lengths of its writable and readonly
index lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from solders.address_lookup_table_account import AddressLookupTableAccount
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction

ADDRESS_LEN = 32
INDEX_LEN = 1
BYTES_SAVED_PER_ADDRESS = ADDRESS_LEN - INDEX_LEN
# table key + writable index list length + readonly index list length
TABLE_REFERENCE_OVERHEAD = ADDRESS_LEN + 1 + 1
# Largest size at which the compact-u16 length prefixes stay one byte
_COMPACT_U16_ONE_BYTE_MAX = 127


@dataclass(frozen=True)
class SizeComparison:
    size_without_table: int
    size_with_table: int
    referenced_addresses: int

    @property
    def bytes_saved(self) -> int:
        return self.size_without_table - self.size_with_table

    def as_tuple(self) -> tuple[int, int]:
        return self.size_without_table, self.size_with_table


def expected_size_delta(referenced: int) -> int:
    """
    Bytes saved by resolving `referenced` writable accounts through one lookup table.
    Exact while every compact-u16 length in the message stays a single byte.
    """
    if referenced < 1:
        return 0
    if referenced > _COMPACT_U16_ONE_BYTE_MAX:
        raise ValueError(f"referenced must be <= {_COMPACT_U16_ONE_BYTE_MAX} for a single-byte estimate")
    return BYTES_SAVED_PER_ADDRESS * referenced - TABLE_REFERENCE_OVERHEAD


def build_transfer_instructions(payer: Pubkey, addresses: Sequence[Pubkey], lamports: int) -> list[Instruction]:
    """One system transfer from payer to each address, in order."""
    return [
        transfer(TransferParams(from_pubkey=payer, to_pubkey=address, lamports=lamports))
        for address in addresses
    ]


def compile_transaction(
    signer: Keypair,
    instructions: Sequence[Instruction],
    blockhash: Hash,
    tables: Sequence[AddressLookupTableAccount] = (),
) -> VersionedTransaction:
    """Compile a v0 message paid by signer, optionally against lookup tables, and sign it."""
    message = MessageV0.try_compile(signer.pubkey(), list(instructions), list(tables), blockhash)
    return VersionedTransaction(message, [signer])


def transaction_size(tx: VersionedTransaction) -> int:
    """Serialized wire length in bytes."""
    return len(bytes(tx))


def compare_transaction_sizes(
    signer: Keypair,
    table: AddressLookupTableAccount,
    blockhash: Hash,
    lamports: int,
) -> SizeComparison:
    """
    Build two transactions transferring to every address in table: one compiled
    against the table and one without it. Same instructions, same blockhash.
    """
    instructions = build_transfer_instructions(signer.pubkey(), table.addresses, lamports)
    with_table = compile_transaction(signer, instructions, blockhash, [table])
    without_table = compile_transaction(signer, instructions, blockhash)
    lookups = with_table.message.address_table_lookups
    referenced = sum(len(lk.writable_indexes) + len(lk.readonly_indexes) for lk in lookups)
    return SizeComparison(
        size_without_table=transaction_size(without_table),
        size_with_table=transaction_size(with_table),
        referenced_addresses=referenced,
    )
