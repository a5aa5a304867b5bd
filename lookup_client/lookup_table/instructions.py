"""
Address Lookup Table program instructions.

Instruction data is bincode: u32 LE variant index followed by the variant payload.
  CreateLookupTable   = 0  (recent_slot: u64, bump_seed: u8)
  FreezeLookupTable   = 1
  ExtendLookupTable   = 2  (new_addresses: Vec<Pubkey>, u64 length prefix)
  DeactivateLookupTable = 3
  CloseLookupTable    = 4
Table address = PDA([authority, recent_slot u64 LE], program id).
Builders are pure: nothing touches the cluster until the instruction is submitted.
"""

from __future__ import annotations

import struct
from typing import Sequence

from solders.address_lookup_table_account import derive_lookup_table_address as _derive_lookup_table_address
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID

from lookup_client.core.exceptions import LookupTableOverflowError

LOOKUP_TABLE_PROGRAM_ID = Pubkey.from_string("AddressLookupTab1e1111111111111111111111111")

# 1-byte index space
LOOKUP_TABLE_MAX_ADDRESSES = 256

CREATE_LOOKUP_TABLE = 0
FREEZE_LOOKUP_TABLE = 1
EXTEND_LOOKUP_TABLE = 2
DEACTIVATE_LOOKUP_TABLE = 3
CLOSE_LOOKUP_TABLE = 4


def derive_lookup_table_address(authority: Pubkey, recent_slot: int) -> tuple[Pubkey, int]:
    """Derive the table PDA and bump seed for (authority, recent_slot)."""
    if recent_slot < 0:
        raise ValueError("recent_slot must be non-negative")
    return _derive_lookup_table_address(authority, recent_slot)


def create_lookup_table(
    authority: Pubkey,
    payer: Pubkey,
    recent_slot: int,
) -> tuple[Instruction, Pubkey]:
    """Return (create instruction, table address) for authority at recent_slot."""
    table_address, bump = derive_lookup_table_address(authority, recent_slot)
    data = struct.pack("<IQB", CREATE_LOOKUP_TABLE, recent_slot, bump)
    accounts = [
        AccountMeta(pubkey=table_address, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=LOOKUP_TABLE_PROGRAM_ID, data=data, accounts=accounts), table_address


def extend_lookup_table(
    lookup_table: Pubkey,
    authority: Pubkey,
    addresses: Sequence[Pubkey],
    payer: Pubkey | None = None,
    *,
    existing_count: int = 0,
) -> Instruction:
    """
    Build the instruction appending addresses to lookup_table.

    existing_count is the number of entries already in the table; the call is rejected
    with LookupTableOverflowError when the total would exceed 256. A payer is needed
    when the table account must grow beyond its rent-exempt balance.
    """
    if not addresses:
        raise ValueError("addresses must not be empty")
    if existing_count < 0:
        raise ValueError("existing_count must be non-negative")
    if existing_count + len(addresses) > LOOKUP_TABLE_MAX_ADDRESSES:
        raise LookupTableOverflowError(existing_count, len(addresses), LOOKUP_TABLE_MAX_ADDRESSES)

    data = bytearray(struct.pack("<IQ", EXTEND_LOOKUP_TABLE, len(addresses)))
    for address in addresses:
        data.extend(bytes(address))

    accounts = [
        AccountMeta(pubkey=lookup_table, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
    ]
    if payer is not None:
        accounts.append(AccountMeta(pubkey=payer, is_signer=True, is_writable=True))
        accounts.append(AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False))
    return Instruction(program_id=LOOKUP_TABLE_PROGRAM_ID, data=bytes(data), accounts=accounts)


def _authority_only(variant: int, lookup_table: Pubkey, authority: Pubkey) -> Instruction:
    accounts = [
        AccountMeta(pubkey=lookup_table, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
    ]
    return Instruction(
        program_id=LOOKUP_TABLE_PROGRAM_ID,
        data=struct.pack("<I", variant),
        accounts=accounts,
    )


def freeze_lookup_table(lookup_table: Pubkey, authority: Pubkey) -> Instruction:
    """Freeze: the table becomes immutable and loses its authority."""
    return _authority_only(FREEZE_LOOKUP_TABLE, lookup_table, authority)


def deactivate_lookup_table(lookup_table: Pubkey, authority: Pubkey) -> Instruction:
    """Deactivate: starts the cooldown after which the table can be closed."""
    return _authority_only(DEACTIVATE_LOOKUP_TABLE, lookup_table, authority)


def close_lookup_table(lookup_table: Pubkey, authority: Pubkey, recipient: Pubkey) -> Instruction:
    """Close a deactivated table and send its lamports to recipient."""
    accounts = [
        AccountMeta(pubkey=lookup_table, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=recipient, is_signer=False, is_writable=True),
    ]
    return Instruction(
        program_id=LOOKUP_TABLE_PROGRAM_ID,
        data=struct.pack("<I", CLOSE_LOOKUP_TABLE),
        accounts=accounts,
    )
