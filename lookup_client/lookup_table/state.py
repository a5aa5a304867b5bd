"""
On-chain lookup table state.

Account layout (56-byte metadata header, then 32-byte address entries):
  0   u32  type tag (1 = lookup table)
  4   u64  deactivation slot (u64::MAX while active)
  12  u64  last extended slot
  20  u8   last extended slot start index
  21  u8   authority option tag, followed by 32-byte authority
  54  u16  padding
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any

from solders.address_lookup_table_account import AddressLookupTable, AddressLookupTableAccount
from solders.pubkey import Pubkey

from lookup_client.client_logging import get_logger
from lookup_client.core.exceptions import LookupTableDecodeError
from lookup_client.lookup_table.instructions import LOOKUP_TABLE_PROGRAM_ID

logger = get_logger(__name__)

LOOKUP_TABLE_META_SIZE = 56
LOOKUP_TABLE_TYPE_TAG = 1
ADDRESS_LEN = 32
ACTIVE_DEACTIVATION_SLOT = 2**64 - 1

_TYPE_TAG = struct.Struct("<I")


@dataclass(frozen=True)
class LookupTableState:
    key: Pubkey
    deactivation_slot: int
    last_extended_slot: int
    last_extended_slot_start_index: int
    authority: Pubkey | None
    addresses: list[Pubkey] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.deactivation_slot == ACTIVE_DEACTIVATION_SLOT

    @property
    def is_frozen(self) -> bool:
        return self.authority is None

    def to_account(self) -> AddressLookupTableAccount:
        """Return the solders account used when compiling v0 messages."""
        return AddressLookupTableAccount(self.key, list(self.addresses))


def decode_lookup_table(key: Pubkey, data: bytes) -> LookupTableState:
    """Decode raw account data. Raises LookupTableDecodeError instead of returning partial state."""
    if data is None or len(data) < LOOKUP_TABLE_META_SIZE:
        raise LookupTableDecodeError(
            f"Lookup table data too short: {0 if data is None else len(data)} bytes"
        )
    (type_tag,) = _TYPE_TAG.unpack_from(data, 0)
    if type_tag != LOOKUP_TABLE_TYPE_TAG:
        raise LookupTableDecodeError(f"Unexpected account type tag {type_tag}")
    partial = (len(data) - LOOKUP_TABLE_META_SIZE) % ADDRESS_LEN
    if partial:
        raise LookupTableDecodeError(f"Trailing partial address entry ({partial} bytes)")
    try:
        table = AddressLookupTable.deserialize(bytes(data))
    except Exception as e:
        raise LookupTableDecodeError(f"Invalid lookup table data for {key}: {e}") from e
    meta = table.meta
    return LookupTableState(
        key=key,
        deactivation_slot=meta.deactivation_slot,
        last_extended_slot=meta.last_extended_slot,
        last_extended_slot_start_index=meta.last_extended_slot_start_index,
        authority=meta.authority,
        addresses=list(table.addresses),
    )


def fetch_lookup_table(rpc: Any, address: Pubkey, commitment: str | None = None) -> LookupTableState | None:
    """
    Read the lookup table at address. Returns None when the account does not exist
    (e.g. creation not yet visible) or is owned by another program.
    """
    kwargs = {"commitment": commitment} if commitment else {}
    resp = rpc.get_account_info(address, **kwargs)
    account = getattr(resp, "value", None)
    if account is None:
        logger.debug("lookup_table_absent", table=str(address))
        return None
    if account.owner != LOOKUP_TABLE_PROGRAM_ID:
        logger.warning("lookup_table_wrong_owner", table=str(address), owner=str(account.owner))
        return None
    return decode_lookup_table(address, bytes(account.data))
