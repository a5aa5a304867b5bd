"""
Address lookup tables: instruction builders, state decoding, sizing and the client.
"""

from lookup_client.lookup_table.instructions import (
    LOOKUP_TABLE_MAX_ADDRESSES,
    LOOKUP_TABLE_PROGRAM_ID,
    create_lookup_table,
    derive_lookup_table_address,
    extend_lookup_table,
)
from lookup_client.lookup_table.state import LookupTableState, decode_lookup_table, fetch_lookup_table
from lookup_client.lookup_table.sizing import SizeComparison, compare_transaction_sizes
from lookup_client.lookup_table.client import AccountLookupClient, BlockhashInfo

__all__ = [
    "AccountLookupClient",
    "BlockhashInfo",
    "LOOKUP_TABLE_MAX_ADDRESSES",
    "LOOKUP_TABLE_PROGRAM_ID",
    "LookupTableState",
    "SizeComparison",
    "compare_transaction_sizes",
    "create_lookup_table",
    "decode_lookup_table",
    "derive_lookup_table_address",
    "extend_lookup_table",
    "fetch_lookup_table",
]
