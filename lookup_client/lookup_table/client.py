"""
Account lookup client: create, extend, fetch and measure address lookup tables.

- The payer Keypair is passed in explicitly; it signs and pays for every transaction and
  is the table authority.
- Every transaction is compiled against a blockhash fetched immediately before signing.
- submit_transaction declares success only after confirmation within the blockhash's
  validity window; any send/confirm failure is raised as SubmissionFailedError (no retry).
- wait_for_lookup_table polls with a bounded timeout instead of sleeping a fixed minute.
Config: ClientSettings (SOLANA_RPC_URL, SOLANA_COMMITMENT, POLL_*_SEC, EXTEND_CHUNK_SIZE, ...).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Sequence

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from lookup_client.client_logging import get_logger
from lookup_client.config.env import EXPLORER_BASE_URL, explorer_cluster_param, mask_rpc_url
from lookup_client.config.settings import ClientSettings
from lookup_client.core.exceptions import (
    LookupClientError,
    LookupTableNotVisibleError,
    LookupTableOverflowError,
    RpcRequestError,
    SubmissionFailedError,
)
from lookup_client.lookup_table import instructions as alt_ix
from lookup_client.lookup_table.sizing import SizeComparison, compare_transaction_sizes, compile_transaction
from lookup_client.lookup_table.state import LookupTableState, fetch_lookup_table

logger = get_logger(__name__)

_RPC_ERRORS = (RPCException, SolanaRpcException)


@dataclass(frozen=True)
class BlockhashInfo:
    blockhash: Hash
    last_valid_block_height: int


class AccountLookupClient:
    """
    Sequential client over a blocking solana-py RPC Client. Each step depends on the
    previous one being confirmed, so nothing here runs concurrently.
    """

    def __init__(self, payer: Keypair, settings: ClientSettings | None = None, rpc: Any | None = None) -> None:
        self._payer = payer
        self._settings = settings or ClientSettings()
        self._rpc = rpc

    @property
    def payer(self) -> Pubkey:
        return self._payer.pubkey()

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def _rpc_ensure(self) -> Any:
        if self._rpc is None:
            self._rpc = Client(self._settings.rpc_url, commitment=self._settings.commitment)
            logger.info("rpc_client_created", rpc_url=mask_rpc_url(self._settings.rpc_url))
        return self._rpc

    # --- cluster reads ---

    def get_slot(self) -> int:
        try:
            slot = self._rpc_ensure().get_slot(commitment=self._settings.commitment).value
        except _RPC_ERRORS as e:
            logger.warning("rpc_read_failed", method="get_slot", error=str(e))
            raise RpcRequestError(f"Could not fetch slot: {e}") from e
        logger.debug("slot_fetched", slot=slot)
        return slot

    def get_latest_blockhash(self) -> BlockhashInfo:
        """Fetch a fresh blockhash; never cached between transactions."""
        try:
            value = self._rpc_ensure().get_latest_blockhash(commitment=self._settings.commitment).value
        except _RPC_ERRORS as e:
            logger.warning("rpc_read_failed", method="get_latest_blockhash", error=str(e))
            raise RpcRequestError(f"Could not fetch blockhash: {e}") from e
        info = BlockhashInfo(blockhash=value.blockhash, last_valid_block_height=value.last_valid_block_height)
        logger.info("blockhash_fetched", last_valid_block_height=info.last_valid_block_height)
        return info

    def fetch_lookup_table(self, table: Pubkey) -> LookupTableState | None:
        """Current on-chain table, or None when it is not (yet) visible."""
        try:
            return fetch_lookup_table(self._rpc_ensure(), table, self._settings.commitment)
        except _RPC_ERRORS as e:
            logger.warning("rpc_read_failed", method="get_account_info", table=str(table), error=str(e))
            raise RpcRequestError(f"Could not read lookup table {table}: {e}") from e

    # --- submission ---

    def submit_transaction(self, instructions: Sequence[Instruction]) -> str:
        """
        Fetch a blockhash, compile a v0 transaction, sign, send and confirm.
        Returns the signature string. Raises SubmissionFailedError on any failure.
        """
        rpc = self._rpc_ensure()
        try:
            latest = self.get_latest_blockhash()
        except RpcRequestError as e:
            raise SubmissionFailedError(str(e)) from e

        tx = compile_transaction(self._payer, instructions, latest.blockhash)
        logger.debug("tx_compiled", instruction_count=len(instructions), size=len(bytes(tx)))
        opts = TxOpts(skip_confirmation=True, preflight_commitment=self._settings.commitment)
        try:
            signature = rpc.send_raw_transaction(bytes(tx), opts=opts).value
        except _RPC_ERRORS as e:
            logger.warning("tx_send_failed", error=str(e))
            raise SubmissionFailedError(f"Transaction rejected: {e}") from e

        sig = str(signature)
        logger.info("tx_sent", signature=sig, instruction_count=len(instructions))
        self._confirm(rpc, signature, latest)
        logger.info("tx_confirmed", signature=sig, explorer=self.explorer_url("tx", sig))
        return sig

    def _confirm(self, rpc: Any, signature: Signature, latest: BlockhashInfo) -> None:
        sig = str(signature)
        try:
            resp = rpc.confirm_transaction(
                signature,
                commitment=self._settings.commitment,
                sleep_seconds=self._settings.confirm_sleep_sec,
                last_valid_block_height=latest.last_valid_block_height,
            )
        except (TransactionExpiredBlockheightExceededError, UnconfirmedTxError) as e:
            logger.warning("tx_confirm_failed", signature=sig, reason="expired", error=str(e))
            raise SubmissionFailedError(f"Transaction {sig} not confirmed before blockhash expired", signature=sig) from e
        except _RPC_ERRORS as e:
            logger.warning("tx_confirm_failed", signature=sig, reason="rpc_error", error=str(e))
            raise SubmissionFailedError(f"Confirmation of {sig} failed: {e}", signature=sig) from e

        statuses = getattr(resp, "value", None) or []
        status = statuses[0] if statuses else None
        if status is None:
            logger.warning("tx_confirm_failed", signature=sig, reason="no_status")
            raise SubmissionFailedError(f"Transaction {sig} has no status after confirmation", signature=sig)
        if status.err is not None:
            logger.warning("tx_confirm_failed", signature=sig, reason="transaction_failed", err=str(status.err))
            raise SubmissionFailedError(f"Transaction {sig} failed: {status.err}", signature=sig)

    # --- lookup table operations ---

    def create_lookup_table(self, recent_slot: int | None = None) -> tuple[str, Pubkey]:
        """Create a table owned by the payer. Returns (signature, table address)."""
        slot = self.get_slot() if recent_slot is None else recent_slot
        ix, table = alt_ix.create_lookup_table(self.payer, self.payer, slot)
        logger.info("lookup_table_creating", table=str(table), slot=slot)
        sig = self.submit_transaction([ix])
        logger.info("lookup_table_created", table=str(table), signature=sig)
        return sig, table

    def extend_lookup_table(self, table: Pubkey, addresses: Sequence[Pubkey]) -> list[str]:
        """
        Append addresses to table in chunks of settings.extend_chunk_size, one
        transaction per chunk. The 256-entry capacity is checked before anything is sent.
        """
        if not addresses:
            raise ValueError("addresses must not be empty")
        state = self.fetch_lookup_table(table)
        if state is None:
            raise LookupTableNotVisibleError(f"Lookup table {table} not found")
        if state.is_frozen:
            raise LookupClientError(f"Lookup table {table} is frozen")
        existing = len(state.addresses)
        if existing + len(addresses) > alt_ix.LOOKUP_TABLE_MAX_ADDRESSES:
            raise LookupTableOverflowError(existing, len(addresses), alt_ix.LOOKUP_TABLE_MAX_ADDRESSES)

        signatures: list[str] = []
        chunk_size = self._settings.extend_chunk_size
        for start in range(0, len(addresses), chunk_size):
            chunk = list(addresses[start : start + chunk_size])
            ix = alt_ix.extend_lookup_table(
                table, self.payer, chunk, payer=self.payer, existing_count=existing + start
            )
            sig = self.submit_transaction([ix])
            signatures.append(sig)
            logger.info("lookup_table_extended", table=str(table), added=len(chunk), signature=sig)
        logger.info(
            "lookup_table_entries",
            table=str(table),
            total=existing + len(addresses),
            explorer=self.explorer_url("address", f"{table}/entries"),
        )
        return signatures

    def wait_for_lookup_table(self, table: Pubkey, min_addresses: int = 0) -> LookupTableState:
        """
        Poll until the table is visible with at least min_addresses entries.
        Raises LookupTableNotVisibleError after settings.poll_timeout_sec.
        """
        interval = self._settings.poll_interval_sec
        deadline = time.monotonic() + self._settings.poll_timeout_sec
        attempts = 0
        while True:
            attempts += 1
            state = self.fetch_lookup_table(table)
            if state is not None and len(state.addresses) >= min_addresses:
                logger.info("lookup_table_visible", table=str(table), addresses=len(state.addresses), attempts=attempts)
                return state
            if time.monotonic() + interval > deadline:
                break
            logger.debug("lookup_table_poll", table=str(table), attempt=attempts)
            time.sleep(interval)
        seen = "absent" if state is None else f"{len(state.addresses)} addresses"
        raise LookupTableNotVisibleError(
            f"Lookup table {table} not visible with {min_addresses} addresses after "
            f"{self._settings.poll_timeout_sec}s ({seen})"
        )

    def compare_transaction_sizes(self, table: Pubkey) -> SizeComparison | None:
        """Size of a transfer-to-every-entry transaction without and with the table. None if absent."""
        state = self.fetch_lookup_table(table)
        if state is None:
            logger.warning("lookup_table_absent", table=str(table))
            return None
        latest = self.get_latest_blockhash()
        result = compare_transaction_sizes(
            self._payer, state.to_account(), latest.blockhash, self._settings.transfer_lamports
        )
        logger.info(
            "tx_size_compared",
            table=str(table),
            size_without_table=result.size_without_table,
            size_with_table=result.size_with_table,
            bytes_saved=result.bytes_saved,
        )
        return result

    def freeze_lookup_table(self, table: Pubkey) -> str:
        sig = self.submit_transaction([alt_ix.freeze_lookup_table(table, self.payer)])
        logger.info("lookup_table_frozen", table=str(table), signature=sig)
        return sig

    def deactivate_lookup_table(self, table: Pubkey) -> str:
        sig = self.submit_transaction([alt_ix.deactivate_lookup_table(table, self.payer)])
        logger.info("lookup_table_deactivated", table=str(table), signature=sig)
        return sig

    def close_lookup_table(self, table: Pubkey, recipient: Pubkey | None = None) -> str:
        sig = self.submit_transaction([alt_ix.close_lookup_table(table, self.payer, recipient or self.payer)])
        logger.info("lookup_table_closed", table=str(table), signature=sig)
        return sig

    def explorer_url(self, kind: str, value: str) -> str:
        """Explorer link for a tx signature or address on the configured network."""
        return f"{EXPLORER_BASE_URL}/{kind}/{value}{explorer_cluster_param(self._settings.network)}"
