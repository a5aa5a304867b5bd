"""
Command line for the lookup client.

Usage:
  python main.py demo [--table ADDR --start-at STEP] [--stop-after STEP] [--address ADDR ...]
  python main.py create
  python main.py extend TABLE ADDR [ADDR ...]
  python main.py fetch TABLE
  python main.py compare TABLE
  python main.py freeze TABLE
  python main.py deactivate TABLE
  python main.py close TABLE [--recipient ADDR]

Env: PAYER_PRIVATE_KEY or PAYER_KEYPAIR_PATH, SOLANA_NETWORK, SOLANA_RPC_URL,
     SOLANA_COMMITMENT, POLL_INTERVAL_SEC, POLL_TIMEOUT_SEC, EXTEND_CHUNK_SIZE.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from solders.pubkey import Pubkey

from lookup_client.client_logging import get_logger
from lookup_client.config.env import mask_rpc_url
from lookup_client.config.settings import ClientSettings, get_settings
from lookup_client.core.exceptions import ConfigurationError, LookupClientError
from lookup_client.lookup_table.client import AccountLookupClient
from lookup_client.pipeline.steps import DEFAULT_ADDRESSES, STEP_NAMES, DemoContext, StepResult, run_steps
from lookup_client.utils.wallet_utils import load_keypair, parse_pubkeys

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def _pubkey(value: str) -> Pubkey:
    try:
        return parse_pubkeys([value])[0]
    except (ValueError, IndexError) as e:
        raise argparse.ArgumentTypeError(f"invalid address: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lookup-client", description="Solana address lookup table client")
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="create, extend, fetch and compare transaction sizes")
    demo.add_argument("--table", type=_pubkey, help="existing table (for --start-at replays)")
    demo.add_argument("--start-at", choices=STEP_NAMES)
    demo.add_argument("--stop-after", choices=STEP_NAMES)
    demo.add_argument("--address", dest="addresses", action="append", type=_pubkey, help="address to add (repeatable)")

    sub.add_parser("create", help="create a lookup table")

    extend = sub.add_parser("extend", help="append addresses to a table")
    extend.add_argument("table", type=_pubkey)
    extend.add_argument("addresses", nargs="+", type=_pubkey)

    for name, text in (
        ("fetch", "print table contents"),
        ("compare", "compare transaction sizes"),
        ("freeze", "freeze a table (makes it immutable)"),
        ("deactivate", "deactivate a table"),
    ):
        p = sub.add_parser(name, help=text)
        p.add_argument("table", type=_pubkey)

    close = sub.add_parser("close", help="close a deactivated table")
    close.add_argument("table", type=_pubkey)
    close.add_argument("--recipient", type=_pubkey)
    return parser


def _print_step(result: StepResult) -> None:
    if result.ok:
        print(f"   OK   {result.name}: {result.detail}")
    else:
        print(f"   FAIL {result.name}: {result.error}")


def _run_demo(client: AccountLookupClient, args: Any) -> int:
    if args.start_at and STEP_NAMES.index(args.start_at) > 0 and args.table is None:
        print("--start-at after create_table requires --table", file=sys.stderr)
        return EXIT_CONFIG
    ctx = DemoContext(
        client=client,
        addresses=args.addresses or list(DEFAULT_ADDRESSES),
        table_address=args.table,
    )
    results = run_steps(ctx, start_at=args.start_at, stop_after=args.stop_after, on_result=_print_step)
    if ctx.table_address is not None:
        print("lookup table address:", ctx.table_address)
    if ctx.comparison is not None:
        print("Transaction size without address lookup table: ", ctx.comparison.size_without_table, "bytes")
        print("Transaction size with address lookup table:    ", ctx.comparison.size_with_table, "bytes")
    return EXIT_OK if all(r.ok for r in results) else EXIT_FAILED


def _run_fetch(client: AccountLookupClient, table: Pubkey) -> int:
    state = client.fetch_lookup_table(table)
    if state is None:
        print(f"Lookup table {table} not found (not created or not yet visible)")
        return EXIT_FAILED
    print("Table address from cluster:", state.key)
    print("Authority:", state.authority if state.authority else "(frozen)")
    print("Active:", state.is_active)
    for i, address in enumerate(state.addresses):
        print(i, address)
    return EXIT_OK


def run(args: Any, settings: ClientSettings | None = None, rpc: Any | None = None) -> int:
    settings = settings or get_settings()
    payer = load_keypair(settings.payer_secret)
    print("publickey:", payer.pubkey())
    logger.info("client_start", network=settings.network, rpc=mask_rpc_url(settings.rpc_url), command=args.command)
    client = AccountLookupClient(payer, settings=settings, rpc=rpc)

    if args.command == "demo":
        return _run_demo(client, args)
    if args.command == "create":
        sig, table = client.create_lookup_table()
        print("lookup table address:", table)
        print("Transaction confirmed:", client.explorer_url("tx", sig))
        return EXIT_OK
    if args.command == "extend":
        for sig in client.extend_lookup_table(args.table, args.addresses):
            print("Transaction confirmed:", client.explorer_url("tx", sig))
        print("Lookup Table Entries:", client.explorer_url("address", f"{args.table}/entries"))
        return EXIT_OK
    if args.command == "fetch":
        return _run_fetch(client, args.table)
    if args.command == "compare":
        comparison = client.compare_transaction_sizes(args.table)
        if comparison is None:
            print(f"Lookup table {args.table} not found")
            return EXIT_FAILED
        print("Transaction size without address lookup table: ", comparison.size_without_table, "bytes")
        print("Transaction size with address lookup table:    ", comparison.size_with_table, "bytes")
        return EXIT_OK
    if args.command == "freeze":
        sig = client.freeze_lookup_table(args.table)
        print("Transaction confirmed:", client.explorer_url("tx", sig))
        return EXIT_OK
    if args.command == "deactivate":
        sig = client.deactivate_lookup_table(args.table)
        print("Transaction confirmed:", client.explorer_url("tx", sig))
        return EXIT_OK
    if args.command == "close":
        sig = client.close_lookup_table(args.table, args.recipient)
        print("Transaction confirmed:", client.explorer_url("tx", sig))
        return EXIT_OK
    raise ValueError(f"Unknown command {args.command!r}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except ConfigurationError as e:
        logger.error("client_config_error", error=str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except LookupClientError as e:
        logger.error("client_failed", command=args.command, error=str(e))
        print(f"Failed: {e}", file=sys.stderr)
        return EXIT_FAILED
