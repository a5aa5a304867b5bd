"""
Lookup table demo flow as an ordered list of named steps.

Steps (in order):
  1. create_table          create a table owned by the payer
  2. wait_table_visible    poll until the new table can be read back
  3. extend_table          append the address list
  4. wait_table_populated  poll until every address is visible
  5. compare_sizes         size of the same transfers without / with the table

Each step yields a StepResult; the run stops at the first failure. start_at replays
the later steps against an existing table (set DemoContext.table_address).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from solders.pubkey import Pubkey

from lookup_client.client_logging import get_logger
from lookup_client.core.exceptions import LookupClientError
from lookup_client.lookup_table.client import AccountLookupClient
from lookup_client.lookup_table.sizing import SizeComparison
from lookup_client.lookup_table.state import LookupTableState

logger = get_logger(__name__)

DEFAULT_ADDRESSES: list[Pubkey] = [
    Pubkey.from_string("8Z17Y623ZjNV8xaAdxgn5ZkqkVTEo8Yc6uaapvcrFB62"),
    Pubkey.from_string("846HwwmSGguDbipzs2xDYCsfyhi4j2LLiuQri11woums"),
    Pubkey.from_string("FueGNmz4M2wphGnDL5RuH2fCo6EQxxtheVn6syGE4Fh1"),
    Pubkey.from_string("8io2LqthLyQfFncj6QAaQ2q5d7z9WgRcVKrAz4DGNiee"),
]


@dataclass
class DemoContext:
    client: AccountLookupClient
    addresses: list[Pubkey] = field(default_factory=lambda: list(DEFAULT_ADDRESSES))
    table_address: Pubkey | None = None
    state: LookupTableState | None = None
    comparison: SizeComparison | None = None
    signatures: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StepResult:
    name: str
    ok: bool
    detail: str = ""
    error: str | None = None


def _require_table(ctx: DemoContext) -> Pubkey:
    if ctx.table_address is None:
        raise LookupClientError("No lookup table address: run create_table first or pass --table")
    return ctx.table_address


def step_create_table(ctx: DemoContext) -> str:
    sig, table = ctx.client.create_lookup_table()
    ctx.table_address = table
    ctx.signatures.append(sig)
    return f"table={table} signature={sig}"


def step_wait_table_visible(ctx: DemoContext) -> str:
    ctx.state = ctx.client.wait_for_lookup_table(_require_table(ctx))
    return f"visible with {len(ctx.state.addresses)} addresses"


def step_extend_table(ctx: DemoContext) -> str:
    table = _require_table(ctx)
    if ctx.state is None:
        # replay: record what the table held before this extension
        ctx.state = ctx.client.fetch_lookup_table(table)
    sigs = ctx.client.extend_lookup_table(table, ctx.addresses)
    ctx.signatures.extend(sigs)
    return f"added {len(ctx.addresses)} addresses in {len(sigs)} transaction(s)"


def step_wait_table_populated(ctx: DemoContext) -> str:
    table = _require_table(ctx)
    # extend appends without de-duplicating
    expected = len(ctx.addresses) + (len(ctx.state.addresses) if ctx.state is not None else 0)
    ctx.state = ctx.client.wait_for_lookup_table(table, min_addresses=expected)
    missing = [str(a) for a in ctx.addresses if a not in ctx.state.addresses]
    if missing:
        raise LookupClientError(f"Addresses missing from table: {', '.join(missing)}")
    return f"{len(ctx.state.addresses)} addresses visible"


def step_compare_sizes(ctx: DemoContext) -> str:
    comparison = ctx.client.compare_transaction_sizes(_require_table(ctx))
    if comparison is None:
        raise LookupClientError(f"Lookup table {ctx.table_address} not found")
    ctx.comparison = comparison
    return (
        f"without table={comparison.size_without_table} bytes, "
        f"with table={comparison.size_with_table} bytes, saved={comparison.bytes_saved}"
    )


STEPS: list[tuple[str, Callable[[DemoContext], str]]] = [
    ("create_table", step_create_table),
    ("wait_table_visible", step_wait_table_visible),
    ("extend_table", step_extend_table),
    ("wait_table_populated", step_wait_table_populated),
    ("compare_sizes", step_compare_sizes),
]
STEP_NAMES = [name for name, _ in STEPS]


def run_steps(
    ctx: DemoContext,
    start_at: str | None = None,
    stop_after: str | None = None,
    on_result: Callable[[StepResult], None] | None = None,
) -> list[StepResult]:
    """Run steps in order from start_at through stop_after; stop at the first failure."""
    for name in (start_at, stop_after):
        if name is not None and name not in STEP_NAMES:
            raise ValueError(f"Unknown step {name!r}; expected one of {', '.join(STEP_NAMES)}")
    first = STEP_NAMES.index(start_at) if start_at else 0
    last = STEP_NAMES.index(stop_after) if stop_after else len(STEPS) - 1

    results: list[StepResult] = []
    for name, func in STEPS[first : last + 1]:
        logger.info("step_start", step=name)
        try:
            detail = func(ctx)
        except (LookupClientError, ValueError) as e:
            logger.error("step_failed", step=name, error=str(e))
            result = StepResult(name=name, ok=False, error=str(e))
        else:
            logger.info("step_ok", step=name, detail=detail)
            result = StepResult(name=name, ok=True, detail=detail)
        results.append(result)
        if on_result is not None:
            on_result(result)
        if not result.ok:
            break
    return results
