"""Report rows, per-kind totals and their CSV / console rendering."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import assert_never
import csv

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from staking_rewards.helpers.constants import FIAT_CURRENCY
from staking_rewards.helpers.errors import ReportIoError
from staking_rewards.helpers.logging import get_logger
from staking_rewards.helpers.parsers import wei_to_eth
from staking_rewards.ledger.aggregation import (
    current_balance,
    total_earnings,
    unliquidated,
)
from staking_rewards.ledger.models import (
    KIND_LABELS,
    MevReward,
    MevRewardInternal,
    Outgoing,
    ProducedBlock,
    RewardEvent,
    Withdrawal,
)


logger = get_logger(__name__)

CSV_FIELDS = ["date", "block", "kind", "id", "amount_eth", "price", "fiat", "fee_eth"]


class ReportEntry(BaseModel):
    """Flat, export-ready view of one ledger event."""

    date: datetime
    block: int
    kind: str
    id: str
    amount_eth: Decimal
    price: float
    fiat: float
    fee_eth: Decimal | None = None


class KindTotal(BaseModel):
    """Totals of one event kind."""

    kind: str
    count: int = 0
    amount_eth: Decimal = Decimal(0)
    fee_eth: Decimal = Decimal(0)
    fiat: float = 0.0


class ReportSummary(BaseModel):
    """The three ledger-wide figures printed under the report."""

    balance_wei: int
    total_earnings: float
    unliquidated: float

    @property
    def balance_eth(self) -> Decimal:
        return wei_to_eth(self.balance_wei)


def report_entry(event: RewardEvent) -> ReportEntry:
    """Flatten one event into its report row."""
    fee_eth: Decimal | None = None
    match event:
        case ProducedBlock(reward=reward) | Withdrawal(reward=reward):
            pass
        case MevReward(reward=reward) | MevRewardInternal(reward=reward):
            pass
        case Outgoing(reward=reward, fee=fee):
            fee_eth = wei_to_eth(fee)
        case _:
            assert_never(event)

    return ReportEntry(
        date=reward.date,
        block=reward.block,
        kind=event.kind,
        id=reward.id,
        amount_eth=wei_to_eth(reward.amount),
        price=reward.price,
        fiat=reward.fiat,
        fee_eth=fee_eth,
    )


def report_entries(events: list[RewardEvent]) -> list[ReportEntry]:
    """Flatten events into report rows, keeping ledger order."""
    return [report_entry(event) for event in events]


def totals_by_kind(events: list[RewardEvent]) -> dict[str, KindTotal]:
    """Count, ETH, fee and EUR totals per event kind; every kind is present."""
    totals = {kind: KindTotal(kind=kind) for kind in KIND_LABELS}
    for entry in report_entries(events):
        total = totals[entry.kind]
        total.count += 1
        total.amount_eth += entry.amount_eth
        total.fiat += entry.fiat
        if entry.fee_eth is not None:
            total.fee_eth += entry.fee_eth
    return totals


def summarize(ledger: list[RewardEvent]) -> ReportSummary:
    """Compute balance, total earnings and unliquidated earnings.

    Raises:
        LedgerArithmeticError: If the balance leaves the uint256 range
    """
    return ReportSummary(
        balance_wei=current_balance(ledger),
        total_earnings=total_earnings(ledger),
        unliquidated=unliquidated(ledger),
    )


def write_csv(entries: list[ReportEntry], path: str | Path) -> None:
    """Write report rows to a CSV file with a header line.

    Raises:
        ReportIoError: If the file cannot be opened or written
    """
    path = Path(path)
    try:
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for entry in entries:
                writer.writerow({
                    "date": entry.date.isoformat(),
                    "block": entry.block,
                    "kind": entry.kind,
                    "id": entry.id,
                    "amount_eth": f"{entry.amount_eth:.18f}",
                    "price": f"{entry.price:.2f}",
                    "fiat": f"{entry.fiat:.2f}",
                    "fee_eth": ""
                    if entry.fee_eth is None
                    else f"{entry.fee_eth:.18f}",
                })
    except OSError as e:
        msg = f"Cannot write report {path}: {e}"
        raise ReportIoError(msg) from e
    logger.info("Wrote %d rows to %s", len(entries), path)


def render_report(
    console: Console,
    entries: list[ReportEntry],
    totals: dict[str, KindTotal],
    summary: ReportSummary,
    year: int,
) -> None:
    """Print the entries, per-kind totals and summary as rich tables."""
    currency = FIAT_CURRENCY.upper()

    table = Table(title=f"Rewards {year}")
    table.add_column("Date")
    table.add_column("Block", justify="right")
    table.add_column("Kind")
    table.add_column("Id", overflow="fold")
    table.add_column("ETH", justify="right")
    table.add_column(f"{currency}/ETH", justify="right")
    table.add_column(currency, justify="right")
    table.add_column("Fee ETH", justify="right")
    for entry in entries:
        table.add_row(
            entry.date.strftime("%Y-%m-%d %H:%M:%S"),
            str(entry.block),
            entry.kind,
            entry.id,
            f"{entry.amount_eth:.6f}",
            f"{entry.price:.2f}",
            f"{entry.fiat:.2f}",
            "" if entry.fee_eth is None else f"{entry.fee_eth:.6f}",
        )
    console.print(table)

    kinds = Table(title=f"Totals by kind {year}")
    kinds.add_column("Kind")
    kinds.add_column("Count", justify="right")
    kinds.add_column("ETH", justify="right")
    kinds.add_column("Fee ETH", justify="right")
    kinds.add_column(currency, justify="right")
    for total in totals.values():
        kinds.add_row(
            total.kind,
            str(total.count),
            f"{total.amount_eth:.6f}",
            f"{total.fee_eth:.6f}",
            f"{total.fiat:.2f}",
        )
    console.print(kinds)

    console.print(f"Current Balance: {summary.balance_eth} ETH")
    console.print(
        f"Sum: {summary.total_earnings:.2f} {currency}, "
        f"unliquidated: {summary.unliquidated:.2f} {currency}"
    )


__all__ = [
    "CSV_FIELDS",
    "KindTotal",
    "ReportEntry",
    "ReportSummary",
    "render_report",
    "report_entries",
    "report_entry",
    "summarize",
    "totals_by_kind",
    "write_csv",
]
