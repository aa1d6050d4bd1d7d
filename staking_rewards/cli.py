"""Staking rewards report.

Builds the priced reward ledger of a validator's fee recipient and withdrawal
address, then prints the entries of one calendar year with per-kind totals,
the current balance and the total / unliquidated EUR earnings.

Usage:
    staking-rewards --year 2023 --csv rewards-2023.csv
"""

from datetime import UTC, datetime
import argparse
import sys

import asyncio

from rich.console import Console

from staking_rewards.explorer.client import EtherscanClient
from staking_rewards.helpers.config import Settings, load_settings
from staking_rewards.helpers.errors import RewardsError
from staking_rewards.helpers.http import create_http_client
from staking_rewards.helpers.logging import LOG_LEVELS, get_logger, set_log_level
from staking_rewards.ledger.aggregation import filter_by_year, sort_events
from staking_rewards.ledger.builder import LedgerBuilder
from staking_rewards.ledger.models import RewardEvent
from staking_rewards.ledger.normalizer import EventNormalizer
from staking_rewards.ledger.report import (
    render_report,
    report_entries,
    summarize,
    totals_by_kind,
    write_csv,
)
from staking_rewards.prices.cache import PriceCache
from staking_rewards.prices.limiter import coingecko_rate_limiter
from staking_rewards.prices.resolver import PriceResolver


logger = get_logger(__name__)


async def build_ledger(
    settings: Settings, console: Console | None = None
) -> list[RewardEvent]:
    """Fetch, price and sort the full ledger for the configured addresses.

    Args:
        settings: Run configuration
        console: Console for progress bars (optional)

    Returns:
        Chronologically sorted ledger

    Raises:
        RewardsError: On the first fetch, cache or pricing failure
    """
    limiter = coingecko_rate_limiter(settings.coingecko_api_key)
    cache = PriceCache(settings.price_cache_file)

    async with create_http_client() as client:
        explorer = EtherscanClient(settings.etherscan_api_key, client)
        resolver = PriceResolver(cache, client, settings.coingecko_api_key)
        builder = LedgerBuilder(
            explorer,
            EventNormalizer(resolver, limiter),
            settings.execution_rewards_address,
            settings.consensus_rewards_address,
            console=console,
        )
        ledger = await builder.build()

    logger.info(
        "Prices: %d cache hits, %d fetched", resolver.hits, resolver.misses
    )
    sort_events(ledger)
    return ledger


async def main(
    year: int,
    *,
    csv_path: str | None = None,
    cache_file: str | None = None,
    show_progress: bool = True,
) -> int:
    """Run the reconciliation and print the report.

    Args:
        year: Calendar year to report
        csv_path: Optional path to export the year's entries to
        cache_file: Optional price cache path override
        show_progress: Whether to show progress bars

    Returns:
        Process exit code
    """
    console = Console()

    try:
        settings = load_settings(cache_file)
        ledger = await build_ledger(settings, console if show_progress else None)
        summary = summarize(ledger)
    except RewardsError as e:
        logger.error("Reconciliation aborted: %s", e)
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    yearly = filter_by_year(ledger, year)
    entries = report_entries(yearly)
    render_report(console, entries, totals_by_kind(yearly), summary, year)

    if csv_path:
        try:
            write_csv(entries, csv_path)
        except RewardsError as e:
            logger.error("CSV export failed: %s", e)
            print(f"\nError: {e}", file=sys.stderr)
            return 1
        console.print(f"Exported {len(entries)} entries to {csv_path}")

    return 0


def cli() -> None:
    """Command-line interface entry point."""
    parser = argparse.ArgumentParser(
        description="Reconcile validator rewards into a priced yearly report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  ETHERSCAN_API_KEY          Etherscan API key (required)
  EXECUTION_REWARDS_ADDRESS  Fee recipient address (required)
  CONSENSUS_REWARDS_ADDRESS  Withdrawal address (required)
  COINGECKO_API_KEY          CoinGecko API key (optional, faster price lookups)
  PRICE_CACHE_FILE           Price cache path (default: historic_prices.json)

Examples:
  # Report the current year
  staking-rewards

  # Report 2023 and export it
  staking-rewards --year 2023 --csv rewards-2023.csv
        """,
    )

    parser.add_argument(
        "--year",
        type=int,
        default=datetime.now(UTC).year,
        help="Calendar year to report (default: current year)",
    )
    parser.add_argument(
        "--csv",
        dest="csv_path",
        help="Export the year's entries to this CSV file",
    )
    parser.add_argument(
        "--cache-file",
        help="Price cache file (overrides PRICE_CACHE_FILE)",
    )
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars",
    )

    args = parser.parse_args()
    set_log_level(args.log_level)

    exit_code = asyncio.run(
        main(
            args.year,
            csv_path=args.csv_path,
            cache_file=args.cache_file,
            show_progress=not args.no_progress,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
