"""Assembly of the full reward ledger from every record source."""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from rich.console import Console

from staking_rewards.explorer.models import (
    BeaconWithdrawal,
    InternalTransaction,
    MinedBlock,
    NormalTransaction,
)
from staking_rewards.helpers.logging import get_logger
from staking_rewards.helpers.progress import track_progress
from staking_rewards.ledger.models import RewardEvent
from staking_rewards.ledger.normalizer import EventNormalizer


logger = get_logger(__name__)


class RecordSource(Protocol):
    """Block-explorer operations the ledger is built from."""

    async def get_mined_blocks(self, address: str) -> list[MinedBlock]: ...

    async def get_transactions(self, address: str) -> list[NormalTransaction]: ...

    async def get_internal_transactions(
        self, address: str
    ) -> list[InternalTransaction]: ...

    async def get_beacon_withdrawals(self, address: str) -> list[BeaconWithdrawal]: ...


class LedgerBuilder:
    """Collects and normalizes every reward record of the two tracked addresses.

    Sources are processed one after another, and records within a source in
    the order the explorer returned them. The result is unordered across
    sources until it is sorted; duplicates (for example a tip seen both as a
    normal and as an internal transaction) are kept.

    Any failure, whether fetching records or pricing a single entry, aborts
    the build; there is no partial ledger.
    """

    def __init__(
        self,
        explorer: RecordSource,
        normalizer: EventNormalizer,
        execution_address: str,
        consensus_address: str,
        *,
        console: Console | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            explorer: Record source for both addresses
            normalizer: Converts records into priced events
            execution_address: Fee recipient (blocks, MEV tips)
            consensus_address: Withdrawal address (beacon withdrawals)
            console: Console for progress bars; no progress is shown if None
        """
        self.explorer = explorer
        self.normalizer = normalizer
        self.execution_address = execution_address
        self.consensus_address = consensus_address
        self.console = console

    async def _collect[R](
        self,
        description: str,
        records: Sequence[R],
        normalize: Callable[[R], Awaitable[RewardEvent | None]],
        events: list[RewardEvent],
    ) -> None:
        logger.info("%s: %d records", description, len(records))
        if self.console is None or not records:
            for record in records:
                event = await normalize(record)
                if event is not None:
                    events.append(event)
            return

        with track_progress(description, len(records), self.console) as (
            progress,
            task_id,
        ):
            for record in records:
                event = await normalize(record)
                if event is not None:
                    events.append(event)
                progress.update(task_id, advance=1)

    async def build(self) -> list[RewardEvent]:
        """Fetch and normalize all records into one ledger.

        Returns:
            Events in collection order (not yet sorted)

        Raises:
            FetchError: If any record or price query fails
            CacheIoError: If the price cache cannot be used
        """
        execution = self.execution_address
        consensus = self.consensus_address
        normalizer = self.normalizer
        events: list[RewardEvent] = []

        await self._collect(
            "Produced blocks",
            await self.explorer.get_mined_blocks(execution),
            normalizer.produced_block,
            events,
        )

        async def execution_tx(tx: NormalTransaction) -> RewardEvent | None:
            return await normalizer.transaction(tx, execution)

        await self._collect(
            "Fee recipient transactions",
            await self.explorer.get_transactions(execution),
            execution_tx,
            events,
        )

        async def consensus_tx(tx: NormalTransaction) -> RewardEvent | None:
            return await normalizer.transaction(tx, consensus, incoming=False)

        await self._collect(
            "Withdrawal address transactions",
            await self.explorer.get_transactions(consensus),
            consensus_tx,
            events,
        )

        async def internal_tx(tx: InternalTransaction) -> RewardEvent | None:
            return await normalizer.internal_transaction(tx, execution)

        await self._collect(
            "Internal transactions",
            await self.explorer.get_internal_transactions(execution),
            internal_tx,
            events,
        )

        await self._collect(
            "Beacon withdrawals",
            await self.explorer.get_beacon_withdrawals(consensus),
            normalizer.withdrawal,
            events,
        )

        logger.info("Built ledger with %d events", len(events))
        return events


__all__ = ["LedgerBuilder", "RecordSource"]
