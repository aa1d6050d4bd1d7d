"""Conversion of raw explorer records into priced ledger events."""

from staking_rewards.explorer.models import (
    BeaconWithdrawal,
    InternalTransaction,
    MinedBlock,
    NormalTransaction,
)
from staking_rewards.helpers.parsers import gwei_to_wei, same_address
from staking_rewards.ledger.models import (
    MevReward,
    MevRewardInternal,
    Outgoing,
    PriceSource,
    ProducedBlock,
    Reward,
    Withdrawal,
)
from staking_rewards.prices.limiter import RateLimiter


class EventNormalizer:
    """Turns each raw record kind into its ledger event.

    Every method awaits a price lookup. All lookups share one limiter, which
    is what keeps the price API within its rate limit when records are
    normalized concurrently.
    """

    def __init__(self, prices: PriceSource, limiter: RateLimiter) -> None:
        self.prices = prices
        self.limiter = limiter

    async def _reward(self, block: int, id: str, timestamp: str, amount: int) -> Reward:
        return await Reward.create(
            block, id, timestamp, amount, self.prices, self.limiter
        )

    async def produced_block(self, block: MinedBlock) -> ProducedBlock:
        """Block reward, already in wei."""
        reward = await self._reward(
            block.block_number, "", block.timestamp, block.block_reward
        )
        return ProducedBlock(reward=reward)

    async def transaction(
        self, tx: NormalTransaction, address: str, *, incoming: bool = True
    ) -> MevReward | Outgoing | None:
        """Classify a normal transaction of a tracked address.

        With ``incoming`` set (the fee recipient), payments to ``address``
        are MEV tips and everything else listed for it is outgoing. Without
        it (the withdrawal address), only transactions sent from ``address``
        are kept, as outgoing. Outgoing entries carry their gas cost even
        when no value moved. A failed transaction moves nothing: it is kept
        as a zero-value outgoing entry if ``address`` paid its gas, and
        dropped otherwise.

        Args:
            tx: Raw transaction
            address: Tracked address the transaction was listed for
            incoming: Whether payments to ``address`` count as MEV tips

        Returns:
            The ledger event, or None when the transaction is not tracked
        """
        sent = same_address(tx.from_address, address)
        if not incoming and not sent:
            return None

        if tx.failed:
            if not sent:
                return None
            reward = await self._reward(tx.block_number, tx.hash, tx.timestamp, 0)
            return Outgoing(reward=reward, fee=tx.fee)

        reward = await self._reward(tx.block_number, tx.hash, tx.timestamp, tx.value)
        if incoming and same_address(tx.to_address, address):
            return MevReward(reward=reward)
        return Outgoing(reward=reward, fee=tx.fee)

    async def internal_transaction(
        self, tx: InternalTransaction, address: str
    ) -> MevRewardInternal | None:
        """MEV tip paid through contract execution.

        Other directions and failed calls are skipped.
        """
        if tx.failed or not same_address(tx.to_address, address):
            return None
        reward = await self._reward(tx.block_number, tx.hash, tx.timestamp, tx.value)
        return MevRewardInternal(reward=reward)

    async def withdrawal(self, withdrawal: BeaconWithdrawal) -> Withdrawal:
        """Beacon withdrawal, converted from gwei to wei."""
        reward = await self._reward(
            withdrawal.block_number,
            str(withdrawal.validator_index),
            withdrawal.timestamp,
            gwei_to_wei(withdrawal.amount),
        )
        return Withdrawal(reward=reward)


__all__ = ["EventNormalizer"]
