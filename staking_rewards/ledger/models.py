"""Pydantic models for priced ledger entries."""

from datetime import datetime
from typing import Literal, Protocol, Self, assert_never

from pydantic import BaseModel, ConfigDict, Field

from staking_rewards.helpers.constants import UINT256_MAX
from staking_rewards.helpers.parsers import parse_unix_timestamp, wei_to_eth
from staking_rewards.prices.limiter import RateLimiter


class PriceSource(Protocol):
    """Anything that can price ETH on a given day."""

    async def resolve(self, date: datetime, limiter: RateLimiter) -> float: ...


class Reward(BaseModel):
    """A dated amount of ETH and its EUR value on that day."""

    block: int = Field(..., description="Block height")
    id: str = Field(..., description="Tx hash, validator index or empty")
    date: datetime
    amount: int = Field(..., ge=0, le=UINT256_MAX, description="Amount in wei")
    price: float = Field(..., description="EUR per ETH on `date`")
    fiat: float = Field(..., description="EUR value of `amount`")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def priced(cls, block: int, id: str, date: datetime, amount: int, price: float) -> Self:
        """Build a reward from an already known price; ``fiat`` is derived here."""
        return cls(
            block=block,
            id=id,
            date=date,
            amount=amount,
            price=price,
            fiat=float(wei_to_eth(amount)) * price,
        )

    @classmethod
    async def create(
        cls,
        block: int,
        id: str,
        timestamp: str,
        amount: int,
        prices: PriceSource,
        limiter: RateLimiter,
    ) -> Self:
        """Build a reward from a raw Unix timestamp, pricing it on the way.

        Raises:
            FetchError: If the price cannot be resolved
            ValueError: If the timestamp is not a decimal integer
        """
        date = parse_unix_timestamp(timestamp)
        price = await prices.resolve(date, limiter)
        return cls.priced(block, id, date, amount, price)


class ProducedBlock(BaseModel):
    """Block reward for a block proposed by the tracked validator."""

    kind: Literal["block"] = "block"
    reward: Reward

    model_config = ConfigDict(frozen=True)


class Withdrawal(BaseModel):
    """Beacon-chain withdrawal; ``reward.id`` is the validator index."""

    kind: Literal["withdrawal"] = "withdrawal"
    reward: Reward

    model_config = ConfigDict(frozen=True)


class MevReward(BaseModel):
    """MEV tip paid to the fee recipient by a normal transaction."""

    kind: Literal["mev"] = "mev"
    reward: Reward

    model_config = ConfigDict(frozen=True)


class MevRewardInternal(BaseModel):
    """MEV tip paid to the fee recipient by an internal transaction."""

    kind: Literal["mev internal"] = "mev internal"
    reward: Reward

    model_config = ConfigDict(frozen=True)


class Outgoing(BaseModel):
    """Transfer sent from a tracked address; ``fee`` is the gas cost in wei."""

    kind: Literal["outgoing"] = "outgoing"
    reward: Reward
    fee: int = Field(..., ge=0, le=UINT256_MAX)

    model_config = ConfigDict(frozen=True)


RewardEvent = ProducedBlock | Withdrawal | MevReward | MevRewardInternal | Outgoing

KIND_LABELS: tuple[str, ...] = (
    "block",
    "withdrawal",
    "mev",
    "mev internal",
    "outgoing",
)


def reward_of(event: RewardEvent) -> Reward:
    """Return the reward wrapped by any event variant."""
    match event:
        case ProducedBlock(reward=reward):
            return reward
        case Withdrawal(reward=reward):
            return reward
        case MevReward(reward=reward):
            return reward
        case MevRewardInternal(reward=reward):
            return reward
        case Outgoing(reward=reward):
            return reward
        case _:
            assert_never(event)


__all__ = [
    "KIND_LABELS",
    "MevReward",
    "MevRewardInternal",
    "Outgoing",
    "PriceSource",
    "ProducedBlock",
    "Reward",
    "RewardEvent",
    "Withdrawal",
    "reward_of",
]
