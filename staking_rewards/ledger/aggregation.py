"""Sorting, year filtering and totals over the reward ledger."""

from typing import assert_never

from staking_rewards.helpers.constants import UINT256_MAX
from staking_rewards.helpers.errors import LedgerArithmeticError
from staking_rewards.ledger.models import (
    MevReward,
    MevRewardInternal,
    Outgoing,
    ProducedBlock,
    RewardEvent,
    Withdrawal,
    reward_of,
)


def sort_events(events: list[RewardEvent]) -> None:
    """Sort the ledger in place by date; equal dates keep discovery order."""
    events.sort(key=lambda event: reward_of(event).date)


def filter_by_year(events: list[RewardEvent], year: int) -> list[RewardEvent]:
    """Return the events dated in calendar ``year``, preserving order."""
    return [event for event in events if reward_of(event).date.year == year]


def current_balance(events: list[RewardEvent]) -> int:
    """Net wei held by the tracked addresses according to the ledger.

    Credits add their amount; outgoing transfers subtract amount plus fee.
    The running sum is checked against the uint256 range in ledger order.

    Raises:
        LedgerArithmeticError: If the balance drops below zero or overflows
    """
    balance = 0
    for event in events:
        match event:
            case ProducedBlock(reward=reward) | Withdrawal(reward=reward):
                balance += reward.amount
            case MevReward(reward=reward) | MevRewardInternal(reward=reward):
                balance += reward.amount
            case Outgoing(reward=reward, fee=fee):
                balance -= reward.amount + fee
            case _:
                assert_never(event)

        if balance < 0:
            msg = (
                f"Balance underflow at block {reward_of(event).block}: "
                f"outgoing exceeds received by {-balance} wei"
            )
            raise LedgerArithmeticError(msg)
        if balance > UINT256_MAX:
            msg = f"Balance overflow at block {reward_of(event).block}"
            raise LedgerArithmeticError(msg)

    return balance


def total_earnings(events: list[RewardEvent]) -> float:
    """Sum of the EUR value of every credit; outgoing entries are ignored."""
    total = 0.0
    for event in events:
        match event:
            case ProducedBlock(reward=reward) | Withdrawal(reward=reward):
                total += reward.fiat
            case MevReward(reward=reward) | MevRewardInternal(reward=reward):
                total += reward.fiat
            case Outgoing():
                pass
            case _:
                assert_never(event)
    return total


def outgoing_fiat(events: list[RewardEvent]) -> float:
    """Sum of the EUR value of every outgoing transfer."""
    total = 0.0
    for event in events:
        match event:
            case Outgoing(reward=reward):
                total += reward.fiat
            case ProducedBlock() | Withdrawal() | MevReward() | MevRewardInternal():
                pass
            case _:
                assert_never(event)
    return total


def unliquidated(events: list[RewardEvent]) -> float:
    """Total earnings minus the EUR value of everything sent out.

    Any outgoing transfer counts as a liquidation here, whether or not it
    was converted to fiat.
    """
    return total_earnings(events) - outgoing_fiat(events)


__all__ = [
    "current_balance",
    "filter_by_year",
    "outgoing_fiat",
    "sort_events",
    "total_earnings",
    "unliquidated",
]
