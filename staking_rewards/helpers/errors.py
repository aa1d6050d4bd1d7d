"""Shared exception hierarchy for the rewards pipeline."""


class RewardsError(Exception):
    """Base exception for every failure that aborts a reconciliation run."""


# ── Configuration ─────────────────────────────────────────────────────────────


class ConfigError(RewardsError, ValueError):
    """Required configuration is missing or malformed."""


# ── External queries ──────────────────────────────────────────────────────────


class FetchError(RewardsError):
    """An external record or price query failed."""


class ExplorerError(FetchError):
    """Block-explorer query failed or returned an unusable payload."""


class PriceFetchError(FetchError):
    """Historical price query failed or returned an unusable payload."""


# ── Price cache ───────────────────────────────────────────────────────────────


class CacheIoError(RewardsError):
    """Price cache file is unreadable, unwritable or corrupt."""


# ── Aggregation ───────────────────────────────────────────────────────────────


class LedgerArithmeticError(RewardsError, ArithmeticError):
    """Balance left the uint256 range."""


# ── Report output ─────────────────────────────────────────────────────────────


class ReportIoError(RewardsError):
    """Report export file cannot be written."""


__all__ = [
    "CacheIoError",
    "ConfigError",
    "ExplorerError",
    "FetchError",
    "LedgerArithmeticError",
    "PriceFetchError",
    "ReportIoError",
    "RewardsError",
]
