"""Pydantic models for the CoinGecko coin history response."""

from pydantic import BaseModel, ConfigDict, Field


class CurrentPrice(BaseModel):
    """Prices of the coin in each fiat currency on the requested day."""

    eur: float = Field(..., description="EUR per ETH")

    model_config = ConfigDict(extra="allow")


class MarketData(BaseModel):
    """Market data block of the history response."""

    current_price: CurrentPrice

    model_config = ConfigDict(extra="allow")


class CoinHistory(BaseModel):
    """Response of ``/coins/{id}/history?date=DD-MM-YYYY``.

    CoinGecko omits ``market_data`` for days before the coin was listed;
    validation then fails and the lookup is treated as a failed fetch.
    """

    id: str | None = None
    symbol: str | None = None
    name: str | None = None
    market_data: MarketData

    model_config = ConfigDict(extra="allow")


__all__ = ["CoinHistory", "CurrentPrice", "MarketData"]
