"""Common configuration constants used across the application."""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

# Unit Constants
WEI_PER_ETH = 10**18
"""Number of wei in one ether"""

WEI_PER_GWEI = 10**9
"""Number of wei in one gwei (beacon withdrawals are denominated in gwei)"""

UINT256_MAX = 2**256 - 1
"""Largest value representable by an on-chain uint256"""

MAX_UNIX_TIMESTAMP = 253_402_300_799
"""Last second of year 9999 UTC, the latest instant a datetime can hold"""

# Price Lookup Constants
FIAT_CURRENCY = "eur"
"""Fiat unit every price and fiat value is expressed in"""

CACHE_DATE_FORMAT = "%d-%m-%Y"
"""Day-granular key format of the price cache and the CoinGecko history API"""

DEFAULT_PRICE_CACHE_FILE = "historic_prices.json"
"""Default path of the persisted date -> price cache"""

COINGECKO_HISTORY_URL = "https://api.coingecko.com/api/v3/coins/ethereum/history"
"""CoinGecko historical price endpoint"""

COINGECKO_INTERVAL_WITH_KEY = 4.0
"""Seconds between CoinGecko calls when an API key is configured"""

COINGECKO_INTERVAL_WITHOUT_KEY = 12.0
"""Seconds between CoinGecko calls on the public tier"""

# Block Explorer Constants
ETHERSCAN_API_URL = "https://api.etherscan.io/v2/api"
"""Etherscan v2 multichain API endpoint"""

ETHERSCAN_CHAIN_ID = 1
"""Ethereum mainnet chain id"""

ETHERSCAN_MIN_INTERVAL = 0.25
"""Seconds between Etherscan calls (free tier allows 5 calls/s)"""

ETHERSCAN_NO_RECORDS = "No transactions found"
"""Etherscan message for an empty (but successful) result"""


__all__ = [
    "CACHE_DATE_FORMAT",
    "COINGECKO_HISTORY_URL",
    "COINGECKO_INTERVAL_WITHOUT_KEY",
    "COINGECKO_INTERVAL_WITH_KEY",
    "DEFAULT_PRICE_CACHE_FILE",
    "DEFAULT_TIMEOUT",
    "ETHERSCAN_API_URL",
    "ETHERSCAN_CHAIN_ID",
    "ETHERSCAN_MIN_INTERVAL",
    "ETHERSCAN_NO_RECORDS",
    "FIAT_CURRENCY",
    "MAX_UNIX_TIMESTAMP",
    "UINT256_MAX",
    "WEI_PER_ETH",
    "WEI_PER_GWEI",
]
