"""Exception types raised by TradeSetup."""


class TradeSetupError(Exception):
    """Base class for all TradeSetup errors."""


class InvalidSeriesError(TradeSetupError, ValueError):
    """Raised when a candlestick series violates the input contract.

    Empty series and timestamps that are not strictly increasing are
    rejected rather than repaired.
    """


class InvalidPriceError(TradeSetupError, ValueError):
    """Raised when the current price is not a positive finite number."""


class MarketDataError(TradeSetupError):
    """Raised when a market data source cannot deliver data for a symbol."""


class ConfigError(TradeSetupError):
    """Raised when the configuration file cannot be parsed or validated."""


class UserNotFoundError(TradeSetupError):
    """Raised when a quota operation refers to an unknown user."""
