from .schemas import (
    Currency,
    CurrencyConversion,
    CurrencyDisplayOptions,
    CurrencyPrice,
    ExchangeRateSource,
    MultiCurrencyPrice,
    PriceDisplay,
    RoundingPolicy,
    SymbolPosition,
)
from .defaults import DEFAULT_CURRENCIES
from .engine import CurrencyEngine, apply_rounding
from .validators import CurrencyValidator
from .detector import CurrencyDetector
from .routes import currency_router

__all__ = [
    "Currency",
    "CurrencyConversion",
    "CurrencyDisplayOptions",
    "CurrencyPrice",
    "ExchangeRateSource",
    "MultiCurrencyPrice",
    "PriceDisplay",
    "RoundingPolicy",
    "SymbolPosition",
    "DEFAULT_CURRENCIES",
    "CurrencyEngine",
    "apply_rounding",
    "CurrencyValidator",
    "CurrencyDetector",
    "currency_router",
]
