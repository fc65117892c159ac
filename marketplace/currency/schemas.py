"""
Currency schemas.

Registry entries are frozen: a rate refresh replaces the whole entry.
"""

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SymbolPosition(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class RoundingPolicy(str, Enum):
    NONE = "NONE"
    UP = "UP"
    DOWN = "DOWN"
    NEAREST = "NEAREST"


class ExchangeRateSource(str, Enum):
    MANUAL = "MANUAL"
    ECB = "ECB"
    FED = "FED"
    BOE = "BOE"
    FIXER = "FIXER"
    CURRENCYLAYER = "CURRENCYLAYER"
    EXCHANGERATE_API = "EXCHANGERATE_API"
    OPENEXCHANGERATES = "OPENEXCHANGERATES"


class Currency(BaseModel):
    """A registry entry. ``exchange_rate`` is units of this currency per base unit."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=3, max_length=3, description="ISO 4217 code")
    name: str = Field(default="", max_length=100)
    symbol: str = Field(..., min_length=1, max_length=5)
    symbol_position: SymbolPosition = Field(default=SymbolPosition.BEFORE)
    decimal_places: int = Field(default=2, ge=0, le=4)
    thousands_separator: str = Field(default=",", max_length=1)
    decimal_separator: str = Field(default=".", min_length=1, max_length=1)
    is_active: bool = True
    is_default: bool = False
    exchange_rate: float = Field(..., gt=0)
    last_updated: datetime = Field(default_factory=_utcnow)
    rounding: RoundingPolicy = Field(default=RoundingPolicy.NEAREST)
    countries: List[str] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        if not re.match(r"^[A-Z]{3}$", v):
            raise ValueError("Currency code must be three upper-case letters")
        return v

    @field_validator("exchange_rate")
    @classmethod
    def validate_rate(cls, v):
        if not math.isfinite(v):
            raise ValueError("Exchange rate must be finite")
        return v


class CurrencyConversion(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_currency: str
    to_currency: str
    from_amount: float
    to_amount: float
    original_to_amount: float
    exchange_rate: float
    converted_at: datetime = Field(default_factory=_utcnow)
    source: ExchangeRateSource = ExchangeRateSource.MANUAL
    rounding_applied: RoundingPolicy


class CurrencyDisplayOptions(BaseModel):
    """Display switches; ``symbol_position=None`` means the currency's own."""

    show_symbol: bool = True
    show_code: bool = False
    symbol_position: Optional[SymbolPosition] = None
    use_short_format: bool = False
    always_show_decimals: bool = True
    hide_decimals_for_whole_numbers: bool = False


class PriceDisplay(BaseModel):
    amount: float
    currency: str
    formatted_amount: str
    display_options: CurrencyDisplayOptions


class CurrencyPrice(BaseModel):
    currency: str
    amount: float
    is_converted: bool
    converted_at: Optional[datetime] = None
    exchange_rate: Optional[float] = None


class MultiCurrencyPrice(BaseModel):
    base_currency: str
    base_amount: float
    prices: List[CurrencyPrice]


# ── Request bodies ───────────────────────────────────────────────
class ConvertRequest(BaseModel):
    """POST /currencies/convert"""

    amount: float
    from_currency: str = Field(..., min_length=3, max_length=3)
    to_currency: str = Field(..., min_length=3, max_length=3)
    rounding: Optional[RoundingPolicy] = None


class FormatRequest(BaseModel):
    """POST /currencies/format"""

    amount: float
    currency: str
    options: Optional[CurrencyDisplayOptions] = None


class MultiCurrencyRequest(BaseModel):
    """POST /currencies/prices"""

    amount: float
    base_currency: str = Field(..., min_length=3, max_length=3)
    target_currencies: List[str] = Field(..., min_length=1)
