"""
Currency engine.

Holds an immutable registry of currency definitions, converts amounts
through the base currency and renders display strings using each
currency's own separators.

Registry updates build a fresh mapping and swap a single reference, so a
caller mid-conversion sees either the old registry or the new one.
"""

import math
import re
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Union

from pydantic import ValidationError

from marketplace.utils import Logger
from marketplace.utils.exceptions import ConfigurationError, ConversionError

from .defaults import DEFAULT_CURRENCIES
from .schemas import (
    Currency,
    CurrencyConversion,
    CurrencyDisplayOptions,
    CurrencyPrice,
    MultiCurrencyPrice,
    PriceDisplay,
    RoundingPolicy,
    SymbolPosition,
)
from .validators import CurrencyValidator

logger = Logger("currency")

_THOUSANDS_PATTERN = re.compile(r"\B(?=(\d{3})+(?!\d))")

CurrencyLike = Union[Currency, Mapping[str, Any]]

_FLOAT_INTEGRAL_LIMIT = 2 ** 53


def _plain_number(amount: float) -> str:
    """Bare numeric rendering used when a currency is unknown."""
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def apply_rounding(value: float, decimal_places: int, policy: RoundingPolicy) -> float:
    """Round by scaling to ``decimal_places``, rounding, and scaling back."""
    if policy == RoundingPolicy.NONE:
        return value

    factor = 10 ** decimal_places
    # absorb binary representation noise (e.g. 8500.000000000001)
    scaled = round(value * factor, 9)

    # floats at or beyond 2**53 are already whole; inf means the scale overflowed
    if not math.isfinite(scaled) or abs(scaled) >= _FLOAT_INTEGRAL_LIMIT:
        return value

    if policy == RoundingPolicy.UP:
        return math.ceil(scaled) / factor
    if policy == RoundingPolicy.DOWN:
        return math.floor(scaled) / factor

    nearest = Decimal(repr(scaled)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(nearest) / factor


class _Registry(NamedTuple):
    """Currencies plus the resolved base code, swapped as one reference."""

    currencies: Mapping[str, Currency]
    base_code: Optional[str]


class CurrencyEngine:
    def __init__(
        self,
        currencies: Optional[Iterable[CurrencyLike]] = None,
        strict_base_currency: bool = False,
        default_rounding: Union[RoundingPolicy, str] = RoundingPolicy.NEAREST,
    ):
        self.strict_base_currency = strict_base_currency
        self.default_rounding = self._parse_rounding(default_rounding)
        self._registry = _Registry(MappingProxyType({}), None)
        self.load_currencies(DEFAULT_CURRENCIES if currencies is None else currencies)

    # ── Registry ─────────────────────────────────────────────────
    def load_currencies(self, currencies: Iterable[CurrencyLike]) -> None:
        """
        Replace the whole registry. Entries are never merged.

        The base currency is resolved here, once per load. A registry with no
        default falls back to its first entry and is reported at this point.
        """
        registry: dict[str, Currency] = {}
        for item in currencies:
            try:
                currency = (
                    item if isinstance(item, Currency) else Currency.model_validate(item)
                )
            except ValidationError as e:
                raise ConfigurationError(
                    "Invalid currency definition", details={"errors": e.errors()}
                )
            if currency.code in registry:
                raise ConfigurationError(
                    f"Duplicate currency code '{currency.code}' in registry"
                )
            registry[currency.code] = currency

        defaults = [c.code for c in registry.values() if c.is_default]
        if len(defaults) > 1:
            raise ConfigurationError(
                "More than one currency is marked as default",
                details={"defaults": defaults},
            )
        base_code = defaults[0] if defaults else next(iter(registry), None)
        if base_code is not None and not defaults:
            self._report_missing_default(base_code)

        self._registry = _Registry(MappingProxyType(registry), base_code)
        logger.info(f"Loaded {len(registry)} currencies: {', '.join(registry)}")

    def _report_missing_default(self, fallback_code: str) -> None:
        if self.strict_base_currency:
            raise ConfigurationError("No currency in the registry is marked as default")
        logger.warning(
            f"Data integrity: no default currency in registry, "
            f"falling back to first entry '{fallback_code}'"
        )

    @property
    def currencies(self) -> Mapping[str, Currency]:
        return self._registry.currencies

    def get_currency(self, code: str) -> Optional[Currency]:
        return self._registry.currencies.get(code)

    def is_valid_currency(self, code: str) -> bool:
        currency = self._registry.currencies.get(code)
        return currency is not None and currency.is_active

    def get_base_currency(self) -> Currency:
        return self._base_of(self._registry)

    @staticmethod
    def _base_of(registry: _Registry) -> Currency:
        if registry.base_code is None:
            raise ConfigurationError("Currency registry is empty")
        return registry.currencies[registry.base_code]

    def get_supported_currencies(self) -> list[Currency]:
        return [c for c in self._registry.currencies.values() if c.is_active]

    def update_exchange_rate(self, code: str, rate: float) -> Currency:
        """Replace one entry with a refreshed rate and swap the registry."""
        if not CurrencyValidator.validate_exchange_rate(rate):
            raise ConversionError(
                f"Invalid exchange rate {rate!r} for '{code}'",
                details={"currency": code, "rate": rate},
            )
        snapshot = self._registry
        current = self._require(code, snapshot)
        refreshed = Currency.model_validate(
            {
                **current.model_dump(),
                "exchange_rate": rate,
                "last_updated": datetime.now(timezone.utc),
            }
        )
        currencies = dict(snapshot.currencies)
        currencies[code] = refreshed
        self._registry = _Registry(MappingProxyType(currencies), snapshot.base_code)
        logger.info(f"Exchange rate for {code} updated to {rate}")
        return refreshed

    # ── Conversion ───────────────────────────────────────────────
    def _require(self, code: str, registry: Optional[_Registry] = None) -> Currency:
        currency = (registry or self._registry).currencies.get(code)
        if currency is None:
            raise ConversionError(
                f"Unknown currency '{code}'", details={"currency": code}
            )
        if not CurrencyValidator.validate_exchange_rate(currency.exchange_rate):
            raise ConversionError(
                f"Currency '{code}' has no usable exchange rate",
                details={"currency": code, "rate": currency.exchange_rate},
            )
        return currency

    @staticmethod
    def _parse_rounding(rounding: Union[RoundingPolicy, str]) -> RoundingPolicy:
        try:
            return RoundingPolicy(rounding)
        except ValueError:
            raise ConfigurationError(
                f"Unknown rounding policy '{rounding}'",
                details={"allowed": [p.value for p in RoundingPolicy]},
            )

    def get_exchange_rate(self, from_currency: str, to_currency: str) -> float:
        return self._exchange_rate(self._registry, from_currency, to_currency)

    def _exchange_rate(
        self, registry: _Registry, from_currency: str, to_currency: str
    ) -> float:
        source = self._require(from_currency, registry)
        if from_currency == to_currency:
            return 1.0
        target = self._require(to_currency, registry)

        base = self._base_of(registry)
        if source.code == base.code:
            return target.exchange_rate
        if target.code == base.code:
            return 1 / source.exchange_rate
        return target.exchange_rate / source.exchange_rate

    def convert(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        rounding: Optional[Union[RoundingPolicy, str]] = None,
    ) -> CurrencyConversion:
        policy = (
            self.default_rounding if rounding is None else self._parse_rounding(rounding)
        )
        registry = self._registry
        self._require(from_currency, registry)
        if not math.isfinite(amount):
            raise ConversionError(
                f"Cannot convert non-finite amount {amount!r}",
                details={"amount": str(amount)},
            )

        if from_currency == to_currency:
            return CurrencyConversion(
                from_currency=from_currency,
                to_currency=to_currency,
                from_amount=amount,
                to_amount=amount,
                original_to_amount=amount,
                exchange_rate=1.0,
                rounding_applied=policy,
            )

        rate = self._exchange_rate(registry, from_currency, to_currency)
        unrounded = amount * rate
        if not math.isfinite(unrounded):
            raise ConversionError(
                f"Converted amount overflows for {amount!r} {from_currency} to {to_currency}",
                details={"amount": amount, "from": from_currency, "to": to_currency},
            )
        target = registry.currencies[to_currency]

        return CurrencyConversion(
            from_currency=from_currency,
            to_currency=to_currency,
            from_amount=amount,
            to_amount=apply_rounding(unrounded, target.decimal_places, policy),
            original_to_amount=unrounded,
            exchange_rate=rate,
            rounding_applied=policy,
        )

    def get_multi_currency_prices(
        self,
        base_amount: float,
        base_currency: str,
        target_currencies: Iterable[str],
        rounding: Optional[Union[RoundingPolicy, str]] = None,
    ) -> MultiCurrencyPrice:
        prices = []
        for code in target_currencies:
            conversion = self.convert(base_amount, base_currency, code, rounding)
            prices.append(
                CurrencyPrice(
                    currency=code,
                    amount=conversion.to_amount,
                    is_converted=code != base_currency,
                    converted_at=conversion.converted_at,
                    exchange_rate=conversion.exchange_rate,
                )
            )
        return MultiCurrencyPrice(
            base_currency=base_currency, base_amount=base_amount, prices=prices
        )

    # ── Formatting ───────────────────────────────────────────────
    def format(
        self,
        amount: float,
        currency_code: str,
        options: Optional[CurrencyDisplayOptions] = None,
        **overrides,
    ) -> str:
        """
        Render ``amount`` for display.

        Unknown currencies degrade to the bare number instead of raising.
        ``use_short_format`` collapses amounts of 1000 and above to K/M/B
        with one decimal digit, ignoring the currency's separators.
        """
        currency = self.get_currency(currency_code)
        if currency is None:
            logger.warning(f"Cannot format amount in unknown currency '{currency_code}'")
            return _plain_number(amount)

        opts = self._resolve_options(options, overrides)
        position = opts.symbol_position or currency.symbol_position

        if opts.use_short_format and amount >= 1000:
            sign, digits = "", self.format_short_number(amount)
        else:
            number = self.format_number(amount, currency, opts)
            sign, digits = ("-", number[1:]) if number.startswith("-") else ("", number)

        result = digits
        if opts.show_symbol:
            if position == SymbolPosition.BEFORE:
                result = currency.symbol + result
            else:
                result = result + currency.symbol
        result = sign + result

        if opts.show_code:
            result = f"{result} {currency_code}"

        return result

    @staticmethod
    def _resolve_options(
        options: Optional[CurrencyDisplayOptions], overrides: dict
    ) -> CurrencyDisplayOptions:
        opts = options or CurrencyDisplayOptions()
        if overrides:
            opts = CurrencyDisplayOptions.model_validate(
                {**opts.model_dump(), **overrides}
            )
        return opts

    @staticmethod
    def format_number(
        amount: float, currency: Currency, options: CurrencyDisplayOptions
    ) -> str:
        is_whole = float(amount).is_integer()
        show_decimals = (
            options.always_show_decimals and not options.hide_decimals_for_whole_numbers
        )
        places = (
            0
            if is_whole and options.hide_decimals_for_whole_numbers
            else currency.decimal_places
        )
        digits = places if (show_decimals or not is_whole) else 0

        text = f"{abs(amount):.{digits}f}"
        integer_part, _, fraction = text.partition(".")
        if currency.thousands_separator:
            integer_part = _THOUSANDS_PATTERN.sub(
                currency.thousands_separator, integer_part
            )

        formatted = integer_part
        if fraction:
            formatted += currency.decimal_separator + fraction
        # -0.00 renders without a sign
        if amount < 0 and text.strip("0.") != "":
            formatted = "-" + formatted
        return formatted

    @staticmethod
    def format_short_number(amount: float) -> str:
        if amount >= 1_000_000_000:
            return f"{amount / 1_000_000_000:.1f}B"
        if amount >= 1_000_000:
            return f"{amount / 1_000_000:.1f}M"
        if amount >= 1_000:
            return f"{amount / 1_000:.1f}K"
        return _plain_number(amount)

    def get_price_display(
        self,
        amount: float,
        currency_code: str,
        options: Optional[CurrencyDisplayOptions] = None,
    ) -> PriceDisplay:
        opts = options or CurrencyDisplayOptions()
        return PriceDisplay(
            amount=amount,
            currency=currency_code,
            formatted_amount=self.format(amount, currency_code, opts),
            display_options=opts,
        )
