"""Built-in currency seed, used when no currencies file is configured."""

from .schemas import Currency, RoundingPolicy, SymbolPosition


DEFAULT_CURRENCIES: tuple[Currency, ...] = (
    Currency(
        code="USD",
        name="US Dollar",
        symbol="$",
        symbol_position=SymbolPosition.BEFORE,
        decimal_places=2,
        thousands_separator=",",
        decimal_separator=".",
        is_active=True,
        is_default=True,
        exchange_rate=1,
        rounding=RoundingPolicy.NEAREST,
        countries=["US"],
    ),
    Currency(
        code="EUR",
        name="Euro",
        symbol="€",
        symbol_position=SymbolPosition.BEFORE,
        decimal_places=2,
        thousands_separator=".",
        decimal_separator=",",
        is_active=True,
        is_default=False,
        exchange_rate=0.85,
        rounding=RoundingPolicy.NEAREST,
        countries=["DE", "FR", "IT", "ES", "NL"],
    ),
    Currency(
        code="GBP",
        name="British Pound",
        symbol="£",
        symbol_position=SymbolPosition.BEFORE,
        decimal_places=2,
        thousands_separator=",",
        decimal_separator=".",
        is_active=True,
        is_default=False,
        exchange_rate=0.73,
        rounding=RoundingPolicy.NEAREST,
        countries=["GB"],
    ),
)
