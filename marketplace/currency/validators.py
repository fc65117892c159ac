import math
import re


class CurrencyValidator:
    """Validation rules for currency registry data and amounts"""

    MAX_EXCHANGE_RATE = 1_000_000

    @staticmethod
    def validate_currency_code(code: str) -> bool:
        return bool(code) and re.fullmatch(r"[A-Z]{3}", code) is not None

    @staticmethod
    def validate_exchange_rate(rate) -> bool:
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            return False
        return (
            math.isfinite(rate)
            and 0 < rate < CurrencyValidator.MAX_EXCHANGE_RATE
        )

    @staticmethod
    def validate_amount(amount) -> bool:
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            return False
        return math.isfinite(amount) and amount >= 0

    @staticmethod
    def validate_currency_symbol(symbol: str) -> bool:
        return 0 < len(symbol) <= 5

    @staticmethod
    def validate_decimal_places(places) -> bool:
        return isinstance(places, int) and not isinstance(places, bool) and 0 <= places <= 4
