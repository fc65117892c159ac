"""Pick a display currency from a country code or a BCP 47 locale."""

from typing import Optional


FALLBACK_CURRENCY = "USD"

COUNTRY_CURRENCY_MAP: dict[str, str] = {
    "US": "USD",
    "GB": "GBP",
    "DE": "EUR",
    "FR": "EUR",
    "IT": "EUR",
    "ES": "EUR",
    "NL": "EUR",
    "CA": "CAD",
    "AU": "AUD",
    "JP": "JPY",
    "CN": "CNY",
    "IN": "INR",
    "BR": "BRL",
    "MX": "MXN",
    "KR": "KRW",
    "TR": "TRY",
    "ZA": "ZAR",
    "SG": "SGD",
    "HK": "HKD",
    "NZ": "NZD",
    "SE": "SEK",
    "NO": "NOK",
    "DK": "DKK",
    "CH": "CHF",
    "PL": "PLN",
    "CZ": "CZK",
    "HU": "HUF",
    "IL": "ILS",
    "EG": "EGP",
    "SA": "SAR",
    "AE": "AED",
    "TH": "THB",
    "MY": "MYR",
    "ID": "IDR",
    "PH": "PHP",
    "VN": "VND",
}


class CurrencyDetector:
    @staticmethod
    def detect_from_country(
        country_code: Optional[str], fallback: str = FALLBACK_CURRENCY
    ) -> str:
        if not country_code:
            return fallback
        return COUNTRY_CURRENCY_MAP.get(country_code.upper(), fallback)

    @staticmethod
    def detect_from_locale(locale: str, fallback: str = FALLBACK_CURRENCY) -> str:
        """e.g. "de-DE" → "EUR", "en_GB" → "GBP"."""
        parts = locale.replace("_", "-").split("-")
        country = parts[1] if len(parts) > 1 else None
        return CurrencyDetector.detect_from_country(country, fallback)
