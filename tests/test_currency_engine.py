"""Tests for the currency registry and conversion."""

import logging

import pytest
from pydantic import ValidationError

from marketplace.currency import (
    DEFAULT_CURRENCIES,
    Currency,
    CurrencyEngine,
    RoundingPolicy,
    apply_rounding,
)
from marketplace.utils.exceptions import ConfigurationError, ConversionError


class TestRegistry:
    def test_default_seed(self):
        engine = CurrencyEngine()
        assert set(engine.currencies) == {"USD", "EUR", "GBP"}
        assert engine.get_base_currency().code == "USD"
        assert len(DEFAULT_CURRENCIES) == 3

    def test_accepts_plain_dicts(self):
        engine = CurrencyEngine(
            [{"code": "CHF", "symbol": "Fr", "exchange_rate": 0.9, "is_default": True}]
        )
        assert engine.get_currency("CHF").symbol == "Fr"

    def test_registry_is_read_only(self, engine):
        with pytest.raises(TypeError):
            engine.currencies["XYZ"] = engine.get_currency("USD")

    def test_currency_entries_are_frozen(self, eur):
        with pytest.raises(ValidationError):
            eur.exchange_rate = 0.9

    def test_duplicate_code_rejected(self, engine, usd, eur):
        with pytest.raises(ConfigurationError):
            engine.load_currencies([usd, eur, eur])

    def test_failed_load_keeps_previous_registry(self, engine, usd):
        before = engine.currencies
        with pytest.raises(ConfigurationError):
            engine.load_currencies([usd, {"code": "bad", "symbol": "?", "exchange_rate": 1}])
        assert engine.currencies is before

    def test_more_than_one_default_rejected(self, usd, eur):
        second_default = eur.model_copy(update={"is_default": True})
        with pytest.raises(ConfigurationError):
            CurrencyEngine([usd, second_default])

    def test_missing_default_falls_back_to_first(self, eur, jpy, caplog):
        with caplog.at_level(logging.WARNING):
            engine = CurrencyEngine([eur, jpy])
            assert engine.get_base_currency().code == "EUR"
        assert "no default currency" in caplog.text

    def test_missing_default_strict(self, eur, jpy):
        with pytest.raises(ConfigurationError):
            CurrencyEngine([eur, jpy], strict_base_currency=True)

    def test_missing_default_reported_once(self, eur, jpy, caplog):
        with caplog.at_level(logging.WARNING):
            engine = CurrencyEngine([eur, jpy])
            for _ in range(3):
                engine.convert(10, "EUR", "JPY")
            engine.get_base_currency()
        warnings = [r for r in caplog.records if "no default currency" in r.getMessage()]
        assert len(warnings) == 1

    def test_base_survives_rate_update(self, engine):
        engine.update_exchange_rate("USD", 1.0)
        assert engine.get_base_currency().code == "USD"

    def test_empty_registry_has_no_base(self):
        engine = CurrencyEngine([])
        with pytest.raises(ConfigurationError):
            engine.get_base_currency()

    def test_inactive_currency_not_supported(self, usd, eur):
        engine = CurrencyEngine([usd, eur.model_copy(update={"is_active": False})])
        assert not engine.is_valid_currency("EUR")
        assert engine.is_valid_currency("USD")
        assert [c.code for c in engine.get_supported_currencies()] == ["USD"]

    def test_unknown_rounding_policy(self):
        with pytest.raises(ConfigurationError):
            CurrencyEngine(default_rounding="BANKERS")


class TestCurrencyModel:
    @pytest.mark.parametrize("code", ["usd", "US", "USDX", "U5D"])
    def test_invalid_code(self, code):
        with pytest.raises(ValidationError):
            Currency(code=code, symbol="$", exchange_rate=1)

    @pytest.mark.parametrize("rate", [0, -1, float("inf"), float("nan")])
    def test_invalid_rate(self, rate):
        with pytest.raises(ValidationError):
            Currency(code="USD", symbol="$", exchange_rate=rate)

    def test_decimal_places_bounds(self):
        with pytest.raises(ValidationError):
            Currency(code="BHD", symbol="BD", exchange_rate=0.38, decimal_places=5)


class TestExchangeRate:
    def test_from_base(self, engine):
        assert engine.get_exchange_rate("USD", "EUR") == 0.85

    def test_to_base(self, engine):
        assert engine.get_exchange_rate("EUR", "USD") == pytest.approx(1 / 0.85)

    def test_cross_rate(self, engine):
        assert engine.get_exchange_rate("EUR", "SEK") == pytest.approx(10.5 / 0.85)

    def test_same_currency(self, engine):
        assert engine.get_exchange_rate("JPY", "JPY") == 1.0

    def test_unknown_currency(self, engine):
        with pytest.raises(ConversionError):
            engine.get_exchange_rate("USD", "ZZZ")


class TestConvert:
    def test_usd_to_eur(self, engine):
        conversion = engine.convert(100, "USD", "EUR")
        assert conversion.to_amount == 85.0
        assert conversion.exchange_rate == 0.85
        assert conversion.from_amount == 100
        assert conversion.rounding_applied == RoundingPolicy.NEAREST
        assert conversion.source.value == "MANUAL"

    @pytest.mark.parametrize(
        "source,target",
        [("USD", "EUR"), ("EUR", "SEK"), ("USD", "JPY"), ("SEK", "EUR"), ("JPY", "USD")],
    )
    @pytest.mark.parametrize("amount", [0.01, 1, 19.99, 1234.56, 100000])
    def test_round_trip(self, engine, source, target, amount):
        there = engine.convert(amount, source, target)
        back = engine.convert(there.to_amount, target, source)
        # half a unit lost at each rounding step, the first carried back at the reverse rate
        src_places = engine.get_currency(source).decimal_places
        dst_places = engine.get_currency(target).decimal_places
        tolerance = (
            0.5 * 10 ** -src_places
            + 0.5 * 10 ** -dst_places * engine.get_exchange_rate(target, source)
            + 1e-9
        )
        assert back.to_amount == pytest.approx(amount, abs=tolerance)

    def test_same_currency_is_exact(self, engine):
        conversion = engine.convert(19.999, "EUR", "EUR")
        assert conversion.to_amount == 19.999
        assert conversion.exchange_rate == 1.0

    def test_unknown_same_currency_still_rejected(self, engine):
        with pytest.raises(ConversionError):
            engine.convert(10, "ZZZ", "ZZZ")

    def test_unknown_target(self, engine):
        with pytest.raises(ConversionError) as exc_info:
            engine.convert(10, "USD", "ZZZ")
        assert exc_info.value.status_code == 422
        assert exc_info.value.details == {"currency": "ZZZ"}

    def test_target_decimal_places(self, engine):
        # 10 EUR -> 1764.70588... JPY
        assert engine.convert(10, "EUR", "JPY").to_amount == 1765.0
        assert engine.convert(10, "EUR", "JPY", "DOWN").to_amount == 1764.0
        assert engine.convert(10, "EUR", "JPY", RoundingPolicy.UP).to_amount == 1765.0

    def test_unrounded_value_is_kept(self, engine):
        conversion = engine.convert(10, "EUR", "JPY", RoundingPolicy.NONE)
        assert conversion.to_amount == conversion.original_to_amount
        assert conversion.to_amount == pytest.approx(1764.7058823529)

    def test_rounding_override_validated(self, engine):
        with pytest.raises(ConfigurationError):
            engine.convert(10, "USD", "EUR", "SIDEWAYS")

    def test_engine_default_rounding(self, usd, eur):
        engine = CurrencyEngine([usd, eur], default_rounding="DOWN")
        assert engine.convert(1.239, "USD", "USD").rounding_applied == RoundingPolicy.DOWN
        assert engine.convert(1.99, "USD", "EUR").to_amount == 1.69

    def test_large_amount_converts(self, engine):
        conversion = engine.convert(1e27, "USD", "EUR")
        assert conversion.to_amount == conversion.original_to_amount
        assert conversion.to_amount == pytest.approx(8.5e26)

    def test_scaling_overflow_keeps_unrounded_value(self, engine):
        conversion = engine.convert(1e308, "USD", "EUR")
        assert conversion.to_amount == pytest.approx(8.5e307)

    def test_overflowing_result_raises(self, engine):
        with pytest.raises(ConversionError):
            engine.convert(1.7e308, "EUR", "USD")

    @pytest.mark.parametrize("amount", [float("inf"), float("nan")])
    def test_non_finite_amount_raises(self, engine, amount):
        with pytest.raises(ConversionError):
            engine.convert(amount, "USD", "EUR")


class TestApplyRounding:
    @pytest.mark.parametrize(
        "value,policy,expected",
        [
            (1.005, RoundingPolicy.NEAREST, 1.01),
            (2.675, RoundingPolicy.NEAREST, 2.68),
            (1.004, RoundingPolicy.NEAREST, 1.0),
            (1.001, RoundingPolicy.UP, 1.01),
            (1.009, RoundingPolicy.DOWN, 1.0),
            (85.0, RoundingPolicy.UP, 85.0),
            (1.23456, RoundingPolicy.NONE, 1.23456),
        ],
    )
    def test_two_places(self, value, policy, expected):
        assert apply_rounding(value, 2, policy) == expected

    def test_zero_places(self):
        assert apply_rounding(149.5, 0, RoundingPolicy.NEAREST) == 150.0
        assert apply_rounding(149.5, 0, RoundingPolicy.DOWN) == 149.0

    @pytest.mark.parametrize(
        "policy", [RoundingPolicy.NEAREST, RoundingPolicy.UP, RoundingPolicy.DOWN]
    )
    def test_values_beyond_float_precision_are_untouched(self, policy):
        assert apply_rounding(1e27, 2, policy) == 1e27
        assert apply_rounding(-3e25, 4, policy) == -3e25

    def test_scale_overflow_returns_value(self):
        assert apply_rounding(1e308, 2, RoundingPolicy.NEAREST) == 1e308


class TestUpdateExchangeRate:
    def test_replaces_entry(self, engine, eur):
        refreshed = engine.update_exchange_rate("EUR", 0.9)
        assert refreshed.exchange_rate == 0.9
        assert refreshed is not eur
        assert eur.exchange_rate == 0.85
        assert engine.convert(100, "USD", "EUR").to_amount == 90.0

    def test_refresh_stamps_last_updated(self, engine, eur):
        assert engine.update_exchange_rate("EUR", 0.9).last_updated >= eur.last_updated

    @pytest.mark.parametrize("rate", [0, -0.5, float("inf"), 1_000_000])
    def test_invalid_rate(self, engine, rate):
        with pytest.raises(ConversionError):
            engine.update_exchange_rate("EUR", rate)
        assert engine.get_currency("EUR").exchange_rate == 0.85

    def test_unknown_code(self, engine):
        with pytest.raises(ConversionError):
            engine.update_exchange_rate("ZZZ", 1.2)


class TestMultiCurrencyPrices:
    def test_prices(self, engine):
        result = engine.get_multi_currency_prices(100, "USD", ["USD", "EUR", "JPY"])
        assert result.base_currency == "USD"
        amounts = {p.currency: p.amount for p in result.prices}
        assert amounts == {"USD": 100, "EUR": 85.0, "JPY": 15000.0}
        flags = {p.currency: p.is_converted for p in result.prices}
        assert flags == {"USD": False, "EUR": True, "JPY": True}

    def test_unknown_target_raises(self, engine):
        with pytest.raises(ConversionError):
            engine.get_multi_currency_prices(100, "USD", ["EUR", "ZZZ"])
