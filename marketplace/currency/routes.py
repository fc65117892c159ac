from fastapi import APIRouter, Depends, HTTPException, Request

from marketplace.utils import success_response
from .engine import CurrencyEngine
from .schemas import ConvertRequest, FormatRequest, MultiCurrencyRequest

currency_router = APIRouter()


def get_currency_engine(request: Request) -> CurrencyEngine:
    """Engine built at startup and stored on app.state."""
    return request.app.state.currency_engine


@currency_router.get("/")
async def list_currencies(engine: CurrencyEngine = Depends(get_currency_engine)):
    """List active currencies, base currency first."""
    base = engine.get_base_currency()
    currencies = sorted(
        engine.get_supported_currencies(), key=lambda c: c.code != base.code
    )
    return success_response(
        data={"base_currency": base.code, "currencies": currencies}
    )


@currency_router.get("/{code}")
async def get_currency(code: str, engine: CurrencyEngine = Depends(get_currency_engine)):
    currency = engine.get_currency(code.upper())
    if currency is None:
        raise HTTPException(status_code=404, detail=f"Currency '{code}' not found")
    return success_response(data=currency)


@currency_router.post("/convert")
async def convert_amount(
    body: ConvertRequest, engine: CurrencyEngine = Depends(get_currency_engine)
):
    """Convert an amount. Unknown currencies are rejected with 422."""
    conversion = engine.convert(
        body.amount,
        body.from_currency.upper(),
        body.to_currency.upper(),
        body.rounding,
    )
    return success_response(data=conversion)


@currency_router.post("/format")
async def format_amount(
    body: FormatRequest, engine: CurrencyEngine = Depends(get_currency_engine)
):
    display = engine.get_price_display(body.amount, body.currency.upper(), body.options)
    return success_response(data=display)


@currency_router.post("/prices")
async def multi_currency_prices(
    body: MultiCurrencyRequest, engine: CurrencyEngine = Depends(get_currency_engine)
):
    prices = engine.get_multi_currency_prices(
        body.amount,
        body.base_currency.upper(),
        [code.upper() for code in body.target_currencies],
    )
    return success_response(data=prices)
