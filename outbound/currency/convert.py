from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple
from outbound.config.env import get_fx_config
from outbound.funnel.inputs import MONEY_FIELDS

"""
Fixed-rate USD/CAD conversion. The inverse rate is the exact reciprocal so
that USD -> CAD -> USD returns the original amount to float precision.
Nothing here rounds; rounding happens only when values are formatted.
"""

USD = "USD"
CAD = "CAD"
CURRENCIES: Tuple[str, ...] = (USD, CAD)
SYMBOLS: Dict[str, str] = {USD: "$", CAD: "CA$"}

USD_TO_CAD = get_fx_config().usd_to_cad
CAD_TO_USD = 1 / USD_TO_CAD


@dataclass(frozen=True)
class FXQuote:
    base: str
    quote: str
    rate: float


def _check(currency: str) -> str:
    if currency not in CURRENCIES:
        raise ValueError(f"unsupported currency: {currency!r}")
    return currency


def quote(from_currency: str, to_currency: str) -> FXQuote:
    _check(from_currency)
    _check(to_currency)
    if from_currency == to_currency:
        r = 1.0
    elif from_currency == USD:
        r = USD_TO_CAD
    else:
        r = CAD_TO_USD
    return FXQuote(base=from_currency, quote=to_currency, rate=r)


def rate(from_currency: str, to_currency: str) -> float:
    return quote(from_currency, to_currency).rate


def convert(amount: float, from_currency: str, to_currency: str) -> float:
    """Convert a money amount between the two supported currencies."""
    if from_currency == to_currency:
        _check(from_currency)
        return amount
    return amount * rate(from_currency, to_currency)


def convert_fields(obj: Any, fields: Iterable[str], from_currency: str, to_currency: str) -> None:
    """Convert the named attributes of obj in place."""
    r = rate(from_currency, to_currency)
    if r == 1.0:
        return
    for name in fields:
        setattr(obj, name, getattr(obj, name) * r)


def convert_inputs(inputs: Any, from_currency: str, to_currency: str) -> None:
    """Re-express every money field of a BusinessInputs in to_currency.

    Percentages, working days and the timeframe are left untouched.
    """
    convert_fields(inputs, MONEY_FIELDS, from_currency, to_currency)
