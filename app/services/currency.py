# app/services/currency.py
from decimal import Decimal, ROUND_HALF_UP

from app.utils.settings import CURRENCY_RATE

_CENTS = Decimal("0.01")


class CurrencyConverter:
    """Static USD -> VND multiplier; the only place an amount gets rounded."""

    def __init__(self, rate: Decimal | None = None):
        self.rate = Decimal(rate) if rate is not None else CURRENCY_RATE

    def convert(self, amount: Decimal) -> Decimal:
        return (Decimal(amount) * self.rate).quantize(_CENTS, rounding=ROUND_HALF_UP)
