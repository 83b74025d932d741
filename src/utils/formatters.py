from decimal import Decimal, ROUND_HALF_UP
from datetime import date
from config.settings import CURRENCY_SYMBOL

CENTS = Decimal('0.01')


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to cents, half up"""
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format currency amount"""
    return f"{symbol} {to_cents(amount):,.2f}"


def format_date(d: date) -> str:
    """Format date in Argentine style"""
    return d.strftime("%d/%m/%Y")


def format_percentage(rate: Decimal) -> str:
    """Format percentage"""
    return f"{rate:.2f}%"
