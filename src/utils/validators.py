import re
from decimal import Decimal


def validate_national_id(national_id: str) -> bool:
    """Validate DNI format (7 or 8 digits, dots allowed)"""
    return bool(re.match(r'^\d{1,2}\.?\d{3}\.?\d{3}$', national_id))


def validate_rate(rate: Decimal) -> bool:
    """Validate contribution rate is a percentage"""
    return Decimal('0') <= rate <= Decimal('100')


def validate_amount(amount: Decimal) -> bool:
    """Validate money amount is non-negative"""
    return Decimal(amount) >= Decimal('0')
