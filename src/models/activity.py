from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from models.errors import ValidationError

DAYS_PER_MONTH = Decimal('30')
HOURS_PER_DAY = Decimal('8')


@dataclass(frozen=True)
class OvertimeRecord:
    """Overtime hours recorded for an employee on a given date"""
    multiplier: Decimal
    quantity: Decimal
    date: date
    type_label: str = ''
    description: Optional[str] = None

    def __post_init__(self):
        if self.multiplier < 1:
            raise ValidationError(f"Overtime multiplier must be at least 1, got {self.multiplier}")
        if self.quantity < 0:
            raise ValidationError("Overtime quantity cannot be negative")

    def unit_value(self, base_salary: Decimal) -> Decimal:
        return base_salary / DAYS_PER_MONTH / HOURS_PER_DAY * self.multiplier

    def line_total(self, base_salary: Decimal) -> Decimal:
        return self.unit_value(base_salary) * self.quantity


@dataclass(frozen=True)
class BonusRecord:
    """Fixed bonus (adicional) paid in a period"""
    amount: Decimal
    date: date
    description: Optional[str] = None

    def __post_init__(self):
        if self.amount < 0:
            raise ValidationError("Bonus amount cannot be negative")


@dataclass(frozen=True)
class DeductionRecord:
    """Fixed, explicitly recorded deduction (not percentage based)"""
    amount: Decimal
    date: date
    deduction_type: str
    description: Optional[str] = None

    def __post_init__(self):
        if self.amount < 0:
            raise ValidationError("Deduction amount cannot be negative")
