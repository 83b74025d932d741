from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from models.errors import ValidationError
from utils.validators import validate_rate


@dataclass
class Employee:
    """Employee master data used by the settlement engine"""
    employee_id: int
    badge_id: str
    first_name: str
    last_name: str
    base_salary: Decimal
    agreement_id: Optional[int] = None
    national_id: Optional[str] = None
    hire_date: Optional[date] = None
    birth_date: Optional[date] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    agreement_name: Optional[str] = None
    active: bool = True

    @property
    def display_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    def __str__(self):
        return f"Employee({self.badge_id}, {self.display_name})"


@dataclass(frozen=True)
class Contribution:
    """Statutory contribution: a percentage of gross pay"""
    label: str
    rate: Decimal

    def __post_init__(self):
        if not validate_rate(self.rate):
            raise ValidationError(f"Contribution rate for {self.label} must be between 0 and 100")


@dataclass
class Agreement:
    """Labor agreement (convenio) with its ordered statutory contributions"""
    agreement_id: int
    name: str
    number: Optional[str] = None
    contributions: List[Contribution] = field(default_factory=list)
