import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from models.errors import ValidationError

PERIOD_PATTERN = re.compile(r'^(\d{4})-(\d{2})$')


@dataclass(frozen=True, order=True)
class Period:
    """Calendar year-month a settlement applies to"""
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Invalid month {self.month} in period")
        if self.year < 1:
            raise ValidationError(f"Invalid year {self.year} in period")

    @classmethod
    def parse(cls, value: Optional[str]) -> "Period":
        """Parse a 'YYYY-MM' string"""
        if not value:
            raise ValidationError("El período es requerido (YYYY-MM)")
        match = PERIOD_PATTERN.match(str(value).strip())
        if not match:
            raise ValidationError(f"Invalid period '{value}', expected YYYY-MM")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def of(cls, d: date) -> "Period":
        return cls(d.year, d.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def __str__(self):
        return f"{self.year:04d}-{self.month:02d}"
