from datetime import date

import pytest

from models.errors import ValidationError
from models.period import Period


def test_parse():
    period = Period.parse("2025-02")
    assert (period.year, period.month) == (2025, 2)
    assert str(period) == "2025-02"


def test_bounds():
    period = Period.parse("2024-02")
    assert period.first_day == date(2024, 2, 1)
    assert period.last_day == date(2024, 2, 29)
    assert period.contains(date(2024, 2, 15))
    assert not period.contains(date(2024, 3, 1))


@pytest.mark.parametrize("value", ["", None, "2025-13", "2025/03", "25-03", "2025-3"])
def test_invalid_periods(value):
    with pytest.raises(ValidationError):
        Period.parse(value)


def test_ordering():
    assert Period(2024, 12) < Period(2025, 1)
    assert Period.of(date(2025, 1, 20)) == Period(2025, 1)
