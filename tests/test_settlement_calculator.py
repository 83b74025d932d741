from datetime import date
from decimal import Decimal

import pytest

from models.activity import BonusRecord, DeductionRecord, OvertimeRecord
from models.employee import Agreement, Contribution, Employee
from models.errors import NotFoundError, ValidationError
from models.period import Period
from models.settlement import PERCENTAGE_KIND
from processors.settlement_calculator import compute_settlement

PERIOD = Period(2025, 3)


def make_employee(base_salary='300000.00', agreement_id=None):
    return Employee(
        employee_id=1,
        badge_id="EMP-001",
        first_name="Juan",
        last_name="Pérez",
        base_salary=Decimal(base_salary),
        agreement_id=agreement_id
    )


def make_agreement():
    return Agreement(
        agreement_id=1,
        name="Empleados de Comercio",
        contributions=[
            Contribution("Aporte Jubilación", Decimal('11')),
            Contribution("Aporte Obra Social", Decimal('3')),
            Contribution("Aporte Sindical", Decimal('2')),
            Contribution("Aporte PAMI", Decimal('1.5')),
        ]
    )


OVERTIME = [OvertimeRecord(multiplier=Decimal('1.5'), quantity=Decimal('10'),
                           date=date(2025, 3, 10), type_label="Horas extras al 50%")]
BONUSES = [BonusRecord(amount=Decimal('8000.00'), date=date(2025, 3, 31))]


class TestEarnings:

    def test_overtime_and_bonus_without_agreement(self):
        settlement = compute_settlement(make_employee(), None, OVERTIME, BONUSES, [], PERIOD)

        line = settlement.earnings.overtime_lines[0]
        assert line.unit_value == Decimal('1875')
        assert line.total == Decimal('18750')
        assert settlement.earnings.overtime == Decimal('18750')
        assert settlement.earnings.bonuses == Decimal('8000')
        assert settlement.gross_pay == Decimal('326750.00')
        assert settlement.deductions.lines == ()
        assert settlement.total_deductions == 0
        assert settlement.net_pay == Decimal('326750.00')

    def test_overtime_unit_value_uses_30_days_of_8_hours(self):
        record = OvertimeRecord(multiplier=Decimal('2'), quantity=Decimal('3'), date=date(2025, 3, 1))
        assert record.unit_value(Decimal('240000')) == Decimal('2000')
        assert record.line_total(Decimal('240000')) == Decimal('6000')

    def test_bonus_without_description_gets_default_concept(self):
        settlement = compute_settlement(make_employee(), None, [], BONUSES, [], PERIOD)
        assert settlement.earnings.bonus_lines[0].description == "Adicional"


class TestDeductions:

    def test_statutory_contributions_on_gross_pay(self):
        employee = make_employee(agreement_id=1)
        settlement = compute_settlement(employee, make_agreement(), OVERTIME, BONUSES, [], PERIOD)

        lines = settlement.deductions.lines
        assert [line.concept for line in lines] == [
            "Aporte Jubilación", "Aporte Obra Social", "Aporte Sindical", "Aporte PAMI"
        ]
        assert [line.amount for line in lines] == [
            Decimal('35942.50'), Decimal('9802.50'), Decimal('6535.00'), Decimal('4901.25')
        ]
        assert all(line.kind == PERCENTAGE_KIND for line in lines)
        assert settlement.total_deductions == Decimal('57181.25')
        assert settlement.net_pay == Decimal('269568.75')

    def test_explicit_deductions_follow_statutory_lines(self):
        records = [DeductionRecord(amount=Decimal('5000'), date=date(2025, 3, 5), deduction_type="fijo")]
        settlement = compute_settlement(make_employee(agreement_id=1), make_agreement(), [], [], records, PERIOD)

        last = settlement.deductions.lines[-1]
        assert last.concept == "Descuento adicional"
        assert last.kind == "fijo"
        assert not last.is_statutory
        assert len(settlement.deductions.statutory_lines) == 4
        assert settlement.total_deductions == Decimal('300000') * Decimal('0.175') + Decimal('5000')

    def test_net_pay_is_not_clamped(self):
        records = [DeductionRecord(amount=Decimal('1000'), date=date(2025, 3, 5), deduction_type="fijo")]
        settlement = compute_settlement(make_employee('500'), None, [], [], records, PERIOD)
        assert settlement.net_pay == Decimal('-500')


class TestEdgeCases:

    def test_zero_salary_without_agreement(self):
        settlement = compute_settlement(make_employee('0'), None, [], [], [], PERIOD)
        assert settlement.gross_pay == 0
        assert settlement.total_deductions == 0
        assert settlement.net_pay == 0

    def test_zero_salary_with_agreement_has_zero_statutory_lines(self):
        settlement = compute_settlement(make_employee('0', agreement_id=1), make_agreement(), [], [], [], PERIOD)
        assert len(settlement.deductions.lines) == 4
        assert all(line.amount == 0 for line in settlement.deductions.lines)
        assert settlement.net_pay == 0

    def test_missing_employee(self):
        with pytest.raises(NotFoundError):
            compute_settlement(None, None, [], [], [], PERIOD)

    def test_negative_contribution_rate_rejected(self):
        with pytest.raises(ValidationError):
            Contribution("Aporte Jubilación", Decimal('-1'))

    def test_contribution_rate_above_100_rejected(self):
        with pytest.raises(ValidationError):
            Contribution("Aporte Jubilación", Decimal('100.5'))

    def test_totals_are_consistent(self):
        records = [DeductionRecord(amount=Decimal('1234.56'), date=date(2025, 3, 5), deduction_type="fijo")]
        settlement = compute_settlement(make_employee(agreement_id=1), make_agreement(),
                                        OVERTIME, BONUSES, records, PERIOD)
        earnings = settlement.earnings
        assert earnings.total == earnings.base_salary + earnings.overtime + earnings.bonuses
        assert settlement.total_deductions == sum(line.amount for line in settlement.deductions.lines)
        assert settlement.net_pay == settlement.gross_pay - settlement.total_deductions

    def test_same_inputs_same_result(self):
        first = compute_settlement(make_employee(agreement_id=1), make_agreement(), OVERTIME, BONUSES, [], PERIOD)
        second = compute_settlement(make_employee(agreement_id=1), make_agreement(), OVERTIME, BONUSES, [], PERIOD)
        assert first == second

    def test_to_dict(self):
        settlement = compute_settlement(make_employee(agreement_id=1), make_agreement(), OVERTIME, BONUSES, [], PERIOD)
        data = settlement.to_dict()
        assert data['periodo'] == "2025-03"
        assert data['empleado']['legajo'] == "EMP-001"
        assert Decimal(data['haberes']['total']) == Decimal('326750')
        assert data['descuentos']['detalle'][0]['porcentaje'] == "11"
        assert Decimal(data['neto_a_pagar']) == Decimal('269568.75')


@pytest.mark.parametrize("record", [
    lambda: OvertimeRecord(multiplier=Decimal('0.5'), quantity=Decimal('1'), date=date(2025, 3, 1)),
    lambda: OvertimeRecord(multiplier=Decimal('1.5'), quantity=Decimal('-1'), date=date(2025, 3, 1)),
    lambda: BonusRecord(amount=Decimal('-1'), date=date(2025, 3, 1)),
    lambda: DeductionRecord(amount=Decimal('-1'), date=date(2025, 3, 1), deduction_type="fijo"),
])
def test_invalid_records(record):
    with pytest.raises(ValidationError):
        record()
