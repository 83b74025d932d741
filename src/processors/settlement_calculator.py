from decimal import Decimal
from typing import Iterable, List, Optional

from models.activity import BonusRecord, DeductionRecord, OvertimeRecord
from models.employee import Agreement, Employee
from models.errors import NotFoundError
from models.period import Period
from models.settlement import (
    PERCENTAGE_KIND, BonusLine, DeductionLine, Deductions, Earnings,
    EmployeeSnapshot, OvertimeLine, Settlement
)

DEFAULT_BONUS_CONCEPT = 'Adicional'
DEFAULT_DEDUCTION_CONCEPT = 'Descuento adicional'


def compute_settlement(employee: Optional[Employee],
                       agreement: Optional[Agreement],
                       overtime_records: Iterable[OvertimeRecord],
                       bonus_records: Iterable[BonusRecord],
                       deduction_records: Iterable[DeductionRecord],
                       period: Period) -> Settlement:
    """
    Compute the settlement (liquidación) of one employee for one period.

    Records are expected to be already filtered to the employee and period.
    Statutory contributions are a percentage of gross pay and are only added
    when the employee has an agreement; explicit deductions follow them in
    the order given. Amounts are exact Decimals, rounding is left to
    whoever presents or stores the result. Net pay is not clamped at zero.
    """
    if employee is None:
        raise NotFoundError("Employee", None)

    base_salary = Decimal(employee.base_salary)

    # Earnings (haberes)
    overtime_lines: List[OvertimeLine] = []
    total_overtime = Decimal('0')
    for record in overtime_records:
        unit_value = record.unit_value(base_salary)
        line_total = unit_value * record.quantity
        total_overtime += line_total
        overtime_lines.append(OvertimeLine(
            type_label=record.type_label,
            quantity=record.quantity,
            multiplier=record.multiplier,
            unit_value=unit_value,
            total=line_total
        ))

    bonus_lines: List[BonusLine] = []
    total_bonuses = Decimal('0')
    for record in bonus_records:
        total_bonuses += record.amount
        bonus_lines.append(BonusLine(
            description=record.description or DEFAULT_BONUS_CONCEPT,
            amount=record.amount
        ))

    gross_pay = base_salary + total_overtime + total_bonuses

    # Deductions (descuentos)
    deduction_lines: List[DeductionLine] = []
    total_deductions = Decimal('0')
    if agreement is not None:
        for contribution in agreement.contributions:
            amount = gross_pay * (contribution.rate / Decimal('100'))
            total_deductions += amount
            deduction_lines.append(DeductionLine(
                concept=contribution.label,
                kind=PERCENTAGE_KIND,
                amount=amount,
                rate=contribution.rate
            ))

    for record in deduction_records:
        total_deductions += record.amount
        deduction_lines.append(DeductionLine(
            concept=record.description or DEFAULT_DEDUCTION_CONCEPT,
            kind=record.deduction_type,
            amount=record.amount
        ))

    net_pay = gross_pay - total_deductions

    return Settlement(
        employee=EmployeeSnapshot(
            employee_id=employee.employee_id,
            badge_id=employee.badge_id,
            first_name=employee.first_name,
            last_name=employee.last_name
        ),
        period=period,
        base_salary=base_salary,
        earnings=Earnings(
            base_salary=base_salary,
            overtime=total_overtime,
            bonuses=total_bonuses,
            total=gross_pay,
            overtime_lines=tuple(overtime_lines),
            bonus_lines=tuple(bonus_lines)
        ),
        deductions=Deductions(total=total_deductions, lines=tuple(deduction_lines)),
        net_pay=net_pay
    )
