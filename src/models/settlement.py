from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from models.period import Period

PERCENTAGE_KIND = 'percentage'


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Employee identity as it was when the settlement was computed"""
    employee_id: int
    badge_id: str
    first_name: str
    last_name: str

    @property
    def display_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"


@dataclass(frozen=True)
class OvertimeLine:
    type_label: str
    quantity: Decimal
    multiplier: Decimal
    unit_value: Decimal
    total: Decimal


@dataclass(frozen=True)
class BonusLine:
    description: str
    amount: Decimal


@dataclass(frozen=True)
class DeductionLine:
    """One deduction on the slip, statutory (percentage) or explicit"""
    concept: str
    kind: str
    amount: Decimal
    rate: Optional[Decimal] = None

    @property
    def is_statutory(self) -> bool:
        return self.kind == PERCENTAGE_KIND


@dataclass(frozen=True)
class Earnings:
    """Gross pay breakdown (haberes)"""
    base_salary: Decimal
    overtime: Decimal
    bonuses: Decimal
    total: Decimal
    overtime_lines: Tuple[OvertimeLine, ...] = ()
    bonus_lines: Tuple[BonusLine, ...] = ()


@dataclass(frozen=True)
class Deductions:
    """Deduction breakdown (descuentos)"""
    total: Decimal
    lines: Tuple[DeductionLine, ...] = ()

    @property
    def statutory_lines(self) -> List[DeductionLine]:
        return [line for line in self.lines if line.is_statutory]


@dataclass(frozen=True)
class Settlement:
    """Computed pay result for one employee in one period (liquidación)"""
    employee: EmployeeSnapshot
    period: Period
    base_salary: Decimal
    earnings: Earnings
    deductions: Deductions
    net_pay: Decimal

    @property
    def gross_pay(self) -> Decimal:
        return self.earnings.total

    @property
    def total_deductions(self) -> Decimal:
        return self.deductions.total

    def to_dict(self) -> Dict[str, Any]:
        """Nested record for persistence and the JSON API"""
        return {
            'empleado': {
                'id': self.employee.employee_id,
                'legajo': self.employee.badge_id,
                'nombre': self.employee.first_name,
                'apellido': self.employee.last_name,
            },
            'periodo': str(self.period),
            'salario_base': str(self.base_salary),
            'haberes': {
                'salario_base': str(self.earnings.base_salary),
                'horas_extras': str(self.earnings.overtime),
                'adicionales': str(self.earnings.bonuses),
                'total': str(self.earnings.total),
                'detalle_horas_extras': [
                    {
                        'tipo': line.type_label,
                        'cantidad': str(line.quantity),
                        'multiplicador': str(line.multiplier),
                        'valor_unitario': str(line.unit_value),
                        'total': str(line.total),
                    }
                    for line in self.earnings.overtime_lines
                ],
                'detalle_adicionales': [
                    {'concepto': line.description, 'monto': str(line.amount)}
                    for line in self.earnings.bonus_lines
                ],
            },
            'descuentos': {
                'total': str(self.deductions.total),
                'detalle': [_deduction_line_dict(line) for line in self.deductions.lines],
            },
            'neto_a_pagar': str(self.net_pay),
        }


def _deduction_line_dict(line: DeductionLine) -> Dict[str, Any]:
    data = {'concepto': line.concept, 'tipo': line.kind, 'monto': str(line.amount)}
    if line.rate is not None:
        data['porcentaje'] = str(line.rate)
    return data
