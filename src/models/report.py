from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from models.period import Period
from models.settlement import Settlement


@dataclass(frozen=True)
class ReportRow:
    """Per-employee summary row of the payroll report"""
    badge_id: str
    display_name: str
    base_salary: Decimal
    overtime_total: Decimal
    bonus_total: Decimal
    gross_total: Decimal
    deduction_total: Decimal
    net_pay: Decimal
    national_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'legajo': self.badge_id,
            'nombre': self.display_name,
            'dni': self.national_id,
            'salario_base': str(self.base_salary),
            'horas_extras': str(self.overtime_total),
            'adicionales': str(self.bonus_total),
            'total_haberes': str(self.gross_total),
            'total_descuentos': str(self.deduction_total),
            'neto_a_pagar': str(self.net_pay),
        }


@dataclass(frozen=True)
class EmployeeFailure:
    """Structured diagnostic for an employee left out of a report"""
    employee_ref: str
    kind: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {'empleado': self.employee_ref, 'tipo': self.kind, 'mensaje': self.message}


@dataclass(frozen=True)
class EmployeeResult:
    """Outcome of one employee's settlement inside a batch"""
    employee_ref: str
    display_name: str = ''
    national_id: Optional[str] = None
    settlement: Optional[Settlement] = None
    failure: Optional[EmployeeFailure] = None

    @property
    def ok(self) -> bool:
        return self.settlement is not None and self.failure is None


@dataclass
class PayrollReport:
    """Payroll-wide report (nómina) for a period"""
    period: Period
    generated_at: datetime
    rows: List[ReportRow] = field(default_factory=list)
    failures: List[EmployeeFailure] = field(default_factory=list)
    total_net_pay: Decimal = Decimal('0')

    @property
    def total_employees(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'periodo': str(self.period),
            'fecha_generacion': self.generated_at.isoformat(),
            'total_empleados': self.total_employees,
            'total_nomina': str(self.total_net_pay),
            'empleados': [row.to_dict() for row in self.rows],
            'errores': [failure.to_dict() for failure in self.failures],
        }
