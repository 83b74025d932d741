from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from models.settlement import Settlement


@dataclass(frozen=True)
class Payslip:
    """Pay slip (recibo): a settlement plus the employee's display fields"""
    badge_id: str
    first_name: str
    last_name: str
    settlement: Settlement
    issue_date: date
    national_id: Optional[str] = None
    hire_date: Optional[date] = None
    agreement_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    @property
    def filename_stem(self) -> str:
        return f"recibo_{self.badge_id}_{self.settlement.period}"

    def to_dict(self) -> Dict[str, Any]:
        detail = self.settlement.to_dict()
        return {
            'empleado': {
                'legajo': self.badge_id,
                'nombre': self.first_name,
                'apellido': self.last_name,
                'dni': self.national_id,
                'fecha_ingreso': self.hire_date.isoformat() if self.hire_date else None,
                'convenio': self.agreement_name,
            },
            'periodo': detail['periodo'],
            'fecha_emision': self.issue_date.isoformat(),
            'haberes': detail['haberes'],
            'descuentos': detail['descuentos'],
            'neto_a_pagar': detail['neto_a_pagar'],
            'detalle_completo': detail,
        }
