import logging
from datetime import date
from typing import List, Optional, Union

from database.models import SettlementDB
from database.repository import PayrollRepository
from models.employee import Employee
from models.payslip import Payslip
from models.period import Period
from models.settlement import Settlement
from processors.settlement_calculator import compute_settlement

logger = logging.getLogger(__name__)


class SettlementService:
    """Resolve an employee's catalog data and period activity, then settle"""

    def __init__(self, repository: PayrollRepository):
        self.repo = repository

    def calculate(self, employee_id: int, period: Union[Period, str]) -> Settlement:
        """Compute the settlement without storing it"""
        period = self._period(period)
        employee = self.repo.load_employee(employee_id)
        return self.settle(employee, period)

    def save(self, employee_id: int, period: Union[Period, str]) -> SettlementDB:
        """Compute and append the settlement to the employee's history"""
        settlement = self.calculate(employee_id, period)
        return self.repo.save_settlement(settlement)

    def history(self, employee_id: int) -> List[SettlementDB]:
        self.repo.load_employee(employee_id)
        return self.repo.get_settlements(employee_id)

    def payslip(self, employee_id: int, period: Union[Period, str],
                issue_date: Optional[date] = None) -> Payslip:
        """Settlement plus the employee's display fields"""
        period = self._period(period)
        employee = self.repo.load_employee(employee_id)
        settlement = self.settle(employee, period)
        return Payslip(
            badge_id=employee.badge_id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            settlement=settlement,
            issue_date=issue_date or date.today(),
            national_id=employee.national_id,
            hire_date=employee.hire_date,
            agreement_name=employee.agreement_name
        )

    def settle(self, employee: Employee, period: Period) -> Settlement:
        """Settle an already loaded employee"""
        agreement = None
        if employee.agreement_id is not None:
            agreement = self.repo.resolve_agreement(employee.agreement_id)

        settlement = compute_settlement(
            employee,
            agreement,
            self.repo.get_overtime_records(employee.employee_id, period),
            self.repo.get_bonus_records(employee.employee_id, period),
            self.repo.get_deduction_records(employee.employee_id, period),
            period
        )
        logger.debug("Settled %s for %s: net %s", employee.badge_id, period, settlement.net_pay)
        return settlement

    @staticmethod
    def _period(period: Union[Period, str]) -> Period:
        return period if isinstance(period, Period) else Period.parse(period)
