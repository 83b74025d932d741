import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Union

from database.repository import PayrollRepository
from models.errors import NotFoundError, ValidationError
from models.period import Period
from models.report import EmployeeFailure, EmployeeResult, PayrollReport, ReportRow
from processors.settlement_service import SettlementService

logger = logging.getLogger(__name__)


def failure_kind(error: Exception) -> str:
    if isinstance(error, NotFoundError):
        return 'not_found'
    if isinstance(error, ValidationError):
        return 'validation'
    return 'error'


def compute_report(results: Iterable[EmployeeResult], period: Period,
                   generated_at: Optional[datetime] = None) -> PayrollReport:
    """
    Fold per-employee results into a payroll report.

    Failed employees only show up in ``failures``; rows are ordered by
    display name (then badge) whatever order the results came in, and the
    grand total is the sum of the included rows' net pay.
    """
    rows: List[ReportRow] = []
    failures: List[EmployeeFailure] = []

    for result in results:
        if not result.ok:
            failures.append(result.failure)
            continue
        settlement = result.settlement
        rows.append(ReportRow(
            badge_id=settlement.employee.badge_id,
            display_name=result.display_name or settlement.employee.display_name,
            national_id=result.national_id,
            base_salary=settlement.base_salary,
            overtime_total=settlement.earnings.overtime,
            bonus_total=settlement.earnings.bonuses,
            gross_total=settlement.gross_pay,
            deduction_total=settlement.total_deductions,
            net_pay=settlement.net_pay
        ))

    rows.sort(key=lambda row: (row.display_name, row.badge_id))
    total = sum((row.net_pay for row in rows), Decimal('0'))

    return PayrollReport(
        period=period,
        generated_at=generated_at or datetime.now(),
        rows=rows,
        failures=failures,
        total_net_pay=total
    )


class PayrollReportBuilder:
    """Build the payroll report (nómina) of a period"""

    def __init__(self, repository: PayrollRepository, service: Optional[SettlementService] = None):
        self.repo = repository
        self.service = service or SettlementService(repository)

    def build(self, period: Union[Period, str]) -> PayrollReport:
        """Report over all active employees"""
        period = self._period(period)
        employee_ids = [employee.id for employee in self.repo.get_active_employees()]
        results = [self._settle_one(employee_id, period) for employee_id in employee_ids]
        report = compute_report(results, period)
        logger.info("Payroll report %s: %d employees, %d failures, total %s",
                    period, report.total_employees, len(report.failures), report.total_net_pay)
        return report

    def build_for_employees(self, period: Union[Period, str], employee_ids: Iterable[int]) -> PayrollReport:
        """Report over a selection of employees; unknown ids are skipped"""
        period = self._period(period)
        results = [self._settle_one(employee_id, period) for employee_id in employee_ids]
        return compute_report(results, period)

    def _settle_one(self, employee_id: int, period: Period) -> EmployeeResult:
        employee_ref = str(employee_id)
        employee = None
        try:
            employee = self.repo.load_employee(employee_id)
            employee_ref = employee.badge_id
            settlement = self.service.settle(employee, period)
        except Exception as e:
            if employee is None and isinstance(e, NotFoundError):
                logger.debug("Skipping unknown employee %s", employee_ref)
            else:
                logger.warning("Error calculating settlement for employee %s: %s",
                               employee_ref, e, exc_info=True)
            self.repo.rollback()
            return EmployeeResult(
                employee_ref=employee_ref,
                failure=EmployeeFailure(employee_ref, failure_kind(e), str(e))
            )
        return EmployeeResult(
            employee_ref=employee_ref,
            display_name=employee.display_name,
            national_id=employee.national_id,
            settlement=settlement
        )

    @staticmethod
    def _period(period: Union[Period, str]) -> Period:
        return period if isinstance(period, Period) else Period.parse(period)
