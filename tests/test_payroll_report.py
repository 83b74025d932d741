from datetime import datetime
from decimal import Decimal

from models.period import Period
from models.report import EmployeeFailure, EmployeeResult
from processors.payroll_report import PayrollReportBuilder, compute_report
from processors.settlement_calculator import compute_settlement
from models.employee import Employee


def add_employee(repo, badge_id, first_name, last_name, salary, agreement_id=None):
    return repo.create_employee(
        badge_id=badge_id,
        first_name=first_name,
        last_name=last_name,
        base_salary=Decimal(salary),
        agreement_id=agreement_id
    )


class TestPayrollReportBuilder:

    def test_failed_employee_is_left_out(self, repo, agreement):
        other = repo.create_agreement(name="Gastronómicos", number="389/04", retirement_rate=Decimal('11'))
        add_employee(repo, "EMP-001", "Juan", "Pérez", '300000', agreement.id)
        add_employee(repo, "EMP-002", "María", "Gómez", '280000', other.id)
        add_employee(repo, "EMP-003", "Carlos", "López", '250000')
        repo.deactivate_agreement(other.id)

        report = PayrollReportBuilder(repo).build("2025-03")

        assert report.total_employees == 2
        assert [row.badge_id for row in report.rows] == ["EMP-003", "EMP-001"]
        assert report.total_net_pay == Decimal('300000') * Decimal('0.825') + Decimal('250000')
        assert len(report.failures) == 1
        failure = report.failures[0]
        assert failure.employee_ref == "EMP-002"
        assert failure.kind == 'not_found'

    def test_rows_sorted_by_display_name(self, repo):
        add_employee(repo, "EMP-010", "Zoe", "Alvarez", '1000')
        add_employee(repo, "EMP-011", "Ana", "Alvarez", '2000')
        add_employee(repo, "EMP-012", "Bruno", "Acosta", '3000')

        report = PayrollReportBuilder(repo).build(Period(2025, 3))

        assert [row.display_name for row in report.rows] == [
            "Acosta, Bruno", "Alvarez, Ana", "Alvarez, Zoe"
        ]
        assert report.total_net_pay == Decimal('6000')
        assert report.failures == []

    def test_empty_payroll(self, repo):
        report = PayrollReportBuilder(repo).build("2025-03")
        assert report.rows == []
        assert report.total_employees == 0
        assert report.total_net_pay == 0

    def test_selected_employees_skip_unknown_ids(self, repo):
        first = add_employee(repo, "EMP-001", "Juan", "Pérez", '300000')
        add_employee(repo, "EMP-002", "María", "Gómez", '280000')

        report = PayrollReportBuilder(repo).build_for_employees("2025-03", [first.id, 999])

        assert [row.badge_id for row in report.rows] == ["EMP-001"]
        assert report.total_net_pay == Decimal('300000')
        assert [(f.employee_ref, f.kind) for f in report.failures] == [("999", 'not_found')]

    def test_selected_employees_with_unusable_ids(self, repo):
        first = add_employee(repo, "EMP-001", "Juan", "Pérez", '300000')

        report = PayrollReportBuilder(repo).build_for_employees("2025-03", [2 ** 70, first.id, [2]])

        assert [row.badge_id for row in report.rows] == ["EMP-001"]
        assert report.total_net_pay == Decimal('300000')
        assert [f.employee_ref for f in report.failures] == [str(2 ** 70), "[2]"]

    def test_to_dict(self, repo):
        add_employee(repo, "EMP-001", "Juan", "Pérez", '300000')
        data = PayrollReportBuilder(repo).build("2025-03").to_dict()
        assert data['periodo'] == "2025-03"
        assert data['total_empleados'] == 1
        assert Decimal(data['total_nomina']) == Decimal('300000')
        assert data['empleados'][0]['nombre'] == "Pérez, Juan"


def test_compute_report_total_ignores_input_order():
    period = Period(2025, 3)

    def result(badge_id, last_name, salary):
        employee = Employee(employee_id=1, badge_id=badge_id, first_name="X",
                            last_name=last_name, base_salary=Decimal(salary))
        return EmployeeResult(employee_ref=badge_id, display_name=employee.display_name,
                              settlement=compute_settlement(employee, None, [], [], [], period))

    failed = EmployeeResult(employee_ref="EMP-9", failure=EmployeeFailure("EMP-9", 'error', "boom"))
    results = [result("EMP-2", "Zapata", '0.10'), failed, result("EMP-1", "Arce", '0.20')]

    report = compute_report(results, period, generated_at=datetime(2025, 4, 1, 9, 0))
    reversed_report = compute_report(list(reversed(results)), period, generated_at=datetime(2025, 4, 1, 9, 0))

    assert [row.badge_id for row in report.rows] == ["EMP-1", "EMP-2"]
    assert report.rows == reversed_report.rows
    assert report.total_net_pay == Decimal('0.30')
    assert report.total_net_pay == reversed_report.total_net_pay
    assert report.failures[0].kind == 'error'
    assert report.to_dict()['fecha_generacion'] == "2025-04-01T09:00:00"
