from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import openpyxl
import pytest

from models.activity import BonusRecord, DeductionRecord, OvertimeRecord
from models.employee import Agreement, Contribution, Employee
from models.payslip import Payslip
from models.period import Period
from models.report import EmployeeFailure, EmployeeResult
from processors.payroll_report import compute_report
from processors.payroll_report_generator import PayrollReportGenerator
from processors.payslip_generator import PayslipGenerator
from processors.payslip_pdf_generator import PayslipPDFGenerator
from processors.settlement_calculator import compute_settlement
from utils.formatters import format_currency, format_percentage, to_cents

PERIOD = Period(2025, 3)


@pytest.fixture
def settlement():
    employee = Employee(employee_id=1, badge_id="EMP-001", first_name="Juan", last_name="Pérez",
                        base_salary=Decimal('300000.00'), agreement_id=1)
    agreement = Agreement(agreement_id=1, name="Empleados de Comercio", contributions=[
        Contribution("Aporte Jubilación", Decimal('11')),
        Contribution("Aporte Obra Social", Decimal('3')),
        Contribution("Aporte Sindical", Decimal('2')),
        Contribution("Aporte PAMI", Decimal('1.5')),
    ])
    return compute_settlement(
        employee,
        agreement,
        [OvertimeRecord(Decimal('1.5'), Decimal('10'), date(2025, 3, 10), "Horas extras al 50%")],
        [BonusRecord(Decimal('8000'), date(2025, 3, 31), "Presentismo")],
        [DeductionRecord(Decimal('5000'), date(2025, 3, 5), "fijo", "Adelanto de sueldo")],
        PERIOD
    )


@pytest.fixture
def payslip(settlement):
    return Payslip(
        badge_id="EMP-001",
        first_name="Juan",
        last_name="Pérez",
        settlement=settlement,
        issue_date=date(2025, 4, 1),
        national_id="12345678",
        hire_date=date(2020, 1, 15),
        agreement_name="Empleados de Comercio"
    )


def cell_values(ws):
    return [cell.value for row in ws.iter_rows() for cell in row if cell.value is not None]


class TestPayslipGenerator:

    def test_generate_xlsx(self, payslip, tmp_path):
        filepath = PayslipGenerator(output_dir=tmp_path).generate(payslip)

        assert Path(filepath).name == "recibo_EMP-001_2025-03.xlsx"
        ws = openpyxl.load_workbook(filepath).active
        values = cell_values(ws)
        assert ws['A1'].value == "RECIBO DE SUELDO"
        assert "Pérez, Juan" in values
        assert "Aporte Jubilación" in values
        assert "Adelanto de sueldo" in values
        assert "TOTAL HABERES" in values
        assert 326750.0 in values
        assert "NETO A COBRAR" in values


class TestPayslipPDFGenerator:

    def test_render(self, payslip):
        pdf_bytes = PayslipPDFGenerator().render(payslip)
        assert pdf_bytes.startswith(b'%PDF')

    def test_generate_writes_file(self, payslip, tmp_path):
        filepath = PayslipPDFGenerator(output_dir=tmp_path).generate(payslip)
        assert Path(filepath) == tmp_path / "recibo_EMP-001_2025-03.pdf"
        assert Path(filepath).read_bytes().startswith(b'%PDF')


class TestPayrollReportGenerator:

    def test_generate(self, settlement, tmp_path):
        results = [
            EmployeeResult(employee_ref="EMP-001", display_name="Pérez, Juan",
                           national_id="12345678", settlement=settlement),
            EmployeeResult(employee_ref="EMP-002",
                           failure=EmployeeFailure("EMP-002", 'not_found', "Agreement 7 not found")),
        ]
        report = compute_report(results, PERIOD, generated_at=datetime(2025, 4, 1, 9, 30))

        filepath = PayrollReportGenerator(output_dir=tmp_path).generate(report)

        assert Path(filepath).name == "nomina_2025-03.xlsx"
        wb = openpyxl.load_workbook(filepath)
        ws = wb.worksheets[0]
        assert [cell.value for cell in ws[4]] == PayrollReportGenerator.HEADERS
        assert ws['A5'].value == "EMP-001"
        assert ws['B5'].value == "Pérez, Juan"
        assert ws['A6'].value == "TOTAL"
        assert ws['I6'].value == float(to_cents(settlement.net_pay))
        errors = wb["Errores"]
        assert errors['A2'].value == "EMP-002"
        assert errors['B2'].value == 'not_found'


def test_formatters():
    assert to_cents(Decimal('4901.245')) == Decimal('4901.25')
    assert format_currency(Decimal('269568.75')) == "$ 269,568.75"
    assert format_percentage(Decimal('1.5')) == "1.50%"
