from .settlement_calculator import compute_settlement
from .settlement_service import SettlementService
from .payroll_report import PayrollReportBuilder, compute_report
from .payslip_generator import PayslipGenerator
from .payslip_pdf_generator import PayslipPDFGenerator
from .payroll_report_generator import PayrollReportGenerator


__all__ = [
    'compute_settlement',
    'SettlementService',
    'PayrollReportBuilder',
    'compute_report',
    'PayslipGenerator',
    'PayslipPDFGenerator',
    'PayrollReportGenerator'
]
