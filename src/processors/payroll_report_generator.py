import openpyxl
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from pathlib import Path
from typing import Optional
from models.report import PayrollReport
from utils.formatters import to_cents
from config.settings import OUTPUT_DIR, COMPANY_NAME


class PayrollReportGenerator:
    """Generate the payroll report (nómina) spreadsheet for a period"""

    HEADERS = [
        'Legajo', 'Apellido y Nombre', 'DNI', 'Salario Básico', 'Horas Extras',
        'Adicionales', 'Total Haberes', 'Total Descuentos', 'Neto a Pagar'
    ]

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "nomina"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(self, report: PayrollReport) -> str:
        """Generate payroll report workbook"""

        # Create workbook
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = f"Nómina {report.period}"

        # Define styles
        bold_font = Font(bold=True)
        header_fill = PatternFill(start_color="B4C7E7", end_color="B4C7E7", fill_type="solid")
        yellow_fill = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        # Title rows
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(self.HEADERS))
        ws['A1'] = f"{COMPANY_NAME} - Nómina del período {report.period}"
        ws['A1'].font = Font(bold=True, size=12)
        ws['A2'] = f"Generado: {report.generated_at.strftime('%d/%m/%Y %H:%M')}"
        ws['A2'].font = Font(italic=True)

        # Column headers
        header_row = 4
        for col_idx, header in enumerate(self.HEADERS, start=1):
            cell = ws.cell(row=header_row, column=col_idx)
            cell.value = header
            cell.font = bold_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

        # Data rows
        row = header_row + 1
        for report_row in report.rows:
            values = [
                report_row.badge_id,
                report_row.display_name,
                report_row.national_id or "",
                float(to_cents(report_row.base_salary)),
                float(to_cents(report_row.overtime_total)),
                float(to_cents(report_row.bonus_total)),
                float(to_cents(report_row.gross_total)),
                float(to_cents(report_row.deduction_total)),
                float(to_cents(report_row.net_pay)),
            ]
            for col_idx, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col_idx)
                cell.value = value
                cell.border = thin_border
                if col_idx >= 4:
                    cell.number_format = '#,##0.00'
            row += 1

        # Totals row
        ws[f'A{row}'] = "TOTAL"
        ws[f'A{row}'].font = bold_font
        ws[f'B{row}'] = f"{report.total_employees} empleados"
        ws[f'I{row}'] = float(to_cents(report.total_net_pay))
        ws[f'I{row}'].number_format = '#,##0.00'
        ws[f'I{row}'].fill = yellow_fill
        ws[f'I{row}'].font = bold_font
        for col in range(1, len(self.HEADERS) + 1):
            ws.cell(row=row, column=col).border = thin_border

        # Failures sheet
        if report.failures:
            errors_ws = wb.create_sheet("Errores")
            for col_idx, header in enumerate(['Empleado', 'Tipo', 'Detalle'], start=1):
                cell = errors_ws.cell(row=1, column=col_idx)
                cell.value = header
                cell.font = bold_font
                cell.fill = header_fill
            for idx, failure in enumerate(report.failures, start=2):
                errors_ws[f'A{idx}'] = failure.employee_ref
                errors_ws[f'B{idx}'] = failure.kind
                errors_ws[f'C{idx}'] = failure.message
            errors_ws.column_dimensions['A'].width = 15
            errors_ws.column_dimensions['B'].width = 15
            errors_ws.column_dimensions['C'].width = 60

        # Set column widths
        col_widths = {'A': 12, 'B': 28, 'C': 13, 'D': 15, 'E': 14, 'F': 14, 'G': 15, 'H': 16, 'I': 15}
        for col, width in col_widths.items():
            ws.column_dimensions[col].width = width

        # Generate filename
        filepath = self.output_dir / f"nomina_{report.period}.xlsx"

        # Save workbook
        wb.save(filepath)

        return str(filepath)
