import openpyxl
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from pathlib import Path
from typing import Optional
from models.payslip import Payslip
from utils.formatters import format_date, format_percentage, to_cents
from config.settings import OUTPUT_DIR, COMPANY_NAME, COMPANY_TAX_ID, COMPANY_ADDRESS, CURRENCY_SYMBOL

MONEY_FORMAT = '#,##0.00'


class PayslipGenerator:
    """Generate individual pay slip (recibo) Excel files"""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "recibos"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(self, payslip: Payslip) -> str:
        """Generate pay slip Excel file"""
        settlement = payslip.settlement
        earnings = settlement.earnings

        # Create workbook
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Recibo"

        # Set column widths
        ws.column_dimensions['A'].width = 32
        ws.column_dimensions['B'].width = 14
        ws.column_dimensions['C'].width = 14
        ws.column_dimensions['D'].width = 16
        ws.column_dimensions['E'].width = 18

        # Define styles
        header_font = Font(bold=True, size=14, color="FFFFFF")
        header_fill = PatternFill(start_color="1F2833", end_color="1F2833", fill_type="solid")
        table_fill = PatternFill(start_color="D8D8D8", end_color="D8D8D8", fill_type="solid")
        bold_font = Font(bold=True)
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        # Header section
        ws.merge_cells('A1:E1')
        ws['A1'] = "RECIBO DE SUELDO"
        ws['A1'].font = header_font
        ws['A1'].fill = header_fill
        ws['A1'].alignment = Alignment(horizontal='left', vertical='center')
        ws['A2'] = COMPANY_NAME
        ws['A3'] = f"CUIT: {COMPANY_TAX_ID}"
        ws['A4'] = f"Domicilio: {COMPANY_ADDRESS}"

        # Employee section
        row = 6
        ws[f'A{row}'] = "Datos del Empleado"
        ws[f'A{row}'].font = bold_font
        employee_fields = [
            ("Nombre", payslip.display_name),
            ("Legajo", payslip.badge_id),
            ("DNI", payslip.national_id or ""),
            ("Fecha de ingreso", format_date(payslip.hire_date) if payslip.hire_date else ""),
            ("Convenio", payslip.agreement_name or "Sin convenio"),
            ("Período", str(settlement.period)),
            ("Fecha de emisión", format_date(payslip.issue_date)),
        ]
        for label, value in employee_fields:
            row += 1
            ws[f'A{row}'] = label
            ws[f'B{row}'] = value

        # Earnings table
        row += 2
        ws[f'A{row}'] = "Haberes"
        ws[f'A{row}'].font = bold_font
        row += 1
        row = self._table_header(ws, row, ["Concepto", "Cantidad", "Multiplicador", "Valor unitario", "Monto"],
                                 bold_font, table_fill, thin_border)

        row = self._money_row(ws, row, "Salario Básico", earnings.base_salary, thin_border)
        for line in earnings.overtime_lines:
            ws[f'B{row}'] = float(line.quantity)
            ws[f'C{row}'] = float(line.multiplier)
            ws[f'D{row}'] = float(to_cents(line.unit_value))
            ws[f'D{row}'].number_format = MONEY_FORMAT
            row = self._money_row(ws, row, f"Horas Extras {line.type_label}".strip(), line.total, thin_border)
        for line in earnings.bonus_lines:
            row = self._money_row(ws, row, line.description, line.amount, thin_border)
        row = self._money_row(ws, row, "TOTAL HABERES", earnings.total, thin_border, bold_font)

        # Deductions table
        row += 1
        ws[f'A{row}'] = "Descuentos"
        ws[f'A{row}'].font = bold_font
        row += 1
        row = self._table_header(ws, row, ["Concepto", "Porcentaje", "", "", "Monto"],
                                 bold_font, table_fill, thin_border)
        for line in settlement.deductions.lines:
            if line.rate is not None:
                ws[f'B{row}'] = format_percentage(line.rate)
            row = self._money_row(ws, row, line.concept, line.amount, thin_border)
        row = self._money_row(ws, row, "TOTAL DESCUENTOS", settlement.deductions.total, thin_border, bold_font)

        # Net pay
        row += 1
        ws[f'A{row}'] = "NETO A COBRAR"
        ws[f'A{row}'].font = Font(bold=True, size=14)
        ws[f'E{row}'] = f"{CURRENCY_SYMBOL} {to_cents(settlement.net_pay):,.2f}"
        ws[f'E{row}'].font = Font(bold=True, size=14)

        # Signatures
        row += 3
        ws[f'A{row}'] = "Firma del Empleador"
        ws[f'D{row}'] = "Firma del Empleado"

        # Generate filename
        filepath = self.output_dir / f"{payslip.filename_stem}.xlsx"

        # Save workbook
        wb.save(filepath)

        return str(filepath)

    def _table_header(self, ws, row, headers, bold_font, fill, border) -> int:
        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=row, column=col_idx)
            cell.value = header
            cell.font = bold_font
            cell.fill = fill
            cell.border = border
        return row + 1

    def _money_row(self, ws, row, concept, amount, border, font=None) -> int:
        ws[f'A{row}'] = concept
        ws[f'E{row}'] = float(to_cents(amount))
        ws[f'E{row}'].number_format = MONEY_FORMAT
        for col in range(1, 6):
            ws.cell(row=row, column=col).border = border
        if font:
            ws[f'A{row}'].font = font
            ws[f'E{row}'].font = font
        return row + 1
