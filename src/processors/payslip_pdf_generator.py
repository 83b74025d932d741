import io
from pathlib import Path
from typing import List, Optional
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from models.payslip import Payslip
from utils.formatters import format_currency, format_date
from config.settings import OUTPUT_DIR, COMPANY_NAME, COMPANY_TAX_ID, COMPANY_ADDRESS

LEGAL_NOTE = (
    "Este recibo se emite de acuerdo a la Ley de Contrato de Trabajo N° 20.744. "
    "El trabajador declara haber recibido las sumas indicadas y los descuentos practicados."
)


class PayslipPDFGenerator:
    """Render a pay slip (recibo de sueldo) as PDF"""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "recibos"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(self, payslip: Payslip) -> str:
        """Write the PDF to the output directory and return its path"""
        filepath = self.output_dir / f"{payslip.filename_stem}.pdf"
        filepath.write_bytes(self.render(payslip))
        return str(filepath)

    def render(self, payslip: Payslip) -> bytes:
        """PDF document as bytes"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=2*cm, leftMargin=2*cm,
                                topMargin=1.5*cm, bottomMargin=1.5*cm)

        # Styles
        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'ReciboTitle',
            parent=styles['Heading1'],
            fontSize=18,
            textColor=colors.white,
            alignment=TA_LEFT
        )
        company_style = ParagraphStyle(
            'ReciboCompany',
            parent=styles['Normal'],
            fontSize=10,
            textColor=colors.white
        )
        heading_style = ParagraphStyle(
            'ReciboHeading',
            parent=styles['Heading2'],
            fontSize=12,
            spaceAfter=8
        )
        net_style = ParagraphStyle(
            'ReciboNet',
            parent=styles['Heading2'],
            fontSize=14,
            textColor=colors.HexColor("#0B5ED7")
        )
        normal_style = styles['Normal']
        small_style = ParagraphStyle('ReciboSmall', parent=normal_style, fontSize=8)

        settlement = payslip.settlement
        earnings = settlement.earnings

        story = []

        # Header band
        header = Table(
            [[Paragraph("RECIBO DE SUELDO", title_style)],
             [Paragraph(COMPANY_NAME, company_style)],
             [Paragraph(f"CUIT: {COMPANY_TAX_ID}", company_style)],
             [Paragraph(f"Domicilio: {COMPANY_ADDRESS}", company_style)]],
            colWidths=[17*cm]
        )
        header.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor("#1F2833")),
            ('LEFTPADDING', (0, 0), (-1, -1), 10),
        ]))
        story.append(header)
        story.append(Spacer(1, 20))

        # Employee data
        story.append(Paragraph("Datos del Empleado", heading_style))
        story.append(Paragraph(f"<b>Nombre:</b> {payslip.display_name}", normal_style))
        story.append(Paragraph(f"<b>Legajo:</b> {payslip.badge_id}", normal_style))
        story.append(Paragraph(f"<b>DNI:</b> {payslip.national_id or '-'}", normal_style))
        story.append(Paragraph(f"<b>Convenio:</b> {payslip.agreement_name or 'Sin convenio'}", normal_style))
        story.append(Paragraph(f"<b>Período:</b> {settlement.period}", normal_style))
        story.append(Paragraph(f"<b>Fecha de emisión:</b> {format_date(payslip.issue_date)}", normal_style))
        story.append(Spacer(1, 16))

        # Earnings
        story.append(Paragraph("Haberes", heading_style))
        earning_rows = [
            ["Concepto", "Monto"],
            ["Salario Básico", format_currency(earnings.base_salary)],
            ["Horas Extras", format_currency(earnings.overtime)],
            ["Adicionales", format_currency(earnings.bonuses)],
            ["TOTAL HABERES", format_currency(earnings.total)],
        ]
        story.append(self._table(earning_rows))
        story.append(Spacer(1, 16))

        # Deductions
        story.append(Paragraph("Descuentos", heading_style))
        deduction_rows = [["Concepto", "Monto"]]
        for line in settlement.deductions.lines:
            deduction_rows.append([line.concept, format_currency(line.amount)])
        deduction_rows.append(["TOTAL DESCUENTOS", format_currency(settlement.deductions.total)])
        story.append(self._table(deduction_rows))
        story.append(Spacer(1, 20))

        # Net pay
        story.append(Paragraph(f"NETO A COBRAR: {format_currency(settlement.net_pay)}", net_style))
        story.append(Spacer(1, 40))

        # Signatures
        signatures = Table(
            [["", "", ""], ["Firma del Empleador", "", "Firma del Empleado"]],
            colWidths=[6.5*cm, 4*cm, 6.5*cm]
        )
        signatures.setStyle(TableStyle([
            ('LINEABOVE', (0, 1), (0, 1), 1, colors.black),
            ('LINEABOVE', (2, 1), (2, 1), 1, colors.black),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
        ]))
        story.append(signatures)
        story.append(Spacer(1, 20))

        # Legal note
        story.append(Paragraph(LEGAL_NOTE, small_style))

        doc.build(story)

        pdf_bytes = buffer.getvalue()
        buffer.close()
        return pdf_bytes

    def _table(self, rows: List[List[str]]) -> Table:
        """Concept/amount table with shaded header"""
        table = Table(rows, colWidths=[12*cm, 5*cm])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor("#D8D8D8")),
            ('BACKGROUND', (0, 1), (-1, -1), colors.HexColor("#F5F5F5")),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -2), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        return table
