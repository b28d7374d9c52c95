"""Relatórios: lista de presença (PDF/XLSX) e planejamento de evento (PDF).

Os dados que aparecem no documento são montados em `AttendanceReport`; a
codificação do arquivo fica com reportlab/openpyxl.
"""

import re
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

from eventus.services.attendance_service import count_presence
from eventus.utils.datetime_utils import format_long_date, format_timestamp, now_in_timezone

BRAND_COLOR = '#3DD4A7'
STATUS_PRESENT = 'Presente'
STATUS_ABSENT = 'Ausente'
ATTENDANCE_TITLE = 'Lista de Presença'
ATTENDANCE_HEADERS = ('Nome', 'Email', 'Status')


@dataclass(frozen=True)
class AttendanceReport:
    activity_name: str
    activity_date: str
    rows: Tuple[Tuple[str, str, str], ...]
    present_count: int
    absent_count: int
    title: str = ATTENDANCE_TITLE

    @property
    def summary_lines(self) -> List[str]:
        return [
            f"Total de Presentes: {self.present_count}",
            f"Total de Ausentes: {self.absent_count}",
        ]


def build_attendance_report(activity, participants) -> AttendanceReport:
    """Tabela e contagens que devem aparecer literalmente no documento.

    `participants` é o recorte a exportar (filtrado ou completo); as contagens
    são calculadas sobre esse mesmo recorte.
    """
    summary = count_presence(participants)
    rows = tuple(
        (p.user_name or '', p.email or '', STATUS_PRESENT if p.present else STATUS_ABSENT)
        for p in participants
    )
    return AttendanceReport(
        activity_name=activity.name or '',
        activity_date=format_long_date(activity.activity_date),
        rows=rows,
        present_count=summary.present_count,
        absent_count=summary.absent_count,
    )


def _paragraph(text, style):
    """Parágrafo com o texto escapado (reportlab interpreta marcação)."""
    from reportlab.platypus import Paragraph

    return Paragraph(escape(str(text)), style)


def slugify_filename(name: str) -> str:
    return re.sub(r'\s+', '-', (name or '').strip()).lower() or 'relatorio'


def _table_style(colors, TableStyle):
    return TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(BRAND_COLOR)),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, 0), 11),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 10),
        ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 1), (-1, -1), 10),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F3F4F6')]),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ])


def render_attendance_pdf(report: AttendanceReport) -> bytes:
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Spacer

    output = BytesIO()
    doc = SimpleDocTemplate(output, pagesize=A4, topMargin=30, bottomMargin=30,
                            title=report.title)
    styles = getSampleStyleSheet()
    elements = [
        _paragraph(report.title, styles['Heading1']),
        _paragraph(f"Atividade: {report.activity_name}", styles['Normal']),
        _paragraph(f"Data: {report.activity_date}", styles['Normal']),
        Spacer(1, 12),
    ]

    data = [list(ATTENDANCE_HEADERS)] + [list(row) for row in report.rows]
    table = Table(data, colWidths=[170, 220, 80], repeatRows=1)
    table.setStyle(_table_style(colors, TableStyle))
    elements.append(table)
    elements.append(Spacer(1, 12))

    for line in report.summary_lines:
        elements.append(_paragraph(line, styles['Normal']))

    doc.build(elements)
    return output.getvalue()


def render_attendance_xlsx(report: AttendanceReport) -> bytes:
    from openpyxl import Workbook
    from openpyxl.styles import Font, PatternFill, Alignment

    wb = Workbook()
    ws = wb.active
    ws.title = "Presença"

    ws.merge_cells('A1:C1')
    ws['A1'] = report.title
    ws['A1'].font = Font(bold=True, size=14)
    ws['A1'].alignment = Alignment(horizontal="center")
    ws['A2'] = f"Atividade: {report.activity_name}"
    ws['A3'] = f"Data: {report.activity_date}"

    header_fill = PatternFill(start_color=BRAND_COLOR.lstrip('#'),
                              end_color=BRAND_COLOR.lstrip('#'), fill_type="solid")
    header_row = 5
    for col, header in enumerate(ATTENDANCE_HEADERS, 1):
        cell = ws.cell(row=header_row, column=col, value=header)
        cell.font = Font(color="FFFFFF", bold=True)
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for idx, row in enumerate(report.rows, 1):
        for col, value in enumerate(row, 1):
            ws.cell(row=header_row + idx, column=col, value=value)

    summary_row = header_row + len(report.rows) + 2
    for offset, line in enumerate(report.summary_lines):
        cell = ws.cell(row=summary_row + offset, column=1, value=line)
        cell.font = Font(bold=True)

    ws.column_dimensions['A'].width = 35
    ws.column_dimensions['B'].width = 40
    ws.column_dimensions['C'].width = 14

    output = BytesIO()
    wb.save(output)
    return output.getvalue()


def page_label(page: int, total: int) -> str:
    return f"Página {page} de {total}"


def _numbered_canvas(draw_page_number):
    """Canvas que adia a emissão das páginas até o fim para conhecer o total."""
    from reportlab.pdfgen.canvas import Canvas

    class NumberedCanvas(Canvas):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self._saved_pages = []

        def showPage(self):
            self._saved_pages.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            total = len(self._saved_pages)
            for state in self._saved_pages:
                self.__dict__.update(state)
                draw_page_number(self, self._pageNumber, total)
                super().showPage()
            super().save()

    return NumberedCanvas


def render_event_plan_pdf(plan, brand: str = 'EVENTUS', generated_at=None,
                          app_timezone: Optional[str] = None) -> bytes:
    """PDF do planejamento: dados básicos, salas e equipe numeradas, rodapé com páginas."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.platypus import SimpleDocTemplate, Spacer, HRFlowable

    generated_at = generated_at or now_in_timezone(app_timezone or 'America/Sao_Paulo')
    footer_text = f"Gerado por Eventus em {format_timestamp(generated_at)}"

    output = BytesIO()
    doc = SimpleDocTemplate(output, pagesize=A4, topMargin=40, bottomMargin=50,
                            title=f"Planejamento - {plan.name}")
    styles = getSampleStyleSheet()
    brand_color = colors.HexColor(BRAND_COLOR)
    brand_style = ParagraphStyle('Brand', parent=styles['Title'], textColor=brand_color)
    title_style = ParagraphStyle('PlanTitle', parent=styles['Heading2'],
                                 textColor=brand_color, alignment=1)

    elements = [
        _paragraph(brand, brand_style),
        _paragraph("Planejamento de Evento", title_style),
        Spacer(1, 10),
        _paragraph(f"Nome do Planejamento: {plan.name}", styles['Normal']),
        _paragraph(f"Data do Evento: {format_long_date(plan.event_date)}", styles['Normal']),
        _paragraph(f"Quantidade de Microfones: {plan.microphones}", styles['Normal']),
        _paragraph(f"Quantidade de Projetores: {plan.projectors}", styles['Normal']),
        Spacer(1, 8),
        HRFlowable(width="100%", color=brand_color),
        Spacer(1, 8),
        _paragraph("Salas", styles['Heading3']),
    ]
    for index, room in enumerate(plan.room_list, 1):
        elements.append(_paragraph(f"{index}. {room}", styles['Normal']))

    elements.append(Spacer(1, 10))
    elements.append(_paragraph("Membros da Equipe", styles['Heading3']))
    for index, member in enumerate(plan.member_list, 1):
        elements.append(_paragraph(f"{index}. {member}", styles['Normal']))

    def _footer(canvas, document):
        canvas.saveState()
        canvas.setFont('Helvetica', 9)
        canvas.setFillColor(colors.grey)
        canvas.drawCentredString(document.pagesize[0] / 2.0, 30, footer_text)
        canvas.restoreState()

    def _page_number(canvas, page, total):
        # Desenhado no fechamento do documento, quando o total já é conhecido
        canvas.saveState()
        canvas.setFont('Helvetica', 9)
        canvas.setFillColor(colors.grey)
        canvas.drawCentredString(A4[0] / 2.0, 18, page_label(page, total))
        canvas.restoreState()

    doc.build(elements, onFirstPage=_footer, onLaterPages=_footer,
              canvasmaker=_numbered_canvas(_page_number))
    return output.getvalue()


def event_plan_filename(plan) -> str:
    return f"planejamento-{slugify_filename(plan.name)}.pdf"


def attendance_filename(report: AttendanceReport, extension: str) -> str:
    return f"lista_de_presenca-{slugify_filename(report.activity_name)}.{extension}"
