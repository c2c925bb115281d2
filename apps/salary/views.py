import calendar
import io
import logging

from django.http import HttpResponse
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from forgetrack.exceptions import ValidationError
from .records import check_period, money_str
from .reports import build_salary_report, build_salary_sheet

logger = logging.getLogger(__name__)

SHEET_HEADERS = [
    "Employee", "Type", "Present Days", "Work Total", "Base Pay", "Overtime Hours",
    "Overtime Amount", "Gross Pay", "Upad", "Loan Deduction", "Pending Loan", "Net Payable",
]


def period_from(params):
    month = params.get("month")
    year = params.get("year")
    if not month or not year:
        raise ValidationError("month and year are required.")
    return check_period(month, year)


def sheet_rows(reports):
    rows = []
    for r in reports:
        rows.append([
            r.rollup.employee_name,
            r.employment_type,
            r.present_days,
            r.month_total,
            r.base_pay,
            r.overtime_hours,
            r.overtime_amount,
            r.gross_pay,
            r.upad_amount,
            r.loan_deduction,
            r.pending_loan,
            r.net_payable,
        ])
    return rows


def wrapped(label, sep):
    parts = label.split()
    if len(parts) == 2:
        return f"{parts[0]}{sep}{parts[1]}"
    return label


class EmployeeSalaryAPIView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, employee_id):
        month, year = period_from(request.query_params)
        report = build_salary_report(employee_id, month, year)
        return Response(report.as_dict())


class SalarySheetAPIView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        month, year = period_from(request.query_params)
        reports = build_salary_sheet(month, year, employment_type=request.query_params.get("employment_type"))
        total = sum((r.net_payable for r in reports), 0)
        return Response({
            "month": month,
            "year": year,
            "reports": [r.as_dict() for r in reports],
            "totalNetPayable": money_str(total),
        })


class SalaryReportPDFAPIView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4, landscape
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

        month, year = period_from(request.query_params)
        reports = build_salary_sheet(month, year, employment_type=request.query_params.get("employment_type"))

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=landscape(A4), leftMargin=20, rightMargin=20, topMargin=20, bottomMargin=20)
        styles = getSampleStyleSheet()
        elements = [
            Paragraph(f"Salary report of month {calendar.month_name[month]} {year}", styles["Heading1"]),
            Spacer(1, 12),
        ]
        header_style = ParagraphStyle("HeaderCell", parent=styles["Normal"], alignment=1, fontName="Helvetica-Bold", fontSize=8, leading=9)
        table_data = [[Paragraph(wrapped(h, "<br/>"), header_style) for h in SHEET_HEADERS]]
        for row in sheet_rows(reports):
            table_data.append([str(value) for value in row])
        col_widths = [110, 55, 45, 60, 60, 50, 60, 60, 55, 60, 60, 65]
        table = Table(table_data, repeatRows=1, colWidths=col_widths)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("ALIGN", (0, 0), (-1, -1), "LEFT"),
            ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
        ]))
        elements.append(table)
        doc.build(elements)
        logger.info("Salary PDF exported for %02d/%s (%d employees)", month, year, len(reports))
        resp = HttpResponse(buffer.getvalue(), content_type="application/pdf")
        resp['Content-Disposition'] = f'attachment; filename="salary_report_{month:02d}_{year}.pdf"'
        return resp


class SalaryReportExcelAPIView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        from openpyxl import Workbook
        from openpyxl.styles import Alignment
        from openpyxl.utils import get_column_letter

        month, year = period_from(request.query_params)
        reports = build_salary_sheet(month, year, employment_type=request.query_params.get("employment_type"))

        wb = Workbook()
        ws = wb.active
        ws.title = f"Salaries {month:02d}-{year}"
        ws.append([wrapped(h, "\n") for h in SHEET_HEADERS])
        for row in sheet_rows(reports):
            ws.append([row[0], row[1], row[2]] + [float(value) for value in row[3:]])
        for cell in ws[1]:
            cell.alignment = Alignment(wrap_text=True, horizontal="center")
        for col in range(1, len(SHEET_HEADERS) + 1):
            column = get_column_letter(col)
            max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in ws[column])
            ws.column_dimensions[column].width = min(max_length + 2, 25)

        buffer = io.BytesIO()
        wb.save(buffer)
        logger.info("Salary workbook exported for %02d/%s (%d employees)", month, year, len(reports))
        resp = HttpResponse(buffer.getvalue(), content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
        resp['Content-Disposition'] = f'attachment; filename="salary_report_{month:02d}_{year}.xlsx"'
        return resp
