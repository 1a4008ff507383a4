"""Output writers for SalesReport: a spreadsheet and a PDF summary."""
from io import BytesIO

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from .aggregator import EXPORT_COLUMNS
from .pdf import build_pdf


def _cell_value(value):
    # openpyxl refuses XML control characters in strings.
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _format_money(value) -> str:
    return f"Rs. {value:,.2f}"


class ExcelReportWriter:
    content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    filename = "sales-report.xlsx"
    sheet_title = "Sales Report"

    def render(self, report) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.sheet_title

        header_font = Font(bold=True)
        header_fill = PatternFill(fill_type="solid", fgColor="FFE0E0E0")
        for col, column in enumerate(EXPORT_COLUMNS, start=1):
            cell = sheet.cell(row=1, column=col, value=column.header)
            cell.font = header_font
            cell.fill = header_fill
            sheet.column_dimensions[get_column_letter(col)].width = column.width

        for row_idx, row in enumerate(report.rows(), start=2):
            for col, column in enumerate(EXPORT_COLUMNS, start=1):
                sheet.cell(row=row_idx, column=col, value=_cell_value(row[column.key]))

        out = BytesIO()
        workbook.save(out)
        return out.getvalue()


class PdfReportWriter:
    content_type = "application/pdf"
    filename = "sales-report.pdf"
    title = "Flour CRM Sales Report"

    def render(self, report) -> bytes:
        totals = report.totals()
        lines = [
            f"Generated on: {timezone.localtime():%Y-%m-%d %H:%M}",
        ]
        filters = report.filters
        if not filters.is_empty():
            applied = [
                f"{name.replace('_', ' ')}: {value}"
                for name, value in vars(filters).items()
                if value is not None
            ]
            lines.append("Filters: " + ", ".join(applied))
        lines += [
            "",
            "Summary",
            f"Total Sales: {totals['orders']}",
            f"Total Revenue: {_format_money(totals['revenue'])}",
            f"Paid Upfront (Deposit/Cash/Bank): {_format_money(totals['paid_upfront'])}",
            f"Credit Amount: {_format_money(totals['credit'])}",
            "",
            "Revenue by payment type",
        ]
        breakdown = report.payment_breakdown()
        if not breakdown:
            lines.append("No sales")
        for entry in breakdown:
            lines.append(f"{entry['type']}: {_format_money(entry['amount'])}")
        return build_pdf(lines, title=self.title)
