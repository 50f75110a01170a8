"""CSV / XLSX export utilities."""
import csv
from io import BytesIO

from django.http import HttpResponse

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _cell_value(obj, field):
    if callable(field):
        return field(obj)
    val = getattr(obj, field, "")
    return "" if val is None else val


def queryset_to_csv_response(queryset, columns, filename):
    """Convert a queryset to a CSV HttpResponse.

    Args:
        queryset: Django QuerySet
        columns: list of (field_name_or_callable, header_label) tuples.
        filename: download filename (without extension)
    """
    response = HttpResponse(content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}.csv"'
    # UTF-8 BOM for Excel compatibility
    response.write("\ufeff")

    writer = csv.writer(response)
    writer.writerow([label for _, label in columns])
    for obj in queryset.iterator():
        writer.writerow([str(_cell_value(obj, field)) for field, _ in columns])
    return response


def queryset_to_xlsx_response(queryset, columns, filename, *, sheet_title="Export"):
    """Same contract as :func:`queryset_to_csv_response`, rendered with openpyxl."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]

    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    widths = []
    for col_num, (_, label) in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col_num, value=label)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        widths.append(len(str(label)))

    for row_num, obj in enumerate(queryset.iterator(), start=2):
        for col_num, (field, _) in enumerate(columns, 1):
            value = _cell_value(obj, field)
            if not isinstance(value, (int, float, str)):
                value = str(value)
            ws.cell(row=row_num, column=col_num, value=value)
            widths[col_num - 1] = max(widths[col_num - 1], len(str(value)))

    for col_num, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col_num)].width = min(width + 4, 50)

    buffer = BytesIO()
    wb.save(buffer)
    response = HttpResponse(buffer.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{filename}.xlsx"'
    return response
