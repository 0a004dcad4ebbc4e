"""Excel workbook generation for import error reports."""

from typing import Any
import datetime

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from .importer import ImportReport

ERROR_HEADERS = ["Ligne", "Colonne", "Valeur", "Message"]
ERROR_COLUMN_WIDTHS = [8, 20, 30, 70]
# larger integers lose precision once Excel stores them as doubles
MAX_EXCEL_INTEGER = 2 ** 53


def col_letter(col_num: int) -> str:
    """Convert 1-based column number to Excel column letter."""
    return get_column_letter(col_num)


def _cell_value(value: Any) -> Any:
    """Keep values Excel can store natively, stringify the rest."""
    if value is None:
        return ""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > MAX_EXCEL_INTEGER:
        return str(value)
    if isinstance(value, (int, float, bool, datetime.date)):
        return value
    return ILLEGAL_CHARACTERS_RE.sub("", str(value))


def create_error_sheet(ws, report: ImportReport):
    """
    Create the error sheet: one line per rejected cell.

    Args:
        ws: Worksheet to populate
        report: Import report whose issues are listed
    """
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="C00000", end_color="C00000", fill_type="solid")
    row_fill = PatternFill(start_color="FCE4D6", end_color="FCE4D6", fill_type="solid")
    center_align = Alignment(horizontal="center", vertical="center")
    wrap_align = Alignment(vertical="center", wrap_text=True)
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    for c, header in enumerate(ERROR_HEADERS, start=1):
        cell = ws.cell(row=1, column=c, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = center_align
        cell.border = thin_border

    row_order = report.rejected_rows
    for i, issue in enumerate(report.issues):
        row = 2 + i
        values = [issue["row"], _cell_value(str(issue["column"])), _cell_value(issue["value"]), issue["message"]]
        for c, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=c, value=value)
            if cell.data_type == "f":
                # rejected cells are shown as typed, never evaluated
                cell.data_type = "s"
            cell.border = thin_border
            cell.alignment = center_align if c == 1 else wrap_align
            # shade alternate source rows so a row's errors read as one block
            if row_order.index(issue["row"]) % 2 == 0:
                cell.fill = row_fill

    for c, width in enumerate(ERROR_COLUMN_WIDTHS, start=1):
        ws.column_dimensions[col_letter(c)].width = width

    ws.freeze_panes = "A2"


def create_summary_sheet(ws, report: ImportReport, source_name: str):
    """Create the summary sheet with counts for the import."""
    ws["A1"] = "Rapport d'import"
    ws["A1"].font = Font(bold=True, size=16)

    ws["A3"] = "Fichier:"
    ws["B3"] = _cell_value(source_name)
    ws["A4"] = "Entité:"
    ws["B4"] = report.entity
    ws["A5"] = "Lignes lues:"
    ws["B5"] = report.total_rows
    ws["A6"] = "Lignes valides:"
    ws["B6"] = report.valid_count
    ws["A7"] = "Lignes rejetées:"
    ws["B7"] = report.invalid_count

    for row in range(3, 8):
        ws[f"A{row}"].font = Font(bold=True)

    if report.issues:
        ws["A9"] = "Corrigez les lignes listées dans l'onglet Erreurs puis relancez l'import."
    else:
        ws["A9"] = "Toutes les lignes sont valides."

    ws.column_dimensions["A"].width = 20
    ws.column_dimensions["B"].width = 50


def build_error_report(report: ImportReport, source_name: str) -> Workbook:
    """
    Generate the error report workbook for an import.

    Args:
        report: Result of validating the imported sheet
        source_name: Name of the imported file, shown in the summary

    Returns:
        openpyxl Workbook object
    """
    wb = Workbook()
    ws_summary = wb.active
    ws_summary.title = "Résumé"
    create_summary_sheet(ws_summary, report, source_name)

    ws_errors = wb.create_sheet(title="Erreurs")
    create_error_sheet(ws_errors, report)

    return wb
