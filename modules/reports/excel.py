from io import BytesIO
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter


def _create_styles():
    """Create reusable style definitions."""
    thin_border = Side(style="thin", color="000000")
    return {
        "header_font": Font(bold=True, size=10),
        "header_fill": PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid"),
        "border": Border(left=thin_border, right=thin_border, top=thin_border, bottom=thin_border),
        "center_align": Alignment(horizontal="center", vertical="center"),
        "right_align": Alignment(horizontal="right", vertical="center"),
        "left_align": Alignment(horizontal="left", vertical="center"),
    }


def _apply_header_row(ws, row: int, columns: List[str], styles: dict):
    """Apply formatting to a header row."""
    for col_idx, col_name in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx, value=col_name)
        cell.font = styles["header_font"]
        cell.fill = styles["header_fill"]
        cell.border = styles["border"]
        cell.alignment = styles["center_align"]


def _apply_data_row(ws, row: int, values: List[Any], styles: dict, alignments: List[str] = None):
    """Apply formatting to a data row."""
    for col_idx, value in enumerate(values, start=1):
        cell = ws.cell(row=row, column=col_idx, value=value)
        cell.border = styles["border"]
        if alignments and col_idx <= len(alignments):
            align_type = alignments[col_idx - 1]
            cell.alignment = styles.get(f"{align_type}_align", styles["left_align"])


def _set_column_widths(ws, widths: List[int]):
    for col_idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def _write_table(ws, columns: List[str], rows: List[List[Any]], styles: dict, alignments: List[str]):
    _apply_header_row(ws, 1, columns, styles)
    for row_idx, values in enumerate(rows, start=2):
        _apply_data_row(ws, row_idx, values, styles, alignments)
    ws.freeze_panes = "A2"


def build_snapshot_excel(snapshot: Dict[str, Any]) -> BytesIO:
    """Generate an Excel workbook with one sheet per relation.

    Expects the records form of the snapshot (see ``get_snapshot_records``).
    """
    wb = Workbook()
    styles = _create_styles()

    products = snapshot.get("products", [])
    resources = snapshot.get("resources", [])
    consumption = snapshot.get("consumption", [])

    ws = wb.active
    ws.title = "Products"
    _write_table(
        ws,
        ["ID", "Name", "Profit"],
        [[p["id"], p["name"], p["profit"]] for p in products],
        styles,
        ["left", "left", "right"],
    )
    _set_column_widths(ws, [18, 30, 14])

    ws = wb.create_sheet("Resources")
    _write_table(
        ws,
        ["ID", "Name", "Stock"],
        [[r["id"], r["name"], r["stock"]] for r in resources],
        styles,
        ["left", "left", "right"],
    )
    _set_column_widths(ws, [18, 30, 14])

    consumption_rows = [[c["resource_id"], c["product_id"], c["amount"]] for c in consumption]

    ws = wb.create_sheet("Consumption")
    _write_table(
        ws,
        ["Resource ID", "Product ID", "Amount"],
        consumption_rows,
        styles,
        ["left", "left", "right"],
    )
    _set_column_widths(ws, [18, 18, 14])

    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)
    return stream
