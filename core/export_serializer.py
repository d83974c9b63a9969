"""
Export Serializer — Writes the trigger report as a spreadsheet.

Two sheets are produced, in this order:

  "Company Triggers"   Trigger ID | Criteria | Email To | Email Subject
  "Location Triggers"  Location | Module Key | Emails | Associated Workflows

The workbook is written with openpyxl (bold header row, columns sized to their
content). The same sheets can also be written as JSON for scripting.

Cells are always written as values: strings starting with "=" stay text, and
control characters that worksheets cannot hold are dropped.

File naming: "{CompanyName}_Email_Triggers.{ext}", with characters that are
not allowed in file names replaced by "_".

Pipeline context:
    Used in Step 7 of the orchestrator pipeline. Paths are resolved inside the
    run's timestamped directory by OutputManager.
"""

import json
from typing import Any, Dict, List, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from config import REPORT_NAME

from .row_projector import (
    COMPANY_SHEET_COLUMNS,
    LOCATION_SHEET_COLUMNS,
    CompanyTriggerRow,
    LocationTriggerRow,
    company_sheet_row,
    location_sheet_row,
)

COMPANY_SHEET = "Company Triggers"
LOCATION_SHEET = "Location Triggers"

SHEET_COLUMNS = {
    COMPANY_SHEET: COMPANY_SHEET_COLUMNS,
    LOCATION_SHEET: LOCATION_SHEET_COLUMNS,
}

RESERVED_FILENAME_CHARS = '<>:"/\\|?*'
MAX_COLUMN_WIDTH = 80


def export_filename(company_name: str, ext: str = "xlsx") -> str:
    """Build the export file name for a company.

    Example:
        export_filename("Acme Rentals") -> "Acme Rentals_Email_Triggers.xlsx"
    """
    safe_name = "".join(
        "_" if c in RESERVED_FILENAME_CHARS or ord(c) < 32 else c
        for c in company_name
    ).strip()
    return f"{safe_name}_{REPORT_NAME}.{ext}"


def sheet_value(value: Any) -> Any:
    """Drop control characters that worksheets cannot store."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


class ExportSerializer:
    """Assembles sheets from projected rows and writes them to disk.

    Attributes:
        debug: If True, prints what was written.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def build_sheets(
        self,
        company_rows: Sequence[CompanyTriggerRow],
        location_rows: Sequence[LocationTriggerRow],
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Return the ordered sheet name -> list of row dicts mapping."""
        return {
            COMPANY_SHEET: [company_sheet_row(row) for row in company_rows],
            LOCATION_SHEET: [location_sheet_row(row) for row in location_rows],
        }

    def write_xlsx(self, sheets: Dict[str, List[Dict[str, Any]]], path: str) -> str:
        """Write the sheets to an .xlsx workbook.

        Args:
            sheets: Output of build_sheets().
            path: Destination file path.

        Returns:
            The path written.
        """
        wb = Workbook()
        wb.remove(wb.active)

        for sheet_name, rows in sheets.items():
            ws = wb.create_sheet(title=sheet_name)
            headers = list(SHEET_COLUMNS.get(sheet_name) or (rows[0].keys() if rows else []))
            if not headers:
                continue

            ws.append(headers)
            for row in rows:
                ws.append([sheet_value(row.get(header, "")) for header in headers])
                for cell in ws[ws.max_row]:
                    if isinstance(cell.value, str) and cell.value.startswith("="):
                        cell.data_type = "s"

            self._style_sheet(ws, len(headers))

        wb.save(path)

        if self.debug:
            counts = ", ".join(f"{name}: {len(rows)}" for name, rows in sheets.items())
            print(f"  Wrote workbook {path} ({counts})")

        return path

    def write_json(self, sheets: Dict[str, List[Dict[str, Any]]], path: str) -> str:
        """Write the sheets as a JSON object keyed by sheet name."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(sheets, f, indent=2, ensure_ascii=False)

        if self.debug:
            print(f"  Wrote JSON sheets {path}")

        return path

    def _style_sheet(self, ws, column_count: int):
        header_font = Font(bold=True)
        for col in range(1, column_count + 1):
            ws.cell(row=1, column=col).font = header_font

        for col in range(1, column_count + 1):
            max_len = 0
            for row in ws.iter_rows(min_row=1, max_row=ws.max_row, min_col=col, max_col=col):
                for cell in row:
                    if cell.value is not None:
                        max_len = max(max_len, len(str(cell.value)))
                    if cell.row > 1:
                        cell.alignment = Alignment(wrap_text=True, vertical="top")
            ws.column_dimensions[get_column_letter(col)].width = min(max(max_len + 2, 12), MAX_COLUMN_WIDTH)

        ws.freeze_panes = "A2"
