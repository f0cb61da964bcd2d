"""
Workbook builder - renders report rows into a single-sheet XLSX document.

The builder works in two passes. The first pass converts every cell to
the value XlsxWriter will receive and raises RenderError on anything
that cannot be encoded, so a defect never leaves a half-written
workbook behind. The second pass writes the prepared cells.

Output is byte-stable: the document creation date is fixed and
XlsxWriter stores zip members with a fixed timestamp, so the same
(columns, rows, summary) always yields the same bytes.
"""

import io
import logging
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import xlsxwriter
from xlsxwriter.exceptions import XlsxWriterException

from barberboss.core import config
from barberboss.core.exceptions import RenderError
from barberboss.domain.entities import ReportSummary

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Fixed so that two renders of the same input are byte-identical
DOCUMENT_CREATED = datetime(2000, 1, 1, 0, 0, 0)

MAX_SHEET_ROWS = 1048576
MAX_STRING_LENGTH = 32767
MAX_SHEET_NAME_LENGTH = 31
DEFAULT_SHEET_NAME = "Relatório"

TEXT = "text"
NUMBER = "number"
CURRENCY = "currency"
DATE = "date"
COLUMN_TYPES = (TEXT, NUMBER, CURRENCY, DATE)
AGGREGATES = ("sum", "count")

DEFAULT_WIDTHS = {TEXT: 28, NUMBER: 14, CURRENCY: 16, DATE: 12}


@dataclass(frozen=True)
class Column:
    """One column of the header schema."""

    key: str
    label: str
    type: str = TEXT
    aggregate: Optional[str] = None
    width: Optional[float] = None


SummaryLike = Union[ReportSummary, Mapping[str, Any]]
PreparedCell = Tuple[str, Any]  # (kind, value); kind "blank" means no value


def safe_sheet_name(name: Optional[str]) -> str:
    """Make a name acceptable to Excel: no []:*?/\\ and at most 31 chars."""
    cleaned = re.sub(r"[\[\]:*?/\\]", "-", (name or "").strip()).strip("'")
    cleaned = cleaned[:MAX_SHEET_NAME_LENGTH].strip()
    return cleaned or DEFAULT_SHEET_NAME


class WorkbookBuilder:
    """Render a header schema, rows and optional summary into XLSX bytes."""

    def __init__(
        self,
        currency_symbol: Optional[str] = None,
        date_format: Optional[str] = None,
    ):
        self.currency_symbol = currency_symbol or config.get_report_currency_symbol()
        self.date_format = date_format or config.get_report_date_format()

    @property
    def currency_format(self) -> str:
        symbol = self.currency_symbol.replace('"', "")
        return f'"{symbol}" #,##0.00;-"{symbol}" #,##0.00'

    def build(
        self,
        columns: Sequence[Column],
        rows: Sequence[Mapping[str, Any]],
        summary: Optional[SummaryLike] = None,
        sheet_name: Optional[str] = None,
        title: Optional[str] = None,
    ) -> bytes:
        """
        Render the workbook.

        Args:
            columns: header schema, in display order
            rows: one mapping per data row, keyed exactly by the column keys
            summary: aggregate values keyed by aggregate column; None to omit
                the summary row
            sheet_name: worksheet name (sanitized for Excel)
            title: document title property; defaults to the sheet name

        Returns:
            The complete .xlsx document

        Raises:
            RenderError: on schema defects, row/column mismatches or values
                that cannot be encoded
        """
        self._check_schema(columns)
        if len(rows) > MAX_SHEET_ROWS - 2:
            raise RenderError(
                f"Too many rows for one sheet: {len(rows)}", row=MAX_SHEET_ROWS - 1
            )

        prepared_rows = [
            self._prepare_row(columns, row, index)
            for index, row in enumerate(rows, start=1)
        ]
        prepared_summary = (
            self._prepare_summary(columns, summary) if summary is not None else None
        )

        name = safe_sheet_name(sheet_name)
        output = io.BytesIO()
        workbook = xlsxwriter.Workbook(output, {"in_memory": True})
        try:
            workbook.set_properties(
                {
                    "title": title or name,
                    "author": "BarberBoss",
                    "created": DOCUMENT_CREATED,
                }
            )
            formats = self._create_formats(workbook)
            worksheet = workbook.add_worksheet(name)
            self._write_sheet(
                worksheet, formats, columns, prepared_rows, prepared_summary
            )
        except XlsxWriterException as e:
            raise RenderError(f"Could not build workbook: {e}") from e
        finally:
            try:
                workbook.close()
            except XlsxWriterException as e:
                raise RenderError(f"Could not serialize workbook: {e}") from e

        payload = output.getvalue()
        logger.debug(
            "Workbook rendered",
            extra={
                "context": {
                    "sheet": name,
                    "columns": len(columns),
                    "rows": len(prepared_rows),
                    "summary": prepared_summary is not None,
                    "size_bytes": len(payload),
                }
            },
        )
        return payload

    # ------------------------------------------------------------------
    # Preparation pass
    # ------------------------------------------------------------------

    @staticmethod
    def _check_schema(columns: Sequence[Column]) -> None:
        if not columns:
            raise RenderError("At least one column is required")
        seen = set()
        for column in columns:
            if column.key in seen:
                raise RenderError("Duplicate column key", column=column.key)
            seen.add(column.key)
            if column.type not in COLUMN_TYPES:
                raise RenderError(
                    f"Unknown column type '{column.type}'", column=column.key
                )
            if column.aggregate is not None and column.aggregate not in AGGREGATES:
                raise RenderError(
                    f"Unknown aggregate '{column.aggregate}'", column=column.key
                )
            if column.aggregate is not None and column.type not in (NUMBER, CURRENCY):
                raise RenderError(
                    "Only number and currency columns can aggregate",
                    column=column.key,
                )

    def _prepare_row(
        self, columns: Sequence[Column], row: Mapping[str, Any], index: int
    ) -> List[PreparedCell]:
        keys = [column.key for column in columns]
        for key in row.keys():
            if key not in keys:
                raise RenderError("Unexpected column in row", row=index, column=key)
        cells = []
        for column in columns:
            if column.key not in row:
                raise RenderError(
                    "Missing column in row", row=index, column=column.key
                )
            cells.append(self._prepare_cell(column, row[column.key], index))
        return cells

    def _prepare_summary(
        self, columns: Sequence[Column], summary: SummaryLike
    ) -> List[PreparedCell]:
        values = summary.values if isinstance(summary, ReportSummary) else summary
        cells: List[PreparedCell] = []
        for column in columns:
            if column.aggregate is None:
                cells.append(("blank", None))
                continue
            if column.key not in values:
                raise RenderError("Missing aggregate value", column=column.key)
            cells.append(self._prepare_cell(column, values[column.key], None))
        return cells

    def _prepare_cell(
        self, column: Column, value: Any, row: Optional[int]
    ) -> PreparedCell:
        if value is None:
            return ("blank", None)

        if column.type == TEXT:
            if isinstance(value, bool) or not isinstance(
                value, (str, int, float, Decimal, date)
            ):
                raise RenderError(
                    f"Unsupported text value of type {type(value).__name__}",
                    row=row,
                    column=column.key,
                )
            text = value if isinstance(value, str) else str(value)
            if len(text) > MAX_STRING_LENGTH:
                raise RenderError(
                    f"Text longer than {MAX_STRING_LENGTH} characters",
                    row=row,
                    column=column.key,
                )
            return (TEXT, text)

        if column.type in (NUMBER, CURRENCY):
            if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
                raise RenderError(
                    f"Expected a number, got {type(value).__name__}",
                    row=row,
                    column=column.key,
                )
            try:
                number = float(value)
            except OverflowError as e:
                raise RenderError(
                    "Number outside the encodable range", row=row, column=column.key
                ) from e
            if not math.isfinite(number):
                raise RenderError(
                    "Number outside the encodable range", row=row, column=column.key
                )
            return (column.type, number)

        # DATE
        if not isinstance(value, date):
            raise RenderError(
                f"Expected a date, got {type(value).__name__}",
                row=row,
                column=column.key,
            )
        if isinstance(value, datetime):
            value = value.date()
        if value.year < 1900:
            raise RenderError(
                "Dates before 1900 cannot be stored", row=row, column=column.key
            )
        return (DATE, value)

    # ------------------------------------------------------------------
    # Writing pass
    # ------------------------------------------------------------------

    def _create_formats(self, workbook) -> Dict[str, Any]:
        summary_base = {"bold": True, "top": 1}
        return {
            "header": workbook.add_format(
                {"bold": True, "bg_color": "#D0D0D0", "bottom": 1}
            ),
            TEXT: workbook.add_format({}),
            NUMBER: workbook.add_format({"num_format": "#,##0"}),
            CURRENCY: workbook.add_format({"num_format": self.currency_format}),
            DATE: workbook.add_format({"num_format": self.date_format}),
            "summary_blank": workbook.add_format(summary_base),
            "summary_" + NUMBER: workbook.add_format(
                {**summary_base, "num_format": "#,##0"}
            ),
            "summary_" + CURRENCY: workbook.add_format(
                {**summary_base, "num_format": self.currency_format}
            ),
        }

    def _write_sheet(
        self,
        worksheet,
        formats: Dict[str, Any],
        columns: Sequence[Column],
        rows: List[List[PreparedCell]],
        summary: Optional[List[PreparedCell]],
    ) -> None:
        for col, column in enumerate(columns):
            width = column.width or DEFAULT_WIDTHS[column.type]
            worksheet.set_column(col, col, width)
            worksheet.write_string(0, col, column.label, formats["header"])

        worksheet.freeze_panes(1, 0)
        worksheet.autofilter(0, 0, len(rows), len(columns) - 1)

        for row_index, cells in enumerate(rows, start=1):
            for col, (kind, value) in enumerate(cells):
                fmt = formats[kind] if kind != "blank" else None
                self._write_cell(
                    worksheet, row_index, columns[col], col, kind, value, fmt
                )

        if summary is not None:
            summary_row = len(rows) + 1
            for col, (kind, value) in enumerate(summary):
                fmt = formats.get("summary_" + kind, formats["summary_blank"])
                self._write_cell(
                    worksheet, summary_row, columns[col], col, kind, value, fmt
                )

    @staticmethod
    def _write_cell(
        worksheet, row: int, column: Column, col: int, kind: str, value: Any, fmt
    ) -> None:
        # write_string keeps values like "=1+1" as text instead of formulas
        if kind == TEXT:
            result = worksheet.write_string(row, col, value, fmt)
        elif kind in (NUMBER, CURRENCY):
            result = worksheet.write_number(row, col, value, fmt)
        elif kind == DATE:
            result = worksheet.write_datetime(row, col, value, fmt)
        else:
            result = worksheet.write_blank(row, col, None, fmt)
        if result:
            raise RenderError(
                f"Cell rejected by writer (code {result})", row=row, column=column.key
            )
