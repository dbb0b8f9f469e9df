"""Conversion between .xlsx workbooks and header-first 2D tables."""

from collections.abc import Iterable, Sequence
from io import BytesIO
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from popquiz.core.schemas import Row, Table

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DEFAULT_SHEET_NAME = "Results"


class InvalidWorkbookError(ValueError):
    """Raised when a payload is not a readable, tabular workbook."""


def _trim_row(values: Iterable[Any]) -> Row:
    """Drop trailing empty cells so every row ends at its last value."""
    row = list(values)
    while row and row[-1] is None:
        row.pop()
    return row


def read_table(payload: bytes) -> Table:
    """Read the first worksheet of an .xlsx payload into a list of rows.

    Formula cells yield their cached values. Leading and trailing empty rows are
    dropped so the table starts at the header; empty rows between data rows
    are kept.
    """
    try:
        workbook = load_workbook(BytesIO(payload), data_only=True)
    except Exception as exc:
        raise InvalidWorkbookError("Payload is not a readable .xlsx workbook.") from exc

    try:
        if not workbook.worksheets:
            raise InvalidWorkbookError("Workbook does not contain a worksheet.")
        worksheet = workbook.worksheets[0]
        table = [_trim_row(values) for values in worksheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

    while table and not table[-1]:
        table.pop()
    first_used = next((index for index, row in enumerate(table) if row), len(table))
    return table[first_used:]


def _as_text(value: str) -> str:
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def write_table(table: Sequence[Sequence[Any]], sheet_name: str = DEFAULT_SHEET_NAME) -> bytes:
    """Serialize rows into a single-sheet .xlsx workbook and return its bytes."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_name

    for row_index, row in enumerate(table, start=1):
        for column_index, value in enumerate(row, start=1):
            if value is None:
                continue
            if isinstance(value, str):
                value = _as_text(value)
            cell = worksheet.cell(row=row_index, column=column_index, value=value)
            # Text such as "=A1" stays text instead of becoming a formula.
            if isinstance(value, str) and cell.data_type == "f":
                cell.data_type = "s"

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
