"""Calculation service: validate parameters, average best scores, export results."""

from collections.abc import Sequence

from pydantic import ValidationError

from popquiz.core.config import settings
from popquiz.core.errors import (
    ColumnOrderError,
    EmptyExportError,
    InsufficientRowsError,
    InvalidParametersError,
    UnreadableWorkbookError,
)
from popquiz.core.logging import get_logger
from popquiz.core.schemas import CalculationParams, CalculationResult, CellValue, ProcessedRow
from popquiz.processing import process_table, read_table, write_table
from popquiz.processing.workbook import InvalidWorkbookError

logger = get_logger(__name__)

MIN_TABLE_ROWS = 2


def build_params(
    start_column: object,
    end_column: object,
    best_of: object,
) -> CalculationParams:
    """Validate raw form values into calculation parameters."""
    try:
        return CalculationParams.model_validate(
            {"start_column": start_column, "end_column": end_column, "best_of": best_of}
        )
    except ValidationError as exc:
        # The column order check is the only validator that raises a plain value_error.
        if any(error["type"] == "value_error" for error in exc.errors()):
            raise ColumnOrderError() from exc
        raise InvalidParametersError() from exc


def calculate(payload: bytes, params: CalculationParams) -> CalculationResult:
    """Parse an uploaded workbook and compute the best-of average for each row."""
    try:
        table = read_table(payload)
    except InvalidWorkbookError as exc:
        logger.warning("calculation.workbook.unreadable", reason=str(exc))
        raise UnreadableWorkbookError() from exc

    if len(table) < MIN_TABLE_ROWS:
        logger.info("calculation.workbook.too_few_rows", table_rows=len(table))
        raise InsufficientRowsError()

    result = process_table(table, params, result_header=settings.result_column_header)
    logger.info(
        "calculation.completed",
        row_count=result.row_count,
        start_column=params.start_column,
        end_column=params.end_column,
        best_of=params.best_of,
    )
    return result


def export_table(headers: Sequence[CellValue], rows: Sequence[ProcessedRow]) -> bytes:
    """Serialize headers and processed rows, with each average appended, as .xlsx bytes."""
    if not headers or not rows:
        raise EmptyExportError()

    table: list[list[CellValue]] = [list(headers)]
    table.extend([*row.original_row, row.calculated_avg] for row in rows)

    payload = write_table(table, sheet_name=settings.result_sheet_name)
    logger.info("export.completed", row_count=len(rows), size_bytes=len(payload))
    return payload


def export_result(result: CalculationResult) -> bytes:
    return export_table(result.headers, result.rows)
