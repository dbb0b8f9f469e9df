from collections.abc import Callable

import pytest

from popquiz.core.errors import (
    ColumnOrderError,
    EmptyExportError,
    InsufficientRowsError,
    InvalidParametersError,
    UnreadableWorkbookError,
)
from popquiz.core.schemas import CalculationParams, ProcessedRow
from popquiz.processing.workbook import read_table
from popquiz.services import calculations as calculations_service


def test_build_params_accepts_form_strings() -> None:
    params = calculations_service.build_params("6", "8", "2")

    assert params == CalculationParams(start_column=6, end_column=8, best_of=2)


def test_build_params_start_after_end_raises_column_order_error() -> None:
    with pytest.raises(ColumnOrderError, match="cannot be greater"):
        calculations_service.build_params("9", "8", "2")


@pytest.mark.parametrize(
    ("start_column", "end_column", "best_of"),
    [
        (None, "8", "2"),
        ("", "8", "2"),
        ("six", "8", "2"),
        ("0", "8", "2"),
        ("6", "-1", "2"),
        ("6", "8", "2.5"),
    ],
)
def test_build_params_invalid_values_raise(
    start_column: str | None,
    end_column: str | None,
    best_of: str | None,
) -> None:
    with pytest.raises(InvalidParametersError, match="valid, positive numbers"):
        calculations_service.build_params(start_column, end_column, best_of)


def test_calculate_returns_result_per_student(grades_xlsx_bytes: bytes) -> None:
    params = CalculationParams(start_column=6, end_column=8, best_of=2)

    result = calculations_service.calculate(grades_xlsx_bytes, params)

    assert result.row_count == 4
    assert result.headers[-1] == "Best Pop quiz Result"
    assert [row.calculated_avg for row in result.rows] == [8.0, 10.0, 0.0, 8.25]


def test_calculate_header_only_raises(make_xlsx: Callable[..., bytes]) -> None:
    params = CalculationParams(start_column=1, end_column=2, best_of=1)

    with pytest.raises(InsufficientRowsError, match="at least one data row"):
        calculations_service.calculate(make_xlsx([["Name", "Quiz 1"]]), params)


def test_calculate_corrupt_file_raises() -> None:
    params = CalculationParams(start_column=1, end_column=2, best_of=1)

    with pytest.raises(UnreadableWorkbookError):
        calculations_service.calculate(b"PK\x03\x04 truncated", params)


def test_export_result_round_trip(grades_xlsx_bytes: bytes) -> None:
    params = CalculationParams(start_column=6, end_column=8, best_of=2)
    result = calculations_service.calculate(grades_xlsx_bytes, params)

    exported = read_table(calculations_service.export_result(result))

    assert len(exported) == result.row_count + 1
    assert exported[0][-1] == "Best Pop quiz Result"
    assert exported[0][:-1] == read_table(grades_xlsx_bytes)[0]
    assert [row[-1] for row in exported[1:]] == [8, 10, 0, 8.25]


def test_export_table_without_rows_raises() -> None:
    with pytest.raises(EmptyExportError, match="No data available"):
        calculations_service.export_table(["Name", "Best Pop quiz Result"], [])


def test_export_table_without_headers_raises() -> None:
    rows = [ProcessedRow(original_row=("Ada",), calculated_avg=1.0)]

    with pytest.raises(EmptyExportError):
        calculations_service.export_table([], rows)
