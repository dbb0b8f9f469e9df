"""Best-of-K averaging over a column range of each student row."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from popquiz.core.schemas import CalculationParams, CalculationResult, ProcessedRow, Row, Table

# Leading numeric prefix, e.g. "7.5 pts" -> "7.5".
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

RESULT_DECIMAL_PLACES = 2


def _parse_score(value: Any) -> float | None:
    """Convert a cell to a score, or None when it carries no number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value.lstrip())
        if match is None:
            return None
        number = float(match.group())
    else:
        return None

    # NaN and overflowed values such as "1e999" are not scores.
    if not math.isfinite(number):
        return None
    return number


def _round_half_away_from_zero(value: float, places: int = RESULT_DECIMAL_PLACES) -> float:
    """Round on the exact binary value, ties away from zero."""
    # Floats this large are already integral.
    if abs(value) >= 2**52:
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def best_of_average(row: Row, start_column: int, end_column: int, best_of: int) -> float:
    """Average the `best_of` highest scores found in columns start..end (1-based, inclusive).

    Cells past the end of the row count as empty. Returns 0.0 when the range
    holds no numeric value.
    """
    if min(start_column, end_column, best_of) < 1:
        raise ValueError("column indexes and best_of must be positive")
    if start_column > end_column:
        raise ValueError("start_column must not be greater than end_column")

    scores: list[float] = []
    for value in row[start_column - 1 : end_column]:
        score = _parse_score(value)
        if score is not None:
            scores.append(score)

    top_scores = sorted(scores, reverse=True)[:best_of]
    if not top_scores:
        return 0.0
    count = len(top_scores)
    average = math.fsum(top_scores) / count
    if not math.isfinite(average):
        # The sum overflowed; scale before adding.
        average = math.fsum(score / count for score in top_scores)
    return _round_half_away_from_zero(average)


def _pad(row: Row, width: int) -> Row:
    return [*row, *([None] * (width - len(row)))]


def process_table(table: Table, params: CalculationParams, result_header: str) -> CalculationResult:
    """Compute a ProcessedRow for every data row of a header-first table.

    Rows are padded to the widest row so the appended result column sits under
    `result_header`.
    """
    if not table:
        raise ValueError("table must include a header row")

    width = max(len(row) for row in table)
    headers = [*_pad(table[0], width), result_header]

    rows = [
        ProcessedRow(
            original_row=tuple(_pad(row, width)),
            calculated_avg=best_of_average(
                row,
                params.start_column,
                params.end_column,
                params.best_of,
            ),
        )
        for row in table[1:]
    ]
    return CalculationResult(headers=headers, rows=rows, row_count=len(rows))
