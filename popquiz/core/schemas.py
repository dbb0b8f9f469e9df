import re
from datetime import date, datetime, time, timedelta

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator

CellValue = str | int | float | bool | datetime | date | time | timedelta | None
Row = list[CellValue]
Table = list[Row]

COLUMN_ORDER_MESSAGE = "start_column must not be greater than end_column"

# Shapes pydantic gives datetime and time cells in JSON responses.
_ISO_DATETIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?")
_ISO_TIME = re.compile(r"\d{2}:\d{2}:\d{2}(?:\.\d+)?")


def _restore_temporal(value: CellValue) -> CellValue:
    if not isinstance(value, str):
        return value
    if _ISO_DATETIME.fullmatch(value):
        return datetime.fromisoformat(value)
    if _ISO_TIME.fullmatch(value):
        return time.fromisoformat(value)
    return value


class ErrorResponse(BaseModel):
    detail: str


class HealthPublic(BaseModel):
    status: str


class CalculationParams(BaseModel):
    """Column range (1-based, inclusive) and the number of best scores to average."""

    start_column: PositiveInt
    end_column: PositiveInt
    best_of: PositiveInt

    @model_validator(mode="after")
    def check_column_order(self) -> "CalculationParams":
        if self.start_column > self.end_column:
            raise ValueError(COLUMN_ORDER_MESSAGE)
        return self


class ProcessedRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_row: tuple[CellValue, ...]
    calculated_avg: float


class CalculationResult(BaseModel):
    headers: list[CellValue]
    rows: list[ProcessedRow]
    row_count: int = Field(ge=0)


class ExportRequest(BaseModel):
    """A previously calculated table sent back by the page for download."""

    headers: list[CellValue]
    rows: list[ProcessedRow]

    @field_validator("rows")
    @classmethod
    def restore_temporal_cells(cls, rows: list[ProcessedRow]) -> list[ProcessedRow]:
        """Turn ISO datetime and time strings back into the cell types they were serialized from."""
        restored = []
        for row in rows:
            cells = tuple(_restore_temporal(value) for value in row.original_row)
            restored.append(row.model_copy(update={"original_row": cells}))
        return restored


class PageDefaults(BaseModel):
    start_column: int
    end_column: int
    best_of: int
