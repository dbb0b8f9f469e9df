"""Application-level exception hierarchy mapped to HTTP responses."""

from typing import Any


class AppError(Exception):
    """Base class for expected errors surfaced to the user."""

    status_code = 400
    default_detail: Any = "Bad request."

    def __init__(self, detail: Any | None = None) -> None:
        self.detail = self.default_detail if detail is None else detail
        super().__init__(str(self.detail))


class UnsupportedMediaTypeError(AppError):
    """Error raised when the uploaded file is not an .xlsx workbook."""

    status_code = 415
    default_detail = "Invalid file type. Please upload a .xlsx file."


class MissingFileError(AppError):
    status_code = 422
    default_detail = "Please upload an Excel file first."


class InvalidParametersError(AppError):
    """Error raised when a column index or best-of count is not a positive integer."""

    status_code = 422
    default_detail = "Please enter valid, positive numbers for all fields."


class ColumnOrderError(AppError):
    status_code = 422
    default_detail = "Start column index cannot be greater than the end column index."


class InsufficientRowsError(AppError):
    status_code = 422
    default_detail = "Excel file must have a header row and at least one data row."


class UnreadableWorkbookError(AppError):
    """Error raised when an upload cannot be parsed as a workbook."""

    status_code = 422
    default_detail = "The uploaded file could not be read as an Excel workbook."


class EmptyExportError(AppError):
    status_code = 422
    default_detail = "No data available to download."


class UnexpectedError(AppError):
    """Fallback error for unhandled exceptions."""

    status_code = 500
    default_detail = "An unexpected error occurred. Please try again later."
