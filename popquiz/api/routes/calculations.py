"""Calculation API routes: best-of averages as JSON or as a downloadable workbook."""

import asyncio
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, File, Form, Response, UploadFile

from popquiz.api.responses import xlsx_attachment
from popquiz.core.config import settings
from popquiz.core.errors import MissingFileError, UnsupportedMediaTypeError
from popquiz.core.logging import bind_context, get_logger
from popquiz.core.schemas import CalculationParams, CalculationResult, ErrorResponse, PageDefaults
from popquiz.processing.workbook import XLSX_CONTENT_TYPE
from popquiz.services import calculations as calculations_service
from popquiz.utils.uploads import read_upload

router = APIRouter(prefix="/calculations", tags=["calculations"])
logger = get_logger(__name__)

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    415: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}

UploadField = Annotated[UploadFile | None, File()]
ColumnField = Annotated[str | None, Form()]


def _is_xlsx(file: UploadFile) -> bool:
    """Accept a file declared as xlsx or named *.xlsx."""
    if file.content_type == XLSX_CONTENT_TYPE:
        return True
    return (file.filename or "").lower().endswith(".xlsx")


async def _read_request(
    file: UploadFile | None,
    start_column: str | None,
    end_column: str | None,
    best_of: str | None,
) -> tuple[bytes, CalculationParams]:
    """Validate the upload and parameters, then read the file into memory.

    Parameters are validated before the upload is read, so a bad range never
    reaches the workbook parser.
    """
    if file is None:
        raise MissingFileError()
    if not _is_xlsx(file):
        logger.info(
            "calculation.upload.rejected",
            upload_filename=file.filename,
            content_type=file.content_type,
        )
        raise UnsupportedMediaTypeError()

    params = calculations_service.build_params(start_column, end_column, best_of)

    payload, checksum_sha256 = await read_upload(file, chunk_size=settings.upload_chunk_size)
    bind_context(upload_filename=Path(file.filename or "").name, checksum_sha256=checksum_sha256)
    logger.info("calculation.upload.received", size_bytes=len(payload))
    return payload, params


@router.get("/defaults", response_model=PageDefaults)
def get_defaults() -> PageDefaults:
    """Return the initial values for the page's numeric inputs."""
    return PageDefaults(
        start_column=settings.default_start_column,
        end_column=settings.default_end_column,
        best_of=settings.default_best_of,
    )


@router.post("", response_model=CalculationResult, responses=ERROR_RESPONSES)
async def create_calculation(
    file: UploadField = None,
    start_column: ColumnField = None,
    end_column: ColumnField = None,
    best_of: ColumnField = None,
) -> CalculationResult:
    """Compute the best-of average for every student row of an uploaded workbook."""
    payload, params = await _read_request(file, start_column, end_column, best_of)
    return await asyncio.to_thread(calculations_service.calculate, payload, params)


@router.post("/export", response_class=Response, responses=ERROR_RESPONSES)
async def export_calculation(
    file: UploadField = None,
    start_column: ColumnField = None,
    end_column: ColumnField = None,
    best_of: ColumnField = None,
) -> Response:
    """Compute the averages and return the augmented workbook as a download."""
    payload, params = await _read_request(file, start_column, end_column, best_of)
    result = await asyncio.to_thread(calculations_service.calculate, payload, params)
    content = await asyncio.to_thread(calculations_service.export_result, result)
    return xlsx_attachment(content)
