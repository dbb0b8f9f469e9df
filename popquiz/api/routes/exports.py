import asyncio

from fastapi import APIRouter, Response

from popquiz.api.responses import xlsx_attachment
from popquiz.core.schemas import ErrorResponse, ExportRequest
from popquiz.services import calculations as calculations_service

router = APIRouter(prefix="/exports", tags=["exports"])


@router.post("", response_class=Response, responses={422: {"model": ErrorResponse}})
async def create_export(payload: ExportRequest) -> Response:
    """Turn a table already shown on the page back into a downloadable workbook."""
    content = await asyncio.to_thread(
        calculations_service.export_table,
        payload.headers,
        payload.rows,
    )
    return xlsx_attachment(content)
