from fastapi import Response

from popquiz.core.config import settings
from popquiz.processing.workbook import XLSX_CONTENT_TYPE


def xlsx_attachment(content: bytes) -> Response:
    """Wrap workbook bytes in a download response named after the configured result file."""
    return Response(
        content=content,
        media_type=XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{settings.result_filename}"'},
    )
