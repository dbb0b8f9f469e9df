from collections.abc import AsyncGenerator, Callable, Sequence
from io import BytesIO

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook

from popquiz.api.main import app


GRADES_HEADER = [
    "Student ID",
    "First Name",
    "Last Name",
    "Email",
    "Section",
    "Quiz 1",
    "Quiz 2",
    "Quiz 3",
]


def build_xlsx(rows: Sequence[Sequence[object]], sheet_name: str = "Grades") -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_name
    for row in rows:
        worksheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest_asyncio.fixture()
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture()
def make_xlsx() -> Callable[..., bytes]:
    return build_xlsx


@pytest.fixture()
def grades_rows() -> list[list[object]]:
    return [
        GRADES_HEADER,
        [1001, "Ada", "Lovelace", "ada@example.com", "A", 7, 9, 5],
        [1002, "Alan", "Turing", "alan@example.com", "B", "10", None, "absent"],
        [1003, "Grace", "Hopper", "grace@example.com", "A"],
        [1004, "Edsger", "Dijkstra", "edsger@example.com", "B", 6.5, 8.25, 8.25],
    ]


@pytest.fixture()
def grades_xlsx_bytes(grades_rows: list[list[object]]) -> bytes:
    return build_xlsx(grades_rows)


@pytest.fixture()
def calculation_form() -> dict[str, str]:
    return {"start_column": "6", "end_column": "8", "best_of": "2"}
