import logging

import pytest
from httpx import AsyncClient


async def test_request_id_header_is_included(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert "X-Request-ID" in response.headers


async def test_request_lifecycle_logs_include_request_id(
    client: AsyncClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO)

    response = await client.get("/health")

    assert response.status_code == 200
    response_request_id = response.headers["X-Request-ID"]

    lifecycle_events = {"http.request.started", "http.request.completed"}
    lifecycle_logs = [
        record.msg
        for record in caplog.records
        if record.name == "popquiz.api.main"
        and isinstance(record.msg, dict)
        and record.msg.get("event") in lifecycle_events
    ]

    assert {log_entry["event"] for log_entry in lifecycle_logs} == lifecycle_events
    assert all(log_entry.get("request_id") == response_request_id for log_entry in lifecycle_logs)
