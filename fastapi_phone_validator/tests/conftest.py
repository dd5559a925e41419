# Shared pytest fixtures
from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import httpx
import pytest
from openpyxl import Workbook

from app.core.config import settings
from app.services import history_service

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture()
def api_settings(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(settings, "phone_api_key", "test-key")
    monkeypatch.setattr(settings, "phone_api_base_url", "https://phone.test/validate")
    monkeypatch.setattr(settings, "phone_api_max_attempts", 3)
    monkeypatch.setattr(settings, "phone_api_retry_delay_seconds", 0)
    monkeypatch.setattr(settings, "export_dir", str(tmp_path / "exports"))
    return settings


@pytest.fixture(autouse=True)
def _clear_history():
    history_service.clear_history()
    yield
    history_service.clear_history()


@pytest.fixture()
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    def _make(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture()
def upstream_payload() -> Callable[..., dict]:
    def _payload(number: str, line_type: str = "mobile", valid: bool = True) -> dict:
        return {
            "valid": valid,
            "number": number.lstrip("+"),
            "international_format": number,
            "line_type": line_type,
            "carrier": "AT&T Mobility LLC",
            "location": "San Francisco",
            "country_name": "United States of America",
        }

    return _payload


@pytest.fixture()
def xlsx_bytes() -> Callable[[list[list[object]]], bytes]:
    def _build(rows: list[list[object]]) -> bytes:
        wb = Workbook()
        ws = wb.active
        for row in rows:
            ws.append(row)
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    return _build
