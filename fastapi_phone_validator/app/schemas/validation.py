from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    input_number: str | None = Field(default=None, description="요청에 사용된 번호")
    success: bool
    valid: bool
    line_type: str = Field(default="unknown", description="mobile / landline / invalid / unknown")
    number: str | None = Field(default=None, description="API 가 돌려준 국제 형식 번호")
    carrier: str | None = None
    location: str | None = None
    country: str | None = None
    error: str | None = None


class NumbersValidationRequest(BaseModel):
    numbers: Any = Field(default=None, description="검증할 번호 목록")


class NumbersValidationResponse(BaseModel):
    success: bool = True
    results: list[ValidationResult]


class HistoryEntry(BaseModel):
    number: str
    line_type: str
    valid: bool
    timestamp: datetime
