from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class BatchStatistics(BaseModel):
    total: int = Field(..., ge=0)
    mobile: int = Field(..., ge=0)
    landline: int = Field(..., ge=0)
    invalid: int = Field(..., ge=0)


class FilePreview(BaseModel):
    filename: str
    columns: list[str]
    candidate_columns: list[str]
    total_rows: int = Field(..., ge=0)
    rows: list[dict[str, Any]]


class FileProcessSummary(BaseModel):
    filename: str
    columns: list[str]
    candidate_columns: list[str]
    statistics: BatchStatistics
    rows: list[dict[str, Any]]
    warning: str | None = None
    export_id: str
    download_url: str
