from __future__ import annotations

import csv
import io
import zipfile
from dataclasses import dataclass, field
from typing import Any, Dict, List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from app.core.config import settings

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")


class UploadParseError(ValueError):
    """업로드 파일을 행 목록으로 읽을 수 없음."""


@dataclass
class ParsedUpload:
    columns: List[str]
    rows: List[Dict[str, Any]] = field(default_factory=list)


def file_extension(filename: str | None) -> str:
    name = (filename or "").lower()
    for ext in SUPPORTED_EXTENSIONS:
        if name.endswith(ext):
            return ext
    raise UploadParseError("Unsupported file type. Upload a .csv or .xlsx file.")


def parse_upload(filename: str | None, file_bytes: bytes) -> ParsedUpload:
    """
    업로드 파일을 헤더 기준 dict 행 목록으로 변환한다. 행이 0건인 경우는
    여기서 막지 않고 일괄 처리 단계에서 사용자 오류로 처리한다.
    """
    ext = file_extension(filename)
    if not file_bytes:
        raise UploadParseError("Invalid file format or empty file")

    parsed = _parse_csv(file_bytes) if ext == ".csv" else _parse_xlsx(file_bytes)
    if len(parsed.rows) > settings.upload_max_rows:
        raise UploadParseError(
            f"A single upload supports at most {settings.upload_max_rows:,} rows."
        )
    return parsed


def _parse_csv(file_bytes: bytes) -> ParsedUpload:
    try:
        text = file_bytes.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise UploadParseError("CSV file must be UTF-8 encoded.") from exc

    reader = csv.reader(io.StringIO(text))
    try:
        header = next(reader, None)
        if not header or all(not cell.strip() for cell in header):
            raise UploadParseError("Invalid file format or empty file")
        columns = _header_names(header)
        rows: List[Dict[str, Any]] = []
        # 중복 헤더도 값을 잃지 않도록 위치 기준으로 매핑한다.
        for raw in reader:
            if all(not cell.strip() for cell in raw):
                continue
            cells: List[Any] = list(raw[: len(columns)])
            cells += [None] * (len(columns) - len(cells))
            rows.append(dict(zip(columns, cells)))
    except csv.Error as exc:
        raise UploadParseError(f"Cannot parse CSV: {exc}") from exc
    return ParsedUpload(columns=columns, rows=rows)


def _parse_xlsx(file_bytes: bytes) -> ParsedUpload:
    try:
        workbook = load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise UploadParseError(f"Cannot parse XLSX: {exc}") from exc

    try:
        sheet = workbook.worksheets[0]
        rows_iter = sheet.iter_rows(values_only=True)
        header_row = next(rows_iter, None)
        if header_row is None or all(cell is None for cell in header_row):
            raise UploadParseError("Invalid file format or empty file")
        columns = _header_names(header_row)

        rows: List[Dict[str, Any]] = []
        for raw in rows_iter:
            if all(cell is None or str(cell).strip() == "" for cell in raw):
                continue
            cells = list(raw) + [None] * (len(columns) - len(raw))
            rows.append(dict(zip(columns, cells)))
    finally:
        workbook.close()
    return ParsedUpload(columns=columns, rows=rows)


def _header_names(header: Any) -> List[str]:
    columns: List[str] = []
    for idx, cell in enumerate(header, start=1):
        name = str(cell).strip() if cell is not None else ""
        if not name:
            name = f"Column {idx}"
        while name in columns:
            name = f"{name}_{idx}"
        columns.append(name)
    return columns
