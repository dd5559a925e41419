from __future__ import annotations

import csv
import io
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Mapping, Sequence

from openpyxl import Workbook

from app.core.config import settings
from app.services.bulk_service import ANNOTATION_COLUMNS
from app.services.upload_service import file_extension

EXPORT_SHEET_TITLE = "Processed Data"
EXPORT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
MEDIA_TYPES = {
    ".csv": "text/csv",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@dataclass
class ExportRecord:
    export_id: str
    filename: str
    media_type: str
    path: Path


def export_columns(columns: Sequence[str]) -> list[str]:
    return [c for c in columns if c not in ANNOTATION_COLUMNS] + list(ANNOTATION_COLUMNS)


def build_export(
    filename: str,
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
) -> bytes:
    """업로드와 같은 형식(csv/xlsx)으로 결과 컬럼이 추가된 파일을 만든다."""
    header = export_columns(columns)
    if file_extension(filename) == ".csv":
        return _build_csv(header, rows)
    return _build_xlsx(header, rows)


def save_export(
    filename: str,
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
) -> ExportRecord:
    export_dir = Path(settings.export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)

    ext = file_extension(filename)
    export_id = uuid.uuid4().hex
    download_name = f"processed_{_safe_filename(filename)}"
    path = export_dir / f"{export_id}_{download_name}"
    path.write_bytes(build_export(filename, columns, rows))
    return ExportRecord(
        export_id=export_id,
        filename=download_name,
        media_type=MEDIA_TYPES[ext],
        path=path,
    )


def resolve_export(export_id: str) -> ExportRecord | None:
    if not EXPORT_ID_PATTERN.match(export_id or ""):
        return None
    export_dir = Path(settings.export_dir)
    if not export_dir.exists():
        return None
    for path in export_dir.glob(f"{export_id}_*"):
        download_name = path.name[len(export_id) + 1:]
        return ExportRecord(
            export_id=export_id,
            filename=download_name,
            media_type=MEDIA_TYPES.get(path.suffix.lower(), "application/octet-stream"),
            path=path,
        )
    return None


def cleanup_old_exports(ttl_hours: int | None = None) -> int:
    ttl = settings.export_ttl_hours if ttl_hours is None else ttl_hours
    cutoff = datetime.now(timezone.utc) - timedelta(hours=ttl)
    export_dir = Path(settings.export_dir)
    if not export_dir.exists():
        return 0
    removed = 0
    for path in export_dir.glob("*_processed_*"):
        try:
            mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
            if mtime < cutoff:
                path.unlink(missing_ok=True)
                removed += 1
        except OSError:
            continue
    return removed


def _build_csv(header: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell_text(row.get(column)) for column in header])
    return output.getvalue().encode("utf-8-sig")


def _build_xlsx(header: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET_TITLE
    ws.append(list(header))
    for row in rows:
        ws.append([row.get(column) for column in header])
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _safe_filename(filename: str) -> str:
    name = Path(filename.replace("\\", "/")).name
    return UNSAFE_FILENAME_CHARS.sub("_", name) or "upload"
