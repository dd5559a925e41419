from __future__ import annotations

import io

from fastapi import APIRouter, HTTPException, Request, UploadFile
from fastapi.responses import StreamingResponse

from app.core.phone import detect_phone_columns
from app.schemas.files import FilePreview, FileProcessSummary
from app.services import bulk_service, export_service, upload_service

router = APIRouter(prefix="/files", tags=["files"])

PREVIEW_ROW_LIMIT = 5


@router.post("/preview", response_model=FilePreview)
async def preview_file(file: UploadFile):
    """
    업로드 파일의 앞 5행과 전화번호 후보 컬럼을 돌려준다.
    """
    file_bytes = await file.read()
    try:
        parsed = upload_service.parse_upload(file.filename, file_bytes)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return FilePreview(
        filename=file.filename or "",
        columns=parsed.columns,
        candidate_columns=detect_phone_columns(parsed.rows, parsed.columns),
        total_rows=len(parsed.rows),
        rows=parsed.rows[:PREVIEW_ROW_LIMIT],
    )


@router.post("/process", response_model=FileProcessSummary)
async def process_file(file: UploadFile, request: Request):
    """
    업로드 파일의 전화번호를 일괄 검증하고 결과 컬럼(Valid Mobile Number, Line Type, Error)을
    붙인 행, 통계, 다운로드 경로를 돌려준다.
    """
    file_bytes = await file.read()
    filename = file.filename or ""
    try:
        parsed = upload_service.parse_upload(filename, file_bytes)
        result = await bulk_service.process_rows(parsed.rows, parsed.columns)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    record = export_service.save_export(filename, result.columns, result.rows)
    return FileProcessSummary(
        filename=filename,
        columns=export_service.export_columns(result.columns),
        candidate_columns=result.candidate_columns,
        statistics=result.statistics,
        rows=result.rows,
        warning=result.warning,
        export_id=record.export_id,
        download_url=str(request.url_for("download_export", export_id=record.export_id)),
    )


@router.get("/exports/{export_id}", name="download_export")
def download_export(export_id: str):
    """
    처리 결과 파일 다운로드. 보관 기간(EXPORT_TTL_HOURS)이 지나면 404.
    """
    record = export_service.resolve_export(export_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Export not found or expired")
    stream = io.BytesIO(record.path.read_bytes())
    return StreamingResponse(
        stream,
        media_type=record.media_type,
        headers={"Content-Disposition": f"attachment; filename={record.filename}"},
    )
