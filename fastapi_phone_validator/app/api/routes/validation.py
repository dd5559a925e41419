from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from app.core.phone import normalize_number
from app.core.retry import PhoneAPIError
from app.schemas.validation import (
    HistoryEntry,
    NumbersValidationRequest,
    NumbersValidationResponse,
    ValidationResult,
)
from app.services import history_service, number_verification_service

router = APIRouter(tags=["validation"])


@router.get("/validate-number", response_model=ValidationResult, response_model_exclude_none=True)
async def validate_number_endpoint(
    number: str | None = Query(default=None, description="검증할 전화번호 (E.164 권장)"),
):
    """
    단건 번호 검증. 정규화(+1XXXXXXXXXX) 후 외부 API 를 호출한다.
    """
    if not number or not number.strip():
        raise HTTPException(status_code=400, detail="Phone number is required")
    cleaned = normalize_number(number)
    if not cleaned:
        raise HTTPException(status_code=400, detail="Invalid phone number format")

    try:
        result = await number_verification_service.validate_number(cleaned)
    except PhoneAPIError as exc:
        raise HTTPException(status_code=500, detail=f"Failed to validate number: {exc}") from exc

    history_service.record_result(result)
    return result


@router.get("/validate-number/history", response_model=list[HistoryEntry])
async def get_validation_history():
    """
    최근 성공한 단건 검증 이력 (최신순, 최대 HISTORY_SIZE 건).
    """
    return history_service.list_history()


@router.post("/validate-numbers", response_model=NumbersValidationResponse)
async def validate_numbers_endpoint(payload: NumbersValidationRequest):
    """
    번호 목록 일괄 검증. 개별 실패는 결과 항목의 error 로 내려가고 전체 요청은 실패하지 않는다.
    """
    if not isinstance(payload.numbers, list) or not payload.numbers:
        raise HTTPException(status_code=400, detail="Array of phone numbers is required")
    results = await number_verification_service.validate_numbers(payload.numbers)
    return NumbersValidationResponse(success=True, results=results)
