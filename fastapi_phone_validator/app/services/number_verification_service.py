from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, List

import httpx

from app.core.config import settings
from app.core.retry import PhoneAPIError, run_with_retry
from app.schemas.validation import ValidationResult

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


async def validate_number(
    number: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> ValidationResult:
    """
    단건 검증. 재시도 후에도 실패하면 PhoneAPIError 를 그대로 올린다.
    """
    async with _client_scope(client) as http:
        data = await _fetch_with_retry(http, number)
    logger.info("번호 검증 완료 (number=%s, valid=%s)", number, data.get("valid"))
    return _to_result(number, data)


async def validate_numbers(
    numbers: Iterable[Any],
    *,
    client: httpx.AsyncClient | None = None,
) -> List[ValidationResult]:
    """
    번호마다 외부 API 를 한 번씩 호출한다. 개별 실패는 실패 결과로 바꿔 담고
    나머지 번호는 계속 처리한다. 결과는 입력 순서와 같고 입력 1건당 1건이다.
    """
    targets = list(numbers)
    if not targets:
        return []

    semaphore = asyncio.Semaphore(settings.phone_api_concurrency)

    async with _client_scope(client) as http:

        async def _bounded(number: Any) -> ValidationResult:
            async with semaphore:
                return await _validate_isolated(http, number)

        results = await asyncio.gather(*(_bounded(number) for number in targets))

    failed = sum(1 for result in results if not result.success)
    logger.info("일괄 번호 검증 완료 (total=%s, failed=%s)", len(results), failed)
    return list(results)


# --------------------------------------------------------------------------- #
# Internal helpers

@asynccontextmanager
async def _client_scope(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.phone_api_timeout) as owned:
        yield owned


async def _validate_isolated(http: httpx.AsyncClient, number: Any) -> ValidationResult:
    if number is None or not str(number).strip():
        return _failure_result(number, "Invalid number")

    phone_number = str(number).strip()
    try:
        data = await _fetch_with_retry(http, phone_number)
        return _to_result(phone_number, data)
    except PhoneAPIError as exc:
        logger.error("번호 검증 실패 (number=%s): %s", phone_number, exc)
        return _failure_result(phone_number, f"API connection failed: {exc}")
    except Exception as exc:  # noqa: BLE001
        # 한 번호의 예기치 못한 오류가 배치 전체를 중단시키지 않도록 결과로 변환
        logger.exception("번호 검증 중 예기치 못한 오류 (number=%s)", phone_number)
        return _failure_result(
            phone_number,
            f"API connection failed: {exc.__class__.__name__}: {exc}",
        )


async def _fetch_with_retry(http: httpx.AsyncClient, number: str) -> Dict[str, Any]:
    return await run_with_retry(
        "number_verification",
        lambda: _get(http, number),
        attempts=settings.phone_api_max_attempts,
        delay=settings.phone_api_retry_delay_seconds,
    )


async def _get(http: httpx.AsyncClient, number: str) -> Dict[str, Any]:
    if not settings.phone_api_key:
        raise PhoneAPIError("API_KEY is not configured")

    try:
        response = await http.get(
            settings.phone_api_base_url,
            params={"number": number},
            headers={"apikey": settings.phone_api_key},
        )
    except httpx.HTTPError as exc:  # 네트워크/타임아웃 오류
        raise PhoneAPIError(f"{exc.__class__.__name__}: {exc}", retryable=True) from exc

    if not response.is_success:
        logger.error(
            "번호 검증 API 오류 (number=%s, status=%s %s): %s",
            number,
            response.status_code,
            response.reason_phrase,
            response.text,
        )
        raise PhoneAPIError(
            f"API error: {response.status_code} {response.reason_phrase or UNKNOWN}",
            status_code=response.status_code,
            retryable=True,
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise PhoneAPIError("API returned a non-JSON response") from exc
    if not isinstance(data, dict):
        raise PhoneAPIError("API returned an unexpected payload")
    return data


def _to_result(number: str, data: Dict[str, Any]) -> ValidationResult:
    return ValidationResult(
        input_number=number,
        success=True,
        valid=bool(data.get("valid")),
        line_type=data.get("line_type") or "unknown",
        number=data.get("international_format") or number,
        carrier=data.get("carrier") or UNKNOWN,
        location=data.get("location") or UNKNOWN,
        country=data.get("country_name") or UNKNOWN,
    )


def _failure_result(number: Any, message: str) -> ValidationResult:
    text = None if number is None else str(number)
    return ValidationResult(
        input_number=text,
        success=False,
        valid=False,
        line_type="invalid",
        number=text,
        error=message,
    )
