from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Sequence

from app.core.phone import detect_phone_columns, normalize_number
from app.schemas.files import BatchStatistics
from app.schemas.validation import ValidationResult
from app.services import number_verification_service

logger = logging.getLogger(__name__)

MOBILE_NUMBER_COLUMN = "Valid Mobile Number"
LINE_TYPE_COLUMN = "Line Type"
ERROR_COLUMN = "Error"
ANNOTATION_COLUMNS = (MOBILE_NUMBER_COLUMN, LINE_TYPE_COLUMN, ERROR_COLUMN)

NOT_FOUND = "Not Found"
INVALID_LINE_TYPE = "Invalid"
DEFAULT_VALIDATION_ERROR = "Validation failed"
PARTIAL_FAILURE_WARNING = (
    "Some numbers could not be validated due to API issues. Check the output file for details."
)

BatchValidator = Callable[[Sequence[str]], Awaitable[List[ValidationResult]]]


class EmptyUploadError(ValueError):
    """처리할 행이 없음."""


@dataclass
class BulkProcessResult:
    columns: List[str]
    candidate_columns: List[str]
    rows: List[Dict[str, Any]]
    statistics: BatchStatistics
    warning: str | None = None


async def process_rows(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str] | None = None,
    *,
    validator: BatchValidator | None = None,
) -> BulkProcessResult:
    """
    업로드된 행에서 전화번호 컬럼을 찾아 일괄 검증하고, 결과 3개 컬럼을 덧붙인 행과 통계를 만든다.

    행마다 후보 컬럼을 감지 순서대로 훑어 정규화 가능하고 검증 결과가 있는 첫 번째 컬럼으로
    결과를 정한다. 이후 컬럼은 보지 않는다.
    """
    if not rows:
        raise EmptyUploadError("Invalid file format or empty file")

    header = list(columns) if columns is not None else list(rows[0].keys())
    candidate_columns = detect_phone_columns(rows, header)
    logger.info("전화번호 후보 컬럼: %s", candidate_columns)

    numbers = _collect_numbers(rows, candidate_columns)
    validate = validator or number_verification_service.validate_numbers
    results = await validate(numbers) if numbers else []

    # 응답의 number 문자열과 정규화 번호가 정확히 같아야 매칭된다.
    results_by_number: Dict[str, ValidationResult] = {}
    for result in results:
        if result.number:
            results_by_number.setdefault(result.number, result)

    annotated = [
        _annotate_row(row, candidate_columns, results_by_number)
        for row in rows
    ]
    statistics = _compute_statistics(annotated)

    warning = None
    if any(not result.success for result in results):
        warning = PARTIAL_FAILURE_WARNING
        logger.warning("일괄 검증 중 일부 번호 실패 (failed=%s)", sum(not r.success for r in results))

    return BulkProcessResult(
        columns=header,
        candidate_columns=candidate_columns,
        rows=annotated,
        statistics=statistics,
        warning=warning,
    )


def _collect_numbers(
    rows: Sequence[Mapping[str, Any]],
    candidate_columns: Sequence[str],
) -> List[str]:
    seen: set[str] = set()
    numbers: List[str] = []
    for row in rows:
        for column in candidate_columns:
            cleaned = normalize_number(row.get(column))
            if cleaned and cleaned not in seen:
                seen.add(cleaned)
                numbers.append(cleaned)
    return numbers


def _annotate_row(
    row: Mapping[str, Any],
    candidate_columns: Sequence[str],
    results_by_number: Mapping[str, ValidationResult],
) -> Dict[str, Any]:
    found_mobile: str | None = None
    line_type = INVALID_LINE_TYPE
    error: str | None = None

    for column in candidate_columns:
        cleaned = normalize_number(row.get(column))
        if not cleaned:
            continue
        result = results_by_number.get(cleaned)
        if result is None:
            continue
        if result.valid:
            line_type = _capitalize(result.line_type)
            if result.line_type == "mobile":
                found_mobile = cleaned
        else:
            line_type = INVALID_LINE_TYPE
            error = result.error or DEFAULT_VALIDATION_ERROR
        break

    annotated = dict(row)
    annotated[MOBILE_NUMBER_COLUMN] = found_mobile or NOT_FOUND
    annotated[LINE_TYPE_COLUMN] = line_type
    annotated[ERROR_COLUMN] = error or ""
    return annotated


def _capitalize(value: str) -> str:
    if not value:
        return INVALID_LINE_TYPE
    return value[0].upper() + value[1:]


def _compute_statistics(rows: Sequence[Mapping[str, Any]]) -> BatchStatistics:
    line_types = [row[LINE_TYPE_COLUMN] for row in rows]
    return BatchStatistics(
        total=len(rows),
        mobile=line_types.count("Mobile"),
        landline=line_types.count("Landline"),
        invalid=line_types.count(INVALID_LINE_TYPE),
    )
