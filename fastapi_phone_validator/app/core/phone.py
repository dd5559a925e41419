from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Sequence

NON_DIGIT_PATTERN = re.compile(r"\D")
MIN_PHONE_DIGITS = 10
US_COUNTRY_CODE = "1"


def normalize_number(raw: Any) -> str | None:
    """
    셀 값을 `+1XXXXXXXXXX` 형태로 정규화한다. 숫자가 10자리 미만이면 None.
    12자리 이상은 자르지 않고 그대로 통과시킨다 (최종 판정은 외부 API 몫).
    """
    if raw is None or raw == "" or isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    digits = NON_DIGIT_PATTERN.sub("", str(raw))
    if len(digits) < MIN_PHONE_DIGITS:
        return None
    if not digits.startswith(US_COUNTRY_CODE):
        digits = US_COUNTRY_CODE + digits
    return f"+{digits}"


def is_phone_column(values: Sequence[Any]) -> bool:
    if not values:
        return False
    match_count = 0
    for value in values:
        cleaned = normalize_number(value)
        if cleaned and len(cleaned) >= MIN_PHONE_DIGITS:
            match_count += 1
    return match_count / len(values) > 0.5


def detect_phone_columns(
    rows: Sequence[Mapping[str, Any]],
    columns: Iterable[str],
) -> list[str]:
    """Return phone-like columns in header order."""
    return [
        column
        for column in columns
        if is_phone_column([row.get(column) for row in rows])
    ]
