from __future__ import annotations

from collections import deque
from datetime import datetime, timezone

from app.core.config import settings
from app.schemas.validation import HistoryEntry, ValidationResult

_history: deque[HistoryEntry] = deque(maxlen=settings.history_size)


def record_result(result: ValidationResult) -> HistoryEntry | None:
    """유효한 번호로 판정된 단건 검증만 최근 이력에 남긴다 (최신순, 프로세스 메모리)."""
    if not result.success or not result.valid:
        return None
    entry = HistoryEntry(
        number=result.number or result.input_number or "",
        line_type=result.line_type,
        valid=result.valid,
        timestamp=datetime.now(timezone.utc),
    )
    _history.appendleft(entry)
    return entry


def list_history() -> list[HistoryEntry]:
    return list(_history)


def clear_history() -> None:
    _history.clear()
