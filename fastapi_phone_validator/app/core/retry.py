from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class PhoneAPIError(RuntimeError):
    """번호 검증 API 호출 오류."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


async def run_with_retry(
    operation: str,
    func: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    delay: float = 1.0,
) -> T:
    """
    재시도 가능한 PhoneAPIError 에 한해 고정 지연(delay 초) 후 최대 attempts 회까지 호출한다.
    마지막 시도의 오류는 그대로 전파한다.
    """
    attempt = 1
    while True:
        try:
            return await func()
        except PhoneAPIError as exc:
            if not exc.retryable or attempt >= attempts:
                raise
            logger.warning(
                "%s 재시도 (%s/%s) %.1f초 후: %s",
                operation,
                attempt,
                attempts,
                delay,
                exc,
            )
            await asyncio.sleep(delay)
            attempt += 1
