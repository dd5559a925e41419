from __future__ import annotations

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging() -> None:
    global _configured
    if _configured:
        return
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level)
    # httpx 는 요청마다 INFO 로그를 남기므로 한 단계 올린다.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    _configured = True
