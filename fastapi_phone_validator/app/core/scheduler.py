from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.tasks.export_cleanup import run_export_cleanup_job

logger = logging.getLogger(__name__)
_scheduler: BackgroundScheduler | None = None


def start_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        return
    if not settings.export_cleanup_enabled:
        logger.info("결과 파일 정리 스케줄러 비활성화 상태 (EXPORT_CLEANUP_ENABLED=false)")
        return

    _scheduler = BackgroundScheduler(timezone="UTC")
    _scheduler.add_job(
        run_export_cleanup_job,
        IntervalTrigger(minutes=settings.export_cleanup_interval_minutes),
        id="export_cleanup",
        max_instances=1,
        replace_existing=True,
        coalesce=True,
    )
    _scheduler.start()
    logger.info("스케줄러 시작")


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        logger.info("스케줄러 종료")
        _scheduler = None
