from __future__ import annotations

import logging

from app.core.config import settings
from app.services.export_service import cleanup_old_exports

logger = logging.getLogger(__name__)


def run_export_cleanup_job() -> None:
    if not settings.export_cleanup_enabled:
        return
    try:
        removed = cleanup_old_exports()
        logger.debug("export cleanup executed (removed=%s)", removed)
    except Exception:  # noqa: BLE001
        logger.exception("export cleanup failed")
