"""Daily backup job."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from condo.backup import BackupOperator

logger = logging.getLogger(__name__)


async def run_daily_backup(backup: BackupOperator, retention_days: int) -> int:
    """Create today's dump, then expire dumps past the retention window.

    Returns the number of old backups removed.
    """
    path = await backup.create_backup()
    removed = await backup.clean_old_backups(retention_days)
    logger.info("Daily backup written to %s, %d old backup(s) removed", path, removed)
    return removed
