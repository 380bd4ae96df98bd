"""
Daily-task streak on top of the key-value store.

The counter goes up by one on the first completion of each calendar day and
never goes down: missing a day does not reset it. Completing twice on the
same day is a no-op.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from docshelf.domain.models import StreakStatus
from docshelf.storage.errors import StorageError
from docshelf.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

STREAK_COUNT_KEY = "@streak_count"
LAST_COMPLETED_KEY = "@last_completed_date"


class StreakTracker:
    def __init__(self, store: KeyValueStore, today: Optional[Callable[[], date]] = None):
        self.store = store
        self._today = today or date.today

    def today(self) -> str:
        """Current day as an ISO date string, independent of locale."""
        return self._today().isoformat()

    async def get_streak(self) -> StreakStatus:
        """
        Read the stored state. Missing or unreadable values read as zero / never.
        """
        try:
            raw_count = await self.store.get(STREAK_COUNT_KEY)
            last_completed = await self.store.get(LAST_COMPLETED_KEY)
        except StorageError as e:
            logger.warning(f"Could not read streak state, reporting defaults: {e}")
            return StreakStatus()

        return StreakStatus(
            count=_parse_count(raw_count),
            completed_today=last_completed == self.today(),
            last_completed=last_completed,
        )

    async def complete_daily_task(self) -> StreakStatus:
        """
        Record today's completion. Idempotent within one calendar day.
        """
        current = await self.get_streak()
        if current.completed_today:
            return current

        today = self.today()
        new_count = current.count + 1
        # Date first: if the count write then fails, today is marked done and
        # a retry cannot count the same day twice.
        try:
            await self.store.set(LAST_COMPLETED_KEY, today)
            await self.store.set(STREAK_COUNT_KEY, str(new_count))
        except StorageError as e:
            logger.error(f"Could not persist daily task completion: {e}")
            return current

        logger.info(f"Daily task completed on {today}, streak is now {new_count}")
        return StreakStatus(count=new_count, completed_today=True, last_completed=today)


def _parse_count(raw: Optional[str]) -> int:
    if raw is None:
        return 0
    try:
        return max(0, int(raw))
    except ValueError:
        logger.warning(f"Ignoring invalid stored streak count {raw!r}")
        return 0
