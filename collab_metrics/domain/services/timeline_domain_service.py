from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from collab_metrics.domain.entities.project_metrics import TimelineProgress
from collab_metrics.domain.services.percentages import clamp
from collab_metrics.utils.time_utils import ensure_utc, normalize_reference_time

_ZERO = timedelta(0)


class TimelineDomainService:
    """プロジェクト期間に対する経過・残り時間と進捗率"""

    def timeline_progress(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
        now: Optional[datetime] = None,
    ) -> Optional[TimelineProgress]:
        """開始・終了のどちらかが欠けている場合は算出不能としてNoneを返す"""
        if start is None or end is None:
            return None

        start = ensure_utc(start)
        end = ensure_utc(end)
        now = normalize_reference_time(now)

        total = end - start
        if total <= _ZERO:
            return TimelineProgress(elapsed=_ZERO, remaining=_ZERO, is_completed=True, progress_percent=100.0)

        if now > end:
            return TimelineProgress(elapsed=total, remaining=_ZERO, is_completed=True, progress_percent=100.0)

        elapsed = max(now - start, _ZERO)
        return TimelineProgress(
            elapsed=elapsed,
            remaining=end - now,
            is_completed=False,
            progress_percent=clamp(elapsed / total * 100, 0.0, 100.0),
        )
