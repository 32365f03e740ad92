from __future__ import annotations

import re
from calendar import monthrange
from datetime import datetime, timedelta
from typing import Optional

from collab_metrics.domain.entities.project_metrics import DateRange
from collab_metrics.utils.time_utils import ensure_utc

_DURATION_PATTERN = re.compile(r"(\d+)\s*(day|week|month|year)s?\b", re.IGNORECASE)
_DEFAULT_WINDOW_MONTHS = 1


def add_months(value: datetime, months: int) -> datetime:
    """暦月で加算する。月末を超える日は対象月の末日に丸める（1/31 + 1ヶ月 → 2/28 or 2/29）"""
    month_index = value.month - 1 + months
    target_year = value.year + month_index // 12
    target_month = month_index % 12 + 1
    max_day = monthrange(target_year, target_month)[1]
    return value.replace(year=target_year, month=target_month, day=min(value.day, max_day))


class DateRangeDomainService:
    """プロジェクト期間（開始〜終了）の解決"""

    def resolve_range(
        self,
        start_date: Optional[datetime],
        explicit_end_date: Optional[datetime] = None,
        duration_text: Optional[str] = None,
    ) -> DateRange:
        start = ensure_utc(start_date)
        if start is None:
            return DateRange(start=None, end=None)

        if explicit_end_date is not None:
            return DateRange(start=start, end=ensure_utc(explicit_end_date))

        end = self.end_from_duration(start, duration_text)
        if end is None:
            end = add_months(start, _DEFAULT_WINDOW_MONTHS)
        return DateRange(start=start, end=end)

    @staticmethod
    def end_from_duration(start: datetime, duration_text: Optional[str]) -> Optional[datetime]:
        """「3 months」「2 weeks」形式の期間文字列から終了日を算出。解釈できなければNone"""
        if not duration_text:
            return None
        match = _DURATION_PATTERN.search(duration_text)
        if not match:
            return None

        amount = int(match.group(1))
        unit = match.group(2).lower()
        if unit == "day":
            return start + timedelta(days=amount)
        if unit == "week":
            return start + timedelta(days=amount * 7)
        if unit == "month":
            return add_months(start, amount)
        return add_months(start, amount * 12)
