from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional

from collab_metrics.domain.entities.task import TaskPriority, TaskStatus


class PerformanceLabel(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_IMPROVEMENT = "Needs improvement"


@dataclass(frozen=True, slots=True)
class DateRange:
    start: Optional[datetime]
    end: Optional[datetime]

    @property
    def is_available(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass(frozen=True, slots=True)
class DistributionEntry:
    name: str
    value: int
    percentage: int


@dataclass(frozen=True, slots=True)
class TaskBreakdown:
    total: int
    completed: int
    in_progress: int
    overdue: int
    by_status: Dict[TaskStatus, int]
    by_priority: Dict[TaskPriority, int]
    completion_percent: int
    status_distribution: List[DistributionEntry] = field(default_factory=list)
    priority_distribution: List[DistributionEntry] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TimelinessSummary:
    on_time_count: int
    completed_count: int
    timeliness_percent: int


@dataclass(frozen=True, slots=True)
class MemberProductivity:
    member_id: str
    name: str
    initials: str
    completed: int
    total: int
    percent: int


@dataclass(frozen=True, slots=True)
class TimelineProgress:
    elapsed: timedelta
    remaining: timedelta
    is_completed: bool
    progress_percent: float

    @property
    def elapsed_ms(self) -> int:
        return int(self.elapsed / timedelta(milliseconds=1))

    @property
    def remaining_ms(self) -> int:
        return int(self.remaining / timedelta(milliseconds=1))


@dataclass(frozen=True, slots=True)
class PerformanceScore:
    performance_percent: int
    label: PerformanceLabel
