from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Type, TypeVar

from collab_metrics.domain.entities.project_metrics import (
    DistributionEntry,
    MemberProductivity,
    TaskBreakdown,
    TimelinessSummary,
)
from collab_metrics.domain.entities.task import MemberRef, Task, TaskPriority, TaskStatus
from collab_metrics.domain.services.percentages import percent_of
from collab_metrics.utils.time_utils import ensure_utc, normalize_reference_time

_RECENT_ACTIVITY_LIMIT = 5

E = TypeVar("E", TaskStatus, TaskPriority)


def _complete_histogram(counter: Counter, categories: Type[E]) -> Dict[E, int]:
    return {category: counter.get(category, 0) for category in categories}


def _distribution(histogram: Dict, total: int) -> List[DistributionEntry]:
    return [
        DistributionEntry(name=category.value, value=count, percentage=percent_of(count, total))
        for category, count in histogram.items()
    ]


class TaskMetricsDomainService:
    """タスク集計のドメインロジック"""

    def aggregate(
        self,
        tasks: Sequence[Task],
        reference_time: Optional[datetime] = None,
    ) -> TaskBreakdown:
        ref_time = normalize_reference_time(reference_time)

        status_counter: Counter = Counter(task.status for task in tasks)
        priority_counter: Counter = Counter(task.priority for task in tasks)

        overdue = 0
        for task in tasks:
            if task.is_done() or task.due_date is None:
                continue
            if ensure_utc(task.due_date) < ref_time:
                overdue += 1

        total = len(tasks)
        completed = status_counter.get(TaskStatus.DONE, 0)
        by_status = _complete_histogram(status_counter, TaskStatus)
        by_priority = _complete_histogram(priority_counter, TaskPriority)

        return TaskBreakdown(
            total=total,
            completed=completed,
            in_progress=status_counter.get(TaskStatus.IN_PROGRESS, 0),
            overdue=overdue,
            by_status=by_status,
            by_priority=by_priority,
            completion_percent=percent_of(completed, total),
            status_distribution=_distribution(by_status, total),
            priority_distribution=_distribution(by_priority, total),
        )

    def timeliness(self, tasks: Iterable[Task]) -> TimelinessSummary:
        on_time = 0
        judged = 0
        for task in tasks:
            if not task.is_done() or task.due_date is None:
                # 納期のない完了タスクは判定不能なので分母にも含めない
                continue
            judged += 1
            if ensure_utc(task.completion_timestamp()) <= ensure_utc(task.due_date):
                on_time += 1

        return TimelinessSummary(
            on_time_count=on_time,
            completed_count=judged,
            timeliness_percent=percent_of(on_time, judged),
        )

    def by_member(
        self,
        tasks: Iterable[Task],
        members: Sequence[MemberRef],
    ) -> List[MemberProductivity]:
        task_list = list(tasks)
        member_ids = {member.id for member in members}

        totals: Counter = Counter()
        completed: Counter = Counter()
        for task in task_list:
            if task.assignee is None or task.assignee.id not in member_ids:
                continue
            totals[task.assignee.id] += 1
            if task.is_done():
                completed[task.assignee.id] += 1

        return [
            MemberProductivity(
                member_id=member.id,
                name=member.name,
                initials=member.initials,
                completed=completed[member.id],
                total=totals[member.id],
                percent=percent_of(completed[member.id], totals[member.id]),
            )
            for member in members
        ]

    @staticmethod
    def recent_activity(tasks: Iterable[Task], limit: int = _RECENT_ACTIVITY_LIMIT) -> List[Task]:
        """最近更新されたタスク（updated_at → created_at の降順）"""
        ordered = sorted(tasks, key=lambda task: ensure_utc(task.last_activity_at()), reverse=True)
        return ordered[:limit]
