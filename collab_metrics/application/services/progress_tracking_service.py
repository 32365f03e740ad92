from __future__ import annotations

from datetime import datetime
from typing import Optional

from collab_metrics.application.dto.metrics_dto import (
    DistributionEntryDto,
    PerformanceDto,
    ProgressTrackingResponseDto,
    TaskSummaryDto,
)
from collab_metrics.domain.repositories.task_repository import TaskRepositoryInterface
from collab_metrics.domain.services.performance_domain_service import PerformanceDomainService
from collab_metrics.domain.services.task_metrics_domain_service import TaskMetricsDomainService


class ProgressTrackingApplicationService:
    """個人の進捗トラッキング"""

    def __init__(
        self,
        task_repository: TaskRepositoryInterface,
        task_metrics_service: Optional[TaskMetricsDomainService] = None,
        performance_service: Optional[PerformanceDomainService] = None,
    ):
        self.task_repository = task_repository
        self.task_metrics_service = task_metrics_service or TaskMetricsDomainService()
        self.performance_service = performance_service or PerformanceDomainService()

    async def get_progress(
        self,
        member_id: str,
        project_id: Optional[str] = None,
        reference_time: Optional[datetime] = None,
    ) -> ProgressTrackingResponseDto:
        tasks = await self.task_repository.find_by_assignee(member_id)
        if project_id:
            tasks = [task for task in tasks if task.project_id == project_id]

        breakdown = self.task_metrics_service.aggregate(tasks, reference_time)
        timeliness = self.task_metrics_service.timeliness(tasks)
        # 品質はこの画面では扱わないため、数値スコアのみ返す
        performance = PerformanceDto(
            performance_percentage=self.performance_service.weighted_score(
                breakdown.completion_percent,
                timeliness.timeliness_percent,
            )
        )

        return ProgressTrackingResponseDto(
            member_id=member_id,
            project_id=project_id,
            total_tasks=breakdown.total,
            completion_rate=breakdown.completion_percent,
            timeliness_rate=timeliness.timeliness_percent,
            on_time_tasks=timeliness.on_time_count,
            judged_tasks=timeliness.completed_count,
            performance=performance,
            status_distribution=[DistributionEntryDto.from_entry(e) for e in breakdown.status_distribution],
            priority_distribution=[DistributionEntryDto.from_entry(e) for e in breakdown.priority_distribution],
            recent_activity=[
                TaskSummaryDto.from_task(task) for task in self.task_metrics_service.recent_activity(tasks)
            ],
        )
