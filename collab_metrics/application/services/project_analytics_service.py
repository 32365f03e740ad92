from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from collab_metrics.application.dto.metrics_dto import (
    DistributionEntryDto,
    MemberProductivityDto,
    ProjectAnalyticsResponseDto,
    ProjectSummaryDto,
    TimelineDto,
)
from collab_metrics.application.errors import EntityNotFoundError
from collab_metrics.domain.repositories.project_repository import ProjectRepositoryInterface
from collab_metrics.domain.repositories.task_repository import TaskRepositoryInterface
from collab_metrics.domain.services.date_range_domain_service import DateRangeDomainService
from collab_metrics.domain.services.task_metrics_domain_service import TaskMetricsDomainService
from collab_metrics.domain.services.timeline_domain_service import TimelineDomainService
from collab_metrics.utils.concurrency import ConcurrencyCoordinator
from collab_metrics.utils.time_utils import normalize_reference_time

logger = logging.getLogger(__name__)


class ProjectAnalyticsApplicationService:
    """プロジェクト分析アプリケーションサービス"""

    def __init__(
        self,
        project_repository: ProjectRepositoryInterface,
        task_repository: TaskRepositoryInterface,
        concurrency_coordinator: Optional[ConcurrencyCoordinator] = None,
        task_metrics_service: Optional[TaskMetricsDomainService] = None,
        date_range_service: Optional[DateRangeDomainService] = None,
        timeline_service: Optional[TimelineDomainService] = None,
    ):
        self.project_repository = project_repository
        self.task_repository = task_repository
        self.concurrency = concurrency_coordinator or ConcurrencyCoordinator()
        self.task_metrics_service = task_metrics_service or TaskMetricsDomainService()
        self.date_range_service = date_range_service or DateRangeDomainService()
        self.timeline_service = timeline_service or TimelineDomainService()

    async def list_member_projects(self, member_id: str) -> List[ProjectSummaryDto]:
        """メンバーが参加しているプロジェクト一覧"""
        projects = await self.project_repository.find_by_member(member_id)
        return [ProjectSummaryDto.from_project(project) for project in projects]

    async def get_project_analytics(
        self,
        project_id: str,
        reference_time: Optional[datetime] = None,
    ) -> ProjectAnalyticsResponseDto:
        now = normalize_reference_time(reference_time)

        project, tasks = await self.concurrency.gather(
            self.project_repository.find_by_id(project_id),
            self.task_repository.find_by_project(project_id),
        )
        if project is None:
            raise EntityNotFoundError("Project", project_id)

        logger.info(f"📈 プロジェクト分析: {project.title} ({len(tasks)}タスク)")

        breakdown = self.task_metrics_service.aggregate(tasks, now)
        members = project.unique_team_members()
        productivity = self.task_metrics_service.by_member(tasks, members)

        date_range = self.date_range_service.resolve_range(
            project.start_date,
            project.end_date,
            project.duration,
        )
        progress = self.timeline_service.timeline_progress(date_range.start, date_range.end, now)

        return ProjectAnalyticsResponseDto(
            project_id=project.id,
            project_title=project.title,
            progress=breakdown.completion_percent,
            total_tasks=breakdown.total,
            completed_tasks=breakdown.completed,
            in_progress_tasks=breakdown.in_progress,
            overdue_tasks=breakdown.overdue,
            budget=project.budget or 0.0,
            team_size=len(members),
            status_distribution=[DistributionEntryDto.from_entry(e) for e in breakdown.status_distribution],
            priority_distribution=[DistributionEntryDto.from_entry(e) for e in breakdown.priority_distribution],
            team_productivity=[MemberProductivityDto.from_entry(e) for e in productivity],
            timeline=TimelineDto.build(date_range, progress, project.duration),
        )
