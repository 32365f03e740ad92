from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from collab_metrics.application.dto.metrics_dto import (
    DashboardResponseDto,
    PerformanceDto,
    TaskSummaryDto,
)
from collab_metrics.domain.entities.submission import Submission
from collab_metrics.domain.entities.task import TaskStatus
from collab_metrics.domain.repositories.project_repository import ProjectRepositoryInterface
from collab_metrics.domain.repositories.submission_repository import SubmissionRepositoryInterface
from collab_metrics.domain.repositories.task_repository import TaskRepositoryInterface
from collab_metrics.domain.services.performance_domain_service import PerformanceDomainService
from collab_metrics.domain.services.quality_domain_service import QualityDomainService
from collab_metrics.domain.services.task_metrics_domain_service import TaskMetricsDomainService
from collab_metrics.domain.value_objects.rating import Rating
from collab_metrics.utils.concurrency import ConcurrencyCoordinator

logger = logging.getLogger(__name__)

_DASHBOARD_RECENT_ACTIVITY_LIMIT = 3


def approved_ratings(submissions: Sequence[Submission]) -> List[Optional[Rating]]:
    """承認済み提出物の評価のみ（未評価はNoneのまま残し、品質計算側で除外する）"""
    return [submission.rating for submission in submissions if submission.is_approved()]


class DashboardApplicationService:
    """コラボレーターダッシュボード

    評価の取得元（プロジェクト提出物・コラボレーション提出物など）は複数指定でき、
    品質スコアは全ソースの評価を結合してから算出する。
    """

    def __init__(
        self,
        task_repository: TaskRepositoryInterface,
        project_repository: ProjectRepositoryInterface,
        submission_repositories: Sequence[SubmissionRepositoryInterface],
        concurrency_coordinator: Optional[ConcurrencyCoordinator] = None,
        task_metrics_service: Optional[TaskMetricsDomainService] = None,
        quality_service: Optional[QualityDomainService] = None,
        performance_service: Optional[PerformanceDomainService] = None,
    ):
        self.task_repository = task_repository
        self.project_repository = project_repository
        self.submission_repositories = list(submission_repositories)
        self.concurrency = concurrency_coordinator or ConcurrencyCoordinator()
        self.task_metrics_service = task_metrics_service or TaskMetricsDomainService()
        self.quality_service = quality_service or QualityDomainService()
        self.performance_service = performance_service or PerformanceDomainService()

    async def get_dashboard(
        self,
        member_id: str,
        reference_time: Optional[datetime] = None,
    ) -> DashboardResponseDto:
        tasks, projects, *submission_sources = await self.concurrency.gather(
            self.task_repository.find_by_assignee(member_id),
            self.project_repository.find_by_member(member_id),
            *(repository.find_by_user(member_id) for repository in self.submission_repositories),
        )

        rating_sources = [approved_ratings(source) for source in submission_sources]
        merged_ratings = self.quality_service.merge_sources(*rating_sources)
        logger.info(
            f"📊 ダッシュボード集計: {member_id} タスク{len(tasks)}件 / 評価{len(merged_ratings)}件"
        )

        breakdown = self.task_metrics_service.aggregate(tasks, reference_time)
        timeliness = self.task_metrics_service.timeliness(tasks)
        quality_percent = self.quality_service.quality(merged_ratings)
        score = self.performance_service.performance(
            breakdown.completion_percent,
            quality_percent,
            timeliness.timeliness_percent,
        )

        return DashboardResponseDto(
            member_id=member_id,
            total_tasks=breakdown.total,
            completed_tasks=breakdown.completed,
            tasks_completed_percent=breakdown.completion_percent,
            active_projects=len(projects),
            pending_reviews=breakdown.by_status[TaskStatus.REVIEW],
            quality_percent=quality_percent,
            rated_submissions=len(merged_ratings),
            average_rating=self.quality_service.average_rating(merged_ratings),
            timeliness_percent=timeliness.timeliness_percent,
            performance=PerformanceDto.from_score(score),
            recent_activity=[
                TaskSummaryDto.from_task(task)
                for task in self.task_metrics_service.recent_activity(tasks, limit=_DASHBOARD_RECENT_ACTIVITY_LIMIT)
            ],
        )
