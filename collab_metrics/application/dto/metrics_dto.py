import math
from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, Field

from collab_metrics.domain.entities.project import Project
from collab_metrics.domain.entities.project_metrics import (
    DateRange,
    DistributionEntry,
    MemberProductivity,
    PerformanceScore,
    TimelineProgress,
)
from collab_metrics.domain.entities.task import Task


def format_days(value: Optional[timedelta]) -> str:
    """経過・残り時間の表示用文字列（日数は切り上げ）"""
    if not value or value <= timedelta(0):
        return "0 days"
    days = math.ceil(value / timedelta(days=1))
    return f"{days} day{'' if days == 1 else 's'}"


class DistributionEntryDto(BaseModel):
    name: str
    value: int
    percentage: int

    @classmethod
    def from_entry(cls, entry: DistributionEntry) -> "DistributionEntryDto":
        return cls(name=entry.name, value=entry.value, percentage=entry.percentage)


class MemberProductivityDto(BaseModel):
    member_id: str
    name: str
    avatar: str = Field(..., description="名前の頭文字")
    completed: int
    total: int
    percentage: int

    @classmethod
    def from_entry(cls, entry: MemberProductivity) -> "MemberProductivityDto":
        return cls(
            member_id=entry.member_id,
            name=entry.name,
            avatar=entry.initials,
            completed=entry.completed,
            total=entry.total,
            percentage=entry.percent,
        )


class TimelineDto(BaseModel):
    """プロジェクト期間の進捗（開始・終了が不明な場合は available=False）"""
    available: bool
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[str] = None
    elapsed_ms: Optional[int] = None
    remaining_ms: Optional[int] = None
    elapsed_label: Optional[str] = None
    remaining_label: Optional[str] = None
    is_completed: Optional[bool] = None
    progress_percentage: Optional[float] = None

    @classmethod
    def build(
        cls,
        date_range: DateRange,
        progress: Optional[TimelineProgress],
        duration: Optional[str] = None,
    ) -> "TimelineDto":
        if progress is None:
            return cls(available=False, start_date=date_range.start, end_date=date_range.end, duration=duration)
        return cls(
            available=True,
            start_date=date_range.start,
            end_date=date_range.end,
            duration=duration,
            elapsed_ms=progress.elapsed_ms,
            remaining_ms=progress.remaining_ms,
            elapsed_label=format_days(progress.elapsed),
            remaining_label=format_days(progress.remaining),
            is_completed=progress.is_completed,
            progress_percentage=progress.progress_percent,
        )


class PerformanceDto(BaseModel):
    performance_percentage: int = Field(..., description="完了率70% + 納期遵守率30%")
    label: Optional[str] = Field(None, description="品質を含む3指標の閾値判定ラベル")

    @classmethod
    def from_score(cls, score: PerformanceScore) -> "PerformanceDto":
        return cls(performance_percentage=score.performance_percent, label=score.label.value)


class TaskSummaryDto(BaseModel):
    id: str
    title: str
    status: str
    priority: str
    project_id: Optional[str] = None
    due_date: Optional[datetime] = None
    updated_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskSummaryDto":
        return cls(
            id=task.id,
            title=task.title,
            status=task.status.value,
            priority=task.priority.value,
            project_id=task.project_id,
            due_date=task.due_date,
            updated_at=task.last_activity_at(),
        )


class ProjectSummaryDto(BaseModel):
    id: str
    title: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[str] = None
    team_size: int

    @classmethod
    def from_project(cls, project: Project) -> "ProjectSummaryDto":
        return cls(
            id=project.id,
            title=project.title,
            start_date=project.start_date,
            end_date=project.end_date,
            duration=project.duration,
            team_size=project.team_size,
        )


class ProjectAnalyticsResponseDto(BaseModel):
    """プロジェクト分析レスポンスDTO"""
    project_id: str
    project_title: str
    progress: int = Field(..., description="完了タスク / 全タスク (%)")
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    overdue_tasks: int
    budget: float
    team_size: int
    status_distribution: List[DistributionEntryDto]
    priority_distribution: List[DistributionEntryDto]
    team_productivity: List[MemberProductivityDto]
    timeline: TimelineDto


class ProgressTrackingResponseDto(BaseModel):
    """個人の進捗トラッキングレスポンスDTO"""
    member_id: str
    project_id: Optional[str] = None
    total_tasks: int
    completion_rate: int
    timeliness_rate: int
    on_time_tasks: int
    judged_tasks: int
    performance: PerformanceDto
    status_distribution: List[DistributionEntryDto]
    priority_distribution: List[DistributionEntryDto]
    recent_activity: List[TaskSummaryDto]


class DashboardResponseDto(BaseModel):
    """コラボレーターダッシュボードレスポンスDTO"""
    member_id: str
    total_tasks: int
    completed_tasks: int
    tasks_completed_percent: int
    active_projects: int
    pending_reviews: int
    quality_percent: int
    rated_submissions: int
    average_rating: Optional[float] = None
    timeliness_percent: int
    performance: PerformanceDto
    recent_activity: List[TaskSummaryDto]
