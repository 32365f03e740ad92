import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from collab_metrics.application.errors import EntityNotFoundError
from collab_metrics.application.services.project_analytics_service import ProjectAnalyticsApplicationService
from collab_metrics.domain.entities.project import Project
from collab_metrics.domain.entities.task import MemberRef, Task, TaskPriority, TaskStatus
from collab_metrics.infrastructure.repositories.project_repository_impl import InMemoryProjectRepository
from collab_metrics.infrastructure.repositories.task_repository_impl import InMemoryTaskRepository

START = datetime(2024, 1, 1, tzinfo=timezone.utc)
ALICE = MemberRef(id="u-alice", name="Alice Smith")
BOB = MemberRef(id="u-bob", name="Bob Brown")


def _task(
    task_id: str,
    status: TaskStatus,
    assignee: Optional[MemberRef] = None,
    due_date: Optional[datetime] = None,
    priority: TaskPriority = TaskPriority.MEDIUM,
    project_id: str = "p-1",
) -> Task:
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        status=status,
        priority=priority,
        created_at=START,
        assignee=assignee,
        due_date=due_date,
        project_id=project_id,
    )


def _service(projects, tasks) -> ProjectAnalyticsApplicationService:
    return ProjectAnalyticsApplicationService(
        project_repository=InMemoryProjectRepository(projects),
        task_repository=InMemoryTaskRepository(tasks),
    )


def test_project_analytics_summarises_tasks_members_and_timeline():
    project = Project(
        id="p-1",
        title="Website relaunch",
        start_date=START,
        duration="1 month",
        budget=12000.0,
        team_members=(ALICE, BOB, ALICE),
    )
    tasks = [
        _task("1", TaskStatus.DONE, ALICE, priority=TaskPriority.HIGH),
        _task("2", TaskStatus.DONE, BOB),
        _task("3", TaskStatus.IN_PROGRESS, ALICE),
        _task("4", TaskStatus.TODO, BOB, due_date=START + timedelta(days=5)),
        _task("other", TaskStatus.DONE, ALICE, project_id="p-2"),
    ]
    service = _service([project], tasks)

    result = asyncio.run(service.get_project_analytics("p-1", reference_time=START + timedelta(days=15)))

    assert result.project_title == "Website relaunch"
    assert result.progress == 50
    assert result.total_tasks == 4
    assert result.completed_tasks == 2
    assert result.in_progress_tasks == 1
    assert result.overdue_tasks == 1
    assert result.budget == 12000.0
    assert result.team_size == 2

    status = {entry.name: entry.value for entry in result.status_distribution}
    assert status == {"Backlog": 0, "To Do": 1, "In Progress": 1, "Review": 0, "Done": 2, "Blocked": 0}

    alice, bob = result.team_productivity
    assert (alice.avatar, alice.completed, alice.total, alice.percentage) == ("AS", 1, 2, 50)
    assert (bob.avatar, bob.completed, bob.total, bob.percentage) == ("BB", 1, 2, 50)

    timeline = result.timeline
    assert timeline.available
    assert timeline.end_date == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert timeline.elapsed_ms == 15 * 24 * 60 * 60 * 1000
    assert timeline.elapsed_label == "15 days"
    assert timeline.remaining_label == "16 days"
    assert not timeline.is_completed
    assert timeline.progress_percentage == pytest.approx(15 / 31 * 100)


def test_project_without_start_date_has_unavailable_timeline():
    project = Project(id="p-1", title="Unscheduled", team_members=(ALICE,))
    service = _service([project], [])

    result = asyncio.run(service.get_project_analytics("p-1"))

    assert result.progress == 0
    assert result.total_tasks == 0
    assert not result.timeline.available
    assert result.timeline.elapsed_ms is None
    assert [entry.total for entry in result.team_productivity] == [0]


def test_finished_project_timeline_is_completed():
    project = Project(id="p-1", title="Done", start_date=START, end_date=START + timedelta(days=10))
    service = _service([project], [])

    result = asyncio.run(service.get_project_analytics("p-1", reference_time=START + timedelta(days=40)))

    assert result.timeline.is_completed
    assert result.timeline.progress_percentage == 100.0
    assert result.timeline.remaining_ms == 0
    assert result.timeline.remaining_label == "0 days"


def test_missing_project_raises_not_found():
    service = _service([], [])

    with pytest.raises(EntityNotFoundError):
        asyncio.run(service.get_project_analytics("missing"))


def test_list_member_projects():
    projects = [
        Project(id="p-1", title="One", team_members=(ALICE,)),
        Project(id="p-2", title="Two", team_members=(BOB,)),
        Project(id="p-3", title="Three", team_members=(BOB, ALICE, ALICE)),
    ]
    service = _service(projects, [])

    result = asyncio.run(service.list_member_projects("u-alice"))

    assert [project.id for project in result] == ["p-1", "p-3"]
    assert result[1].team_size == 2
