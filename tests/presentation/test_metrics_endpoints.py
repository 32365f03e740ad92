from datetime import datetime, timedelta, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient

from collab_metrics.domain.entities.project import Project
from collab_metrics.domain.entities.submission import StorageTarget, StoredFile
from collab_metrics.domain.entities.task import MemberRef, Task, TaskPriority, TaskStatus
from collab_metrics.domain.repositories.file_storage import FileStorageInterface
from collab_metrics.infrastructure.notion.notion_document_store import NotionDocumentStore
from collab_metrics.infrastructure.repositories.notion_project_repository_impl import NotionProjectRepositoryImpl
from collab_metrics.infrastructure.repositories.notion_task_repository_impl import NotionTaskRepositoryImpl
from collab_metrics.infrastructure.repositories.project_repository_impl import InMemoryProjectRepository
from collab_metrics.infrastructure.repositories.task_repository_impl import InMemoryTaskRepository
from collab_metrics.presentation.api.metrics.config import Settings
from collab_metrics.presentation.api.metrics.context import build_metrics_dependencies
from collab_metrics.presentation.api.metrics_endpoints import get_dependencies
from main import create_app
from tests.infrastructure.fake_notion import FakeNotionClient

ALICE = MemberRef(id="u-alice", name="Alice Smith")
NOW = datetime.now(timezone.utc)


class StubStorage(FileStorageInterface):
    def __init__(self, target: StorageTarget):
        self.target = target
        self.filenames: List[str] = []

    async def upload(self, data: bytes, filename: str, content_type: str) -> StoredFile:
        self.filenames.append(filename)
        return StoredFile(
            name=filename,
            url=f"https://files.example.com/{filename}",
            content_type=content_type,
            size=len(data),
            storage_target=self.target,
        )


class BrokenTaskRepository(InMemoryTaskRepository):
    async def find_by_assignee(self, member_id: str):
        raise RuntimeError("document store unavailable")


def _task(task_id: str, status: TaskStatus) -> Task:
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        status=status,
        priority=TaskPriority.MEDIUM,
        created_at=NOW - timedelta(days=3),
        assignee=ALICE,
        due_date=NOW + timedelta(days=3),
        completed_at=NOW - timedelta(days=1) if status == TaskStatus.DONE else None,
        project_id="p-1",
    )


@pytest.fixture
def storages():
    return {target: StubStorage(target) for target in StorageTarget}


@pytest.fixture
def client(storages):
    project = Project(
        id="p-1",
        title="Relaunch",
        start_date=NOW - timedelta(days=10),
        end_date=NOW + timedelta(days=10),
        team_members=(ALICE,),
    )
    dependencies = build_metrics_dependencies(
        Settings(data_backend="memory"),
        project_repository=InMemoryProjectRepository([project]),
        task_repository=InMemoryTaskRepository([_task("t-1", TaskStatus.DONE), _task("t-2", TaskStatus.TODO)]),
        file_storages=storages,
    )
    app = create_app()
    app.dependency_overrides[get_dependencies] = lambda: dependencies
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_project_analytics(client):
    response = client.get("/api/projects/p-1/analytics")

    assert response.status_code == 200
    body = response.json()
    assert body["progress"] == 50
    assert body["team_size"] == 1
    assert body["team_productivity"][0]["avatar"] == "AS"
    assert body["timeline"]["available"] is True
    assert body["timeline"]["is_completed"] is False


def test_unknown_project_is_404(client):
    response = client.get("/api/projects/missing/analytics")

    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found: missing"


def test_member_projects_and_progress(client):
    projects = client.get("/api/members/u-alice/projects").json()
    progress = client.get("/api/members/u-alice/progress", params={"project_id": "p-1"}).json()

    assert [project["id"] for project in projects] == ["p-1"]
    assert progress["completion_rate"] == 50
    assert progress["timeliness_rate"] == 100
    assert progress["performance"]["performance_percentage"] == 65


def test_dashboard(client):
    response = client.get("/api/members/u-alice/dashboard")

    assert response.status_code == 200
    body = response.json()
    assert body["total_tasks"] == 2
    assert body["active_projects"] == 1
    assert body["pending_reviews"] == 0
    assert len(body["recent_activity"]) == 2
    assert body["quality_percent"] == 0
    assert body["performance"]["label"] == "Needs improvement"


def test_submit_file_then_approve(client, storages):
    response = client.post(
        "/api/submissions",
        data={"task_id": "t-2", "user_id": "u-alice", "user_name": "Alice Smith", "submission_type": "file"},
        files={"file": ("mockup.png", b"png-bytes", "image/png")},
    )

    assert response.status_code == 201
    submission = response.json()
    assert submission["file"]["storage_type"] == "media"
    assert storages[StorageTarget.MEDIA].filenames == ["mockup.png"]
    assert client.get("/api/members/u-alice/dashboard").json()["pending_reviews"] == 1

    review = client.post(
        f"/api/submissions/{submission['id']}/review",
        json={"action": "approve", "rating": 5, "feedback": "Ship it"},
    )

    assert review.status_code == 200
    assert review.json()["status"] == "approved"
    assert review.json()["feedback"] == "Ship it"

    again = client.post(f"/api/submissions/{submission['id']}/review", json={"action": "reject"})
    assert again.status_code == 400

    dashboard = client.get("/api/members/u-alice/dashboard").json()
    assert dashboard["completed_tasks"] == 2
    assert dashboard["quality_percent"] == 100
    assert dashboard["rated_submissions"] == 1
    assert dashboard["pending_reviews"] == 0


def test_submit_link(client, storages):
    response = client.post(
        "/api/submissions",
        data={"task_id": "t-2", "user_id": "u-alice", "submission_type": "link", "link": "https://example.com/doc"},
    )

    assert response.status_code == 201
    assert response.json()["link"] == "https://example.com/doc"
    assert all(not storage.filenames for storage in storages.values())


def test_submission_validation_error_is_400(client):
    response = client.post("/api/submissions", data={"task_id": "t-2", "user_id": "u-alice"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Please select a file"


def test_review_with_unknown_action_is_400(client):
    response = client.post("/api/submissions/whatever/review", json={"action": "archive"})

    assert response.status_code == 400


def test_store_failure_is_502(storages):
    dependencies = build_metrics_dependencies(
        Settings(data_backend="memory"),
        task_repository=BrokenTaskRepository(),
        file_storages=storages,
    )
    app = create_app()
    app.dependency_overrides[get_dependencies] = lambda: dependencies

    response = TestClient(app).get("/api/members/u-alice/dashboard")

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to load dashboard"


def test_root_reports_environment():
    app = create_app(Settings(env="production", data_backend="memory"))

    body = TestClient(app).get("/").json()

    assert body["message"] == "Collaboration Metrics Service is running"
    assert body["environment"] == "production"
    assert body["data_backend"] == "memory"


def test_notion_outage_on_project_analytics_is_502(storages):
    notion = FakeNotionClient()
    notion.retrieve_error = ConnectionError("notion unreachable")
    store = NotionDocumentStore(client=notion)
    dependencies = build_metrics_dependencies(
        Settings(data_backend="memory"),
        project_repository=NotionProjectRepositoryImpl(store, "projectsdb"),
        task_repository=NotionTaskRepositoryImpl(store, "tasksdb"),
        file_storages=storages,
    )
    app = create_app()
    app.dependency_overrides[get_dependencies] = lambda: dependencies

    response = TestClient(app).get("/api/projects/p-1/analytics")

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to load project analytics"


def test_missing_notion_project_is_404(storages):
    store = NotionDocumentStore(client=FakeNotionClient())
    dependencies = build_metrics_dependencies(
        Settings(data_backend="memory"),
        project_repository=NotionProjectRepositoryImpl(store, "projectsdb"),
        task_repository=NotionTaskRepositoryImpl(store, "tasksdb"),
        file_storages=storages,
    )
    app = create_app()
    app.dependency_overrides[get_dependencies] = lambda: dependencies

    response = TestClient(app).get("/api/projects/p-404/analytics")

    assert response.status_code == 404
