import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from collab_metrics.application.services.dashboard_service import DashboardApplicationService
from collab_metrics.application.services.progress_tracking_service import ProgressTrackingApplicationService
from collab_metrics.application.services.project_analytics_service import ProjectAnalyticsApplicationService
from collab_metrics.application.services.submission_service import SubmissionApplicationService
from collab_metrics.domain.entities.submission import StorageTarget
from collab_metrics.domain.repositories.file_storage import FileStorageInterface
from collab_metrics.domain.repositories.project_repository import ProjectRepositoryInterface
from collab_metrics.domain.repositories.submission_repository import SubmissionRepositoryInterface
from collab_metrics.domain.repositories.task_repository import TaskRepositoryInterface
from collab_metrics.infrastructure.notion.notion_document_store import NotionDocumentStore
from collab_metrics.infrastructure.repositories.notion_project_repository_impl import NotionProjectRepositoryImpl
from collab_metrics.infrastructure.repositories.notion_submission_repository_impl import NotionSubmissionRepositoryImpl
from collab_metrics.infrastructure.repositories.notion_task_repository_impl import NotionTaskRepositoryImpl
from collab_metrics.infrastructure.repositories.project_repository_impl import InMemoryProjectRepository
from collab_metrics.infrastructure.repositories.submission_repository_impl import InMemorySubmissionRepository
from collab_metrics.infrastructure.repositories.task_repository_impl import InMemoryTaskRepository
from collab_metrics.infrastructure.storage.gcs_file_storage import GCSFileStorage
from collab_metrics.utils.concurrency import ConcurrencyCoordinator
from .config import Settings

logger = logging.getLogger(__name__)


@dataclass
class MetricsDependencies:
    settings: Settings
    project_repository: ProjectRepositoryInterface
    task_repository: TaskRepositoryInterface
    submission_repositories: List[SubmissionRepositoryInterface]
    file_storages: Dict[StorageTarget, FileStorageInterface]
    concurrency: ConcurrencyCoordinator
    project_analytics_service: ProjectAnalyticsApplicationService
    progress_tracking_service: ProgressTrackingApplicationService
    dashboard_service: DashboardApplicationService
    submission_service: SubmissionApplicationService


def _build_file_storages(settings: Settings) -> Dict[StorageTarget, FileStorageInterface]:
    storages: Dict[StorageTarget, FileStorageInterface] = {}
    buckets = {
        StorageTarget.MEDIA: settings.gcs_media_bucket_name,
        StorageTarget.DOCUMENT: settings.gcs_document_bucket_name,
    }
    for target, bucket_name in buckets.items():
        if not bucket_name:
            logger.warning(f"⚠️ {target.value} 用のバケットが未設定のため、アップロードは無効です")
            continue
        try:
            storages[target] = GCSFileStorage(
                bucket_name=bucket_name,
                target=target,
                prefix=settings.submission_upload_prefix,
            )
        except Exception as storage_error:
            logger.error(f"❌ GCS初期化エラー ({bucket_name}): {storage_error}")
    return storages


def build_metrics_dependencies(
    settings: Optional[Settings] = None,
    *,
    project_repository: Optional[ProjectRepositoryInterface] = None,
    task_repository: Optional[TaskRepositoryInterface] = None,
    submission_repositories: Optional[List[SubmissionRepositoryInterface]] = None,
    file_storages: Optional[Dict[StorageTarget, FileStorageInterface]] = None,
) -> MetricsDependencies:
    settings = settings or Settings()

    if settings.uses_notion:
        store = NotionDocumentStore(notion_token=settings.notion_token)
        project_repository = project_repository or NotionProjectRepositoryImpl(
            store, settings.notion_projects_database_id
        )
        task_repository = task_repository or NotionTaskRepositoryImpl(store, settings.notion_tasks_database_id)
        if submission_repositories is None:
            submission_repositories = [
                NotionSubmissionRepositoryImpl(store, database_id)
                for database_id in settings.submission_database_ids
            ]
        logger.info(f"📊 Notionバックエンド: 提出物DB {len(submission_repositories)}件")
    else:
        project_repository = project_repository or InMemoryProjectRepository()
        task_repository = task_repository or InMemoryTaskRepository()
        if submission_repositories is None:
            submission_repositories = [InMemorySubmissionRepository()]
        logger.info("🧪 インメモリバックエンドで起動")

    if not submission_repositories:
        raise ValueError("At least one submission database must be configured")

    if file_storages is None:
        file_storages = _build_file_storages(settings)

    concurrency = ConcurrencyCoordinator(max_concurrency=settings.max_concurrency)

    return MetricsDependencies(
        settings=settings,
        project_repository=project_repository,
        task_repository=task_repository,
        submission_repositories=submission_repositories,
        file_storages=file_storages,
        concurrency=concurrency,
        project_analytics_service=ProjectAnalyticsApplicationService(
            project_repository=project_repository,
            task_repository=task_repository,
            concurrency_coordinator=concurrency,
        ),
        progress_tracking_service=ProgressTrackingApplicationService(task_repository=task_repository),
        dashboard_service=DashboardApplicationService(
            task_repository=task_repository,
            project_repository=project_repository,
            submission_repositories=submission_repositories,
            concurrency_coordinator=concurrency,
        ),
        submission_service=SubmissionApplicationService(
            task_repository=task_repository,
            # 新規提出は先頭（プロジェクト提出物）に保存する
            submission_repository=submission_repositories[0],
            file_storages=file_storages,
            concurrency_coordinator=concurrency,
        ),
    )
