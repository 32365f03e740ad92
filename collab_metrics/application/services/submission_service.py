from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from collab_metrics.application.dto.submission_dto import (
    ReviewSubmissionRequestDto,
    SubmissionResponseDto,
    SubmissionTypeDto,
    SubmitWorkRequestDto,
)
from collab_metrics.application.errors import EntityNotFoundError
from collab_metrics.domain.entities.submission import StorageTarget, StoredFile, Submission
from collab_metrics.domain.entities.task import TaskStatus
from collab_metrics.domain.repositories.file_storage import FileStorageInterface
from collab_metrics.domain.repositories.submission_repository import SubmissionRepositoryInterface
from collab_metrics.domain.repositories.task_repository import TaskRepositoryInterface
from collab_metrics.domain.services.file_routing_domain_service import FileRoutingDomainService
from collab_metrics.domain.value_objects.rating import Rating
from collab_metrics.utils.concurrency import ConcurrencyCoordinator

logger = logging.getLogger(__name__)


class SubmissionApplicationService:
    """作業提出とレビューのアプリケーションサービス"""

    def __init__(
        self,
        task_repository: TaskRepositoryInterface,
        submission_repository: SubmissionRepositoryInterface,
        file_storages: Dict[StorageTarget, FileStorageInterface],
        concurrency_coordinator: Optional[ConcurrencyCoordinator] = None,
        routing_service: Optional[FileRoutingDomainService] = None,
    ):
        self.task_repository = task_repository
        self.submission_repository = submission_repository
        self.file_storages = file_storages
        self.concurrency = concurrency_coordinator or ConcurrencyCoordinator()
        self.routing_service = routing_service or FileRoutingDomainService()

    async def submit_work(self, dto: SubmitWorkRequestDto) -> SubmissionResponseDto:
        """作業を提出し、タスクをレビュー待ちにする"""
        self._validate_submission(dto)

        task = await self.task_repository.find_by_id(dto.task_id)
        if task is None:
            raise EntityNotFoundError("Task", dto.task_id)

        async with self.concurrency.guard(task.id):
            stored_file: Optional[StoredFile] = None
            link: Optional[str] = None
            if dto.submission_type == SubmissionTypeDto.FILE:
                stored_file = await self._upload(dto)
            else:
                link = dto.link.strip()

            now = datetime.now(timezone.utc)
            submission = Submission(
                task_id=task.id,
                user_id=dto.user_id,
                project_id=task.project_id,
                task_title=task.title,
                user_name=dto.user_name,
                notes=dto.notes,
                file=stored_file,
                link=link,
                submitted_at=now,
            )
            saved = await self.submission_repository.save(submission)
            await self.task_repository.update_status(task.id, TaskStatus.REVIEW, updated_at=now)

        logger.info(f"✅ 提出完了: task={task.id} user={dto.user_id} submission={saved.id}")
        return SubmissionResponseDto.from_submission(saved)

    async def review_submission(
        self,
        submission_id: str,
        dto: ReviewSubmissionRequestDto,
    ) -> SubmissionResponseDto:
        """提出物を承認（評価付き）または差し戻す

        レビューできるのは提出済み（submitted）の提出物のみ。
        提出物を先に保存し、その後タスクのステータスを進める。
        """
        action = dto.action.strip().lower()
        if action not in ("approve", "reject"):
            raise ValueError(f"Unknown review action: {dto.action}")

        submission = await self.submission_repository.find_by_id(submission_id)
        if submission is None:
            raise EntityNotFoundError("Submission", submission_id)

        now = datetime.now(timezone.utc)
        feedback = dto.feedback.strip()
        async with self.concurrency.guard(submission.task_id):
            # ロック内で最新の状態を読み直す
            submission = await self.submission_repository.find_by_id(submission_id) or submission
            if action == "approve":
                if dto.rating is None:
                    raise ValueError("Rating is required to approve a submission")
                reviewed = submission.approve(Rating(dto.rating), now, feedback=feedback)
                saved = await self.submission_repository.save(reviewed)
                await self.task_repository.update_status(
                    submission.task_id, TaskStatus.DONE, updated_at=now, completed_at=now
                )
            else:
                reviewed = submission.reject(now, feedback=feedback)
                saved = await self.submission_repository.save(reviewed)
                await self.task_repository.update_status(
                    submission.task_id, TaskStatus.IN_PROGRESS, updated_at=now
                )

        logger.info(f"📝 レビュー完了: submission={submission_id} action={action}")
        return SubmissionResponseDto.from_submission(saved)

    @staticmethod
    def _validate_submission(dto: SubmitWorkRequestDto) -> None:
        if not dto.task_id.strip():
            raise ValueError("Please select a task to submit")
        if dto.submission_type == SubmissionTypeDto.FILE and (dto.file is None or not dto.file.filename):
            raise ValueError("Please select a file")
        if dto.submission_type == SubmissionTypeDto.LINK and not (dto.link and dto.link.strip()):
            raise ValueError("Please enter a link")

    async def _upload(self, dto: SubmitWorkRequestDto) -> StoredFile:
        uploaded = dto.file
        target = self.routing_service.classify(uploaded.content_type)
        storage = self.file_storages.get(target)
        if storage is None:
            raise ValueError(f"File storage is not configured for {target.value} files")

        logger.info(f"📤 アップロード開始: {uploaded.filename} ({uploaded.content_type or 'unknown'}) → {target.value}")
        return await storage.upload(
            uploaded.data,
            uploaded.filename,
            uploaded.content_type or "application/octet-stream",
        )
