from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
import uuid

from collab_metrics.domain.value_objects.rating import Rating


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class StorageTarget(str, Enum):
    """アップロード先のストレージ種別"""
    MEDIA = "media"
    DOCUMENT = "document"


@dataclass(frozen=True, slots=True)
class StoredFile:
    name: str
    url: str
    content_type: str
    size: int
    storage_target: StorageTarget
    path: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Submission:
    """提出物エンティティ"""
    task_id: str
    user_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    project_id: Optional[str] = None
    task_title: str = ""
    user_name: str = ""
    status: SubmissionStatus = SubmissionStatus.SUBMITTED
    rating: Optional[Rating] = None
    notes: str = ""
    feedback: str = ""
    file: Optional[StoredFile] = None
    link: Optional[str] = None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reviewed_at: Optional[datetime] = None

    def is_approved(self) -> bool:
        return self.status == SubmissionStatus.APPROVED

    def is_pending_review(self) -> bool:
        return self.status == SubmissionStatus.SUBMITTED

    def approve(self, rating: Rating, reviewed_at: datetime, feedback: str = "") -> "Submission":
        """評価付きで承認した新しいスナップショットを返す"""
        self._ensure_pending_review()
        return replace(
            self,
            status=SubmissionStatus.APPROVED,
            rating=rating,
            feedback=feedback,
            reviewed_at=reviewed_at,
        )

    def reject(self, reviewed_at: datetime, feedback: str = "") -> "Submission":
        """差し戻した新しいスナップショットを返す"""
        self._ensure_pending_review()
        return replace(
            self,
            status=SubmissionStatus.REJECTED,
            rating=None,
            feedback=feedback,
            reviewed_at=reviewed_at,
        )

    def _ensure_pending_review(self) -> None:
        if not self.is_pending_review():
            raise ValueError(f"Submission has already been reviewed: {self.id} ({self.status.value})")
