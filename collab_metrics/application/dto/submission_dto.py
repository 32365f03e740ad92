from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from collab_metrics.domain.entities.submission import Submission


class SubmissionTypeDto(str, Enum):
    FILE = "file"
    LINK = "link"


class UploadedFileDto(BaseModel):
    """アップロードされたファイルの内容"""
    filename: str
    content_type: str = ""
    data: bytes


class SubmitWorkRequestDto(BaseModel):
    """作業提出リクエストDTO"""
    task_id: str = Field(..., description="提出対象のタスクID")
    user_id: str = Field(..., description="提出者のユーザーID")
    user_name: str = Field("", description="提出者の表示名")
    submission_type: SubmissionTypeDto = Field(SubmissionTypeDto.FILE, description="file または link")
    notes: str = Field("", description="メモ")
    link: Optional[str] = Field(None, description="提出リンク（link の場合）")
    file: Optional[UploadedFileDto] = Field(None, description="提出ファイル（file の場合）")


class ReviewSubmissionRequestDto(BaseModel):
    """提出物レビュー（承認/差し戻し）DTO"""
    action: str = Field(..., description="承認(approve)または差し戻し(reject)")
    rating: Optional[float] = Field(None, description="承認時の評価（1〜5）")
    feedback: str = Field("", description="レビューコメント")


class StoredFileDto(BaseModel):
    name: str
    url: str
    type: str
    size: int
    storage_type: str


class SubmissionResponseDto(BaseModel):
    """提出物レスポンスDTO"""
    id: str
    task_id: str
    task_title: str
    project_id: Optional[str] = None
    user_id: str
    user_name: str
    status: str
    rating: Optional[float] = None
    notes: str
    feedback: str = ""
    type: SubmissionTypeDto
    file: Optional[StoredFileDto] = None
    link: Optional[str] = None
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None

    @classmethod
    def from_submission(cls, submission: Submission) -> "SubmissionResponseDto":
        file_dto = None
        if submission.file:
            file_dto = StoredFileDto(
                name=submission.file.name,
                url=submission.file.url,
                type=submission.file.content_type,
                size=submission.file.size,
                storage_type=submission.file.storage_target.value,
            )
        return cls(
            id=submission.id,
            task_id=submission.task_id,
            task_title=submission.task_title,
            project_id=submission.project_id,
            user_id=submission.user_id,
            user_name=submission.user_name,
            status=submission.status.value,
            rating=float(submission.rating) if submission.rating is not None else None,
            notes=submission.notes,
            feedback=submission.feedback,
            type=SubmissionTypeDto.FILE if submission.file else SubmissionTypeDto.LINK,
            file=file_dto,
            link=submission.link,
            submitted_at=submission.submitted_at,
            reviewed_at=submission.reviewed_at,
        )
