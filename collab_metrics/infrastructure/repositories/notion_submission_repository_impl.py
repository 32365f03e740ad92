from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from collab_metrics.domain.entities.submission import (
    StorageTarget,
    StoredFile,
    Submission,
    SubmissionStatus,
)
from collab_metrics.domain.repositories.submission_repository import SubmissionRepositoryInterface
from collab_metrics.domain.value_objects.rating import Rating
from collab_metrics.infrastructure.notion import notion_properties as props
from collab_metrics.infrastructure.notion.notion_document_store import NotionDocumentStore

logger = logging.getLogger(__name__)

SUBMISSION_PROP_TASK_TITLE = "Task Title"
SUBMISSION_PROP_ID = "Submission ID"
SUBMISSION_PROP_TASK_ID = "Task ID"
SUBMISSION_PROP_PROJECT_ID = "Project ID"
SUBMISSION_PROP_USER_ID = "User ID"
SUBMISSION_PROP_USER_NAME = "User Name"
SUBMISSION_PROP_STATUS = "Status"
SUBMISSION_PROP_RATING = "Rating"
SUBMISSION_PROP_NOTES = "Notes"
SUBMISSION_PROP_FEEDBACK = "Feedback"
SUBMISSION_PROP_FILE_NAME = "File Name"
SUBMISSION_PROP_FILE_URL = "File URL"
SUBMISSION_PROP_FILE_TYPE = "File Type"
SUBMISSION_PROP_FILE_SIZE = "File Size"
SUBMISSION_PROP_STORAGE = "Storage"
SUBMISSION_PROP_LINK = "Link"
SUBMISSION_PROP_SUBMITTED_AT = "Submitted At"
SUBMISSION_PROP_REVIEWED_AT = "Reviewed At"


class NotionSubmissionRepositoryImpl(SubmissionRepositoryInterface):
    """Notionの提出物データベースを使用したリポジトリ実装

    ページIDではなく「Submission ID」プロパティでアプリ側のIDを保持し、upsertする。
    """

    def __init__(self, store: NotionDocumentStore, database_id: str):
        self.store = store
        self.database_id = database_id

    async def save(self, submission: Submission) -> Submission:
        properties = self._build_properties(submission)
        existing = await self._find_page(submission.id)
        if existing and existing.get("id"):
            await self.store.update_page(existing["id"], properties)
        else:
            await self.store.create_page(self.database_id, properties)
        return submission

    async def find_by_id(self, submission_id: str) -> Optional[Submission]:
        page = await self._find_page(submission_id)
        if not page:
            return None
        return self._to_submission(page)

    async def find_by_user(self, user_id: str) -> List[Submission]:
        pages = await self.store.query_all(
            self.database_id,
            filter={"property": SUBMISSION_PROP_USER_ID, "rich_text": {"equals": user_id}},
        )
        return self._to_submissions(pages)

    async def _find_page(self, submission_id: str) -> Optional[Dict[str, Any]]:
        return await self.store.query_first(
            self.database_id,
            {"property": SUBMISSION_PROP_ID, "rich_text": {"equals": submission_id}},
        )

    def _to_submissions(self, pages: List[Dict[str, Any]]) -> List[Submission]:
        submissions = []
        for page in pages:
            submission = self._to_submission(page)
            if submission:
                submissions.append(submission)
        return submissions

    def _to_submission(self, page: Dict[str, Any]) -> Optional[Submission]:
        properties = page.get("properties", {})
        submission_id = props.extract_text(properties.get(SUBMISSION_PROP_ID))
        task_id = props.extract_text(properties.get(SUBMISSION_PROP_TASK_ID))
        user_id = props.extract_text(properties.get(SUBMISSION_PROP_USER_ID))
        if not submission_id or not task_id or not user_id:
            logger.warning(f"⚠️ 必須項目が欠けている提出物をスキップ: {page.get('id')}")
            return None

        try:
            status = SubmissionStatus(props.extract_select(properties.get(SUBMISSION_PROP_STATUS)) or "submitted")
            rating = Rating.from_raw(props.extract_number(properties.get(SUBMISSION_PROP_RATING)))
        except ValueError as e:
            logger.warning(f"⚠️ 提出物の変換エラー {submission_id}: {e}")
            return None

        kwargs: Dict[str, Any] = {}
        submitted_at = props.extract_date(properties.get(SUBMISSION_PROP_SUBMITTED_AT))
        if submitted_at is not None:
            kwargs["submitted_at"] = submitted_at

        return Submission(
            id=submission_id,
            task_id=task_id,
            user_id=user_id,
            project_id=props.extract_text(properties.get(SUBMISSION_PROP_PROJECT_ID)),
            task_title=props.extract_title(properties.get(SUBMISSION_PROP_TASK_TITLE)) or "",
            user_name=props.extract_text(properties.get(SUBMISSION_PROP_USER_NAME)) or "",
            status=status,
            rating=rating,
            notes=props.extract_text(properties.get(SUBMISSION_PROP_NOTES)) or "",
            feedback=props.extract_text(properties.get(SUBMISSION_PROP_FEEDBACK)) or "",
            file=self._to_stored_file(properties),
            link=props.extract_url(properties.get(SUBMISSION_PROP_LINK)),
            reviewed_at=props.extract_date(properties.get(SUBMISSION_PROP_REVIEWED_AT)),
            **kwargs,
        )

    @staticmethod
    def _to_stored_file(properties: Dict[str, Any]) -> Optional[StoredFile]:
        url = props.extract_url(properties.get(SUBMISSION_PROP_FILE_URL))
        if not url:
            return None
        try:
            storage_target = StorageTarget(props.extract_select(properties.get(SUBMISSION_PROP_STORAGE)))
        except ValueError:
            storage_target = StorageTarget.DOCUMENT
        size = props.extract_number(properties.get(SUBMISSION_PROP_FILE_SIZE))
        return StoredFile(
            name=props.extract_text(properties.get(SUBMISSION_PROP_FILE_NAME)) or "",
            url=url,
            content_type=props.extract_text(properties.get(SUBMISSION_PROP_FILE_TYPE)) or "",
            size=int(size) if size is not None else 0,
            storage_target=storage_target,
        )

    @staticmethod
    def _build_properties(submission: Submission) -> Dict[str, Any]:
        properties: Dict[str, Any] = {
            SUBMISSION_PROP_TASK_TITLE: props.title_property(submission.task_title or "(untitled)"),
            SUBMISSION_PROP_ID: props.text_property(submission.id),
            SUBMISSION_PROP_TASK_ID: props.text_property(submission.task_id),
            SUBMISSION_PROP_PROJECT_ID: props.text_property(submission.project_id),
            SUBMISSION_PROP_USER_ID: props.text_property(submission.user_id),
            SUBMISSION_PROP_USER_NAME: props.text_property(submission.user_name),
            SUBMISSION_PROP_STATUS: props.select_property(submission.status.value),
            SUBMISSION_PROP_RATING: props.number_property(
                float(submission.rating) if submission.rating is not None else None
            ),
            SUBMISSION_PROP_NOTES: props.text_property(submission.notes),
            SUBMISSION_PROP_FEEDBACK: props.text_property(submission.feedback),
            SUBMISSION_PROP_LINK: props.url_property(submission.link),
            SUBMISSION_PROP_SUBMITTED_AT: props.date_property(submission.submitted_at),
            SUBMISSION_PROP_REVIEWED_AT: props.date_property(submission.reviewed_at),
        }

        if submission.file:
            properties.update(
                {
                    SUBMISSION_PROP_FILE_NAME: props.text_property(submission.file.name),
                    SUBMISSION_PROP_FILE_URL: props.url_property(submission.file.url),
                    SUBMISSION_PROP_FILE_TYPE: props.text_property(submission.file.content_type),
                    SUBMISSION_PROP_FILE_SIZE: props.number_property(submission.file.size),
                    SUBMISSION_PROP_STORAGE: props.select_property(submission.file.storage_target.value),
                }
            )

        return properties
