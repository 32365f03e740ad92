from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from collab_metrics.domain.entities.task import MemberRef, Task, TaskPriority, TaskStatus
from collab_metrics.domain.repositories.task_repository import TaskRepositoryInterface
from collab_metrics.infrastructure.notion import notion_properties as props
from collab_metrics.infrastructure.notion.notion_document_store import NotionDocumentStore
from collab_metrics.utils.time_utils import parse_iso_datetime

logger = logging.getLogger(__name__)

TASK_PROP_TITLE = "Title"
TASK_PROP_STATUS = "Status"
TASK_PROP_PRIORITY = "Priority"
TASK_PROP_ASSIGNEE = "Assignee"
TASK_PROP_DUE = "Due Date"
TASK_PROP_COMPLETED_AT = "Completed At"
TASK_PROP_PROJECT_ID = "Project ID"

_DEFAULT_PRIORITY = TaskPriority.MEDIUM


class NotionTaskRepositoryImpl(TaskRepositoryInterface):
    """Notionのタスクデータベースを使用したリポジトリ実装"""

    def __init__(self, store: NotionDocumentStore, database_id: str):
        self.store = store
        self.database_id = database_id

    async def find_by_id(self, task_id: str) -> Optional[Task]:
        page = await self.store.retrieve_page(task_id)
        if not page:
            return None
        return self._to_task(page)

    async def find_by_project(self, project_id: str) -> List[Task]:
        pages = await self.store.query_all(
            self.database_id,
            filter={"property": TASK_PROP_PROJECT_ID, "rich_text": {"equals": project_id}},
        )
        return self._to_tasks(pages)

    async def find_by_assignee(self, member_id: str) -> List[Task]:
        pages = await self.store.query_all(
            self.database_id,
            filter={"property": TASK_PROP_ASSIGNEE, "people": {"contains": member_id}},
        )
        return self._to_tasks(pages)

    async def update_status(
        self,
        task_id: str,
        status: TaskStatus,
        updated_at: datetime,
        completed_at: Optional[datetime] = None,
    ) -> Task:
        properties: Dict[str, Any] = {TASK_PROP_STATUS: props.select_property(status.value)}
        if completed_at is not None:
            properties[TASK_PROP_COMPLETED_AT] = props.date_property(completed_at)

        page = await self.store.update_page(task_id, properties)
        task = self._to_task(page)
        if task is None:
            raise ValueError(f"Task not found: {task_id}")
        return task

    def _to_tasks(self, pages: List[Dict[str, Any]]) -> List[Task]:
        tasks = []
        for page in pages:
            task = self._to_task(page)
            if task:
                tasks.append(task)
        return tasks

    def _to_task(self, page: Dict[str, Any]) -> Optional[Task]:
        properties = page.get("properties", {})
        page_id = page.get("id")
        if not page_id:
            return None

        status_name = props.extract_select(properties.get(TASK_PROP_STATUS))
        try:
            status = TaskStatus(status_name)
        except ValueError:
            logger.warning(f"⚠️ 不明なステータスのためスキップ: {page_id} ({status_name})")
            return None

        priority_name = props.extract_select(properties.get(TASK_PROP_PRIORITY))
        try:
            priority = TaskPriority(priority_name) if priority_name else _DEFAULT_PRIORITY
        except ValueError:
            logger.warning(f"⚠️ 不明な優先度のためスキップ: {page_id} ({priority_name})")
            return None

        created_at = parse_iso_datetime(page.get("created_time"))
        if created_at is None:
            logger.warning(f"⚠️ 作成日時がないためスキップ: {page_id}")
            return None

        people = props.extract_people(properties.get(TASK_PROP_ASSIGNEE))
        assignee = MemberRef(id=people[0][0], name=people[0][1]) if people else None

        return Task(
            id=page_id,
            title=props.extract_title(properties.get(TASK_PROP_TITLE)) or "",
            status=status,
            priority=priority,
            created_at=created_at,
            assignee=assignee,
            due_date=props.extract_date(properties.get(TASK_PROP_DUE)),
            updated_at=parse_iso_datetime(page.get("last_edited_time")),
            completed_at=props.extract_date(properties.get(TASK_PROP_COMPLETED_AT)),
            project_id=props.extract_text(properties.get(TASK_PROP_PROJECT_ID)),
        )
