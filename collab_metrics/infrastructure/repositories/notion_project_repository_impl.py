from __future__ import annotations

from typing import Any, Dict, List, Optional

from collab_metrics.domain.entities.project import Project
from collab_metrics.domain.entities.task import MemberRef
from collab_metrics.domain.repositories.project_repository import ProjectRepositoryInterface
from collab_metrics.infrastructure.notion import notion_properties as props
from collab_metrics.infrastructure.notion.notion_document_store import NotionDocumentStore

PROJECT_PROP_TITLE = "Title"
PROJECT_PROP_START = "Start Date"
PROJECT_PROP_END = "End Date"
PROJECT_PROP_DURATION = "Duration"
PROJECT_PROP_BUDGET = "Budget"
PROJECT_PROP_TEAM = "Team Members"


class NotionProjectRepositoryImpl(ProjectRepositoryInterface):
    """Notionのプロジェクトデータベースを使用したリポジトリ実装"""

    def __init__(self, store: NotionDocumentStore, database_id: str):
        self.store = store
        self.database_id = database_id

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        page = await self.store.retrieve_page(project_id)
        if not page:
            return None
        return self._to_project(page)

    async def find_by_member(self, member_id: str) -> List[Project]:
        pages = await self.store.query_all(
            self.database_id,
            filter={"property": PROJECT_PROP_TEAM, "people": {"contains": member_id}},
        )
        return [project for project in (self._to_project(page) for page in pages) if project]

    @staticmethod
    def _to_project(page: Dict[str, Any]) -> Optional[Project]:
        page_id = page.get("id")
        if not page_id:
            return None
        properties = page.get("properties", {})

        members = tuple(
            MemberRef(id=person_id, name=name)
            for person_id, name in props.extract_people(properties.get(PROJECT_PROP_TEAM))
        )
        budget = props.extract_number(properties.get(PROJECT_PROP_BUDGET))

        return Project(
            id=page_id,
            title=props.extract_title(properties.get(PROJECT_PROP_TITLE)) or "",
            start_date=props.extract_date(properties.get(PROJECT_PROP_START)),
            end_date=props.extract_date(properties.get(PROJECT_PROP_END)),
            duration=props.extract_text(properties.get(PROJECT_PROP_DURATION)),
            budget=float(budget) if budget is not None else 0.0,
            team_members=members,
        )
