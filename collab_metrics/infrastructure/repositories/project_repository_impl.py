from typing import Dict, Iterable, List, Optional

from collab_metrics.domain.entities.project import Project
from collab_metrics.domain.repositories.project_repository import ProjectRepositoryInterface


class InMemoryProjectRepository(ProjectRepositoryInterface):
    """インメモリプロジェクトリポジトリ実装"""

    def __init__(self, projects: Iterable[Project] = ()):
        self._projects: Dict[str, Project] = {project.id: project for project in projects}

    async def find_by_id(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    async def find_by_member(self, member_id: str) -> List[Project]:
        return [project for project in self._projects.values() if project.has_member(member_id)]
