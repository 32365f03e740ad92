from abc import ABC, abstractmethod
from typing import List, Optional

from collab_metrics.domain.entities.project import Project


class ProjectRepositoryInterface(ABC):
    """プロジェクトリポジトリのインターフェース"""

    @abstractmethod
    async def find_by_id(self, project_id: str) -> Optional[Project]:
        """IDでプロジェクトを取得"""
        pass

    @abstractmethod
    async def find_by_member(self, member_id: str) -> List[Project]:
        """メンバーが参加しているプロジェクトを取得"""
        pass
