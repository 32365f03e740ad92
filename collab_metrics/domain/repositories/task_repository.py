from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from collab_metrics.domain.entities.task import Task, TaskStatus


class TaskRepositoryInterface(ABC):
    """タスクリポジトリのインターフェース"""

    @abstractmethod
    async def find_by_id(self, task_id: str) -> Optional[Task]:
        """IDでタスクを取得"""
        pass

    @abstractmethod
    async def find_by_project(self, project_id: str) -> List[Task]:
        """プロジェクトに属するタスクを取得"""
        pass

    @abstractmethod
    async def find_by_assignee(self, member_id: str) -> List[Task]:
        """担当者でタスクを検索"""
        pass

    @abstractmethod
    async def update_status(
        self,
        task_id: str,
        status: TaskStatus,
        updated_at: datetime,
        completed_at: Optional[datetime] = None,
    ) -> Task:
        """ステータスを更新"""
        pass
