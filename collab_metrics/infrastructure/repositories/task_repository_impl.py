from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from collab_metrics.domain.entities.task import Task, TaskStatus
from collab_metrics.domain.repositories.task_repository import TaskRepositoryInterface


class InMemoryTaskRepository(TaskRepositoryInterface):
    """インメモリタスクリポジトリ実装"""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: Dict[str, Task] = {task.id: task for task in tasks}

    async def find_by_id(self, task_id: str) -> Optional[Task]:
        """IDでタスクを取得"""
        return self._tasks.get(task_id)

    async def find_by_project(self, project_id: str) -> List[Task]:
        """プロジェクトに属するタスクを取得"""
        return [task for task in self._tasks.values() if task.project_id == project_id]

    async def find_by_assignee(self, member_id: str) -> List[Task]:
        """担当者でタスクを検索"""
        return [task for task in self._tasks.values() if task.is_assigned_to(member_id)]

    async def update_status(
        self,
        task_id: str,
        status: TaskStatus,
        updated_at: datetime,
        completed_at: Optional[datetime] = None,
    ) -> Task:
        """ステータスを更新"""
        task = self._tasks.get(task_id)
        if task is None:
            raise ValueError(f"Task not found: {task_id}")
        updated = replace(
            task,
            status=status,
            updated_at=updated_at,
            completed_at=completed_at if completed_at is not None else task.completed_at,
        )
        self._tasks[task_id] = updated
        return updated
