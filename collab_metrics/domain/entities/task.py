from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TaskStatus(str, Enum):
    BACKLOG = "Backlog"
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    DONE = "Done"
    BLOCKED = "Blocked"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass(frozen=True, slots=True)
class MemberRef:
    """チームメンバーへの参照"""
    id: str
    name: str = ""

    @property
    def initials(self) -> str:
        """名前の各トークンの頭文字（表示用）"""
        return "".join(token[0].upper() for token in self.name.split())


@dataclass(frozen=True, slots=True)
class Task:
    """タスクエンティティ（読み取り専用スナップショット）"""
    id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    assignee: Optional[MemberRef] = None
    due_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    project_id: Optional[str] = None

    def is_done(self) -> bool:
        """完了済みかどうか"""
        return self.status == TaskStatus.DONE

    def is_assigned_to(self, member_id: str) -> bool:
        return self.assignee is not None and self.assignee.id == member_id

    def completion_timestamp(self) -> datetime:
        """完了日時（completed_at → updated_at → created_at の順で最初に存在する値）"""
        for candidate in (self.completed_at, self.updated_at):
            if candidate is not None:
                return candidate
        return self.created_at

    def last_activity_at(self) -> datetime:
        """最終更新日時（updated_at がなければ created_at）"""
        return self.updated_at or self.created_at
