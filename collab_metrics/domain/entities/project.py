from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from collab_metrics.domain.entities.task import MemberRef


@dataclass(frozen=True, slots=True)
class Project:
    """プロジェクトエンティティ"""
    id: str
    title: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[str] = None
    budget: float = 0.0
    team_members: Tuple[MemberRef, ...] = field(default_factory=tuple)

    def unique_team_members(self) -> List[MemberRef]:
        """ID重複を除いたメンバー一覧（最初の出現を優先、順序維持）"""
        seen = set()
        members: List[MemberRef] = []
        for member in self.team_members:
            if member.id in seen:
                continue
            seen.add(member.id)
            members.append(member)
        return members

    @property
    def team_size(self) -> int:
        return len(self.unique_team_members())

    def has_member(self, member_id: str) -> bool:
        """指定メンバーがチームに含まれるかどうか"""
        return any(member.id == member_id for member in self.team_members)
