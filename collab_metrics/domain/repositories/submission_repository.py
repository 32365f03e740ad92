from abc import ABC, abstractmethod
from typing import List, Optional

from collab_metrics.domain.entities.submission import Submission


class SubmissionRepositoryInterface(ABC):
    """提出物リポジトリのインターフェース"""

    @abstractmethod
    async def save(self, submission: Submission) -> Submission:
        """提出物を保存（新規作成または更新）"""
        pass

    @abstractmethod
    async def find_by_id(self, submission_id: str) -> Optional[Submission]:
        """IDで提出物を取得"""
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str) -> List[Submission]:
        """提出者で検索"""
        pass
