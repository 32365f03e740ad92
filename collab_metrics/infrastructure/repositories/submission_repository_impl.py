from typing import Dict, Iterable, List, Optional

from collab_metrics.domain.entities.submission import Submission
from collab_metrics.domain.repositories.submission_repository import SubmissionRepositoryInterface


class InMemorySubmissionRepository(SubmissionRepositoryInterface):
    """インメモリ提出物リポジトリ実装"""

    def __init__(self, submissions: Iterable[Submission] = ()):
        self._submissions: Dict[str, Submission] = {item.id: item for item in submissions}

    async def save(self, submission: Submission) -> Submission:
        self._submissions[submission.id] = submission
        return submission

    async def find_by_id(self, submission_id: str) -> Optional[Submission]:
        return self._submissions.get(submission_id)

    async def find_by_user(self, user_id: str) -> List[Submission]:
        return [item for item in self._submissions.values() if item.user_id == user_id]
