from __future__ import annotations

from typing import Iterable, List, Optional

from collab_metrics.domain.services.percentages import percent_of
from collab_metrics.domain.value_objects.rating import MAX_RATING, Rating


class QualityDomainService:
    """提出物の評価から品質スコア（0〜100）を算出する"""

    @staticmethod
    def rated(ratings: Iterable[Optional[Rating]]) -> List[Rating]:
        """未評価（None）を除外"""
        return [rating for rating in ratings if rating is not None]

    def merge_sources(self, *sources: Iterable[Optional[Rating]]) -> List[Rating]:
        """複数ソースの評価を結合する（ソースごとの正規化はしない）"""
        merged: List[Rating] = []
        for source in sources:
            merged.extend(self.rated(source))
        return merged

    def quality(self, ratings: Iterable[Optional[Rating]]) -> int:
        values = self.rated(ratings)
        total = sum(float(rating) for rating in values)
        return percent_of(total, len(values) * MAX_RATING)

    def quality_from_sources(self, *sources: Iterable[Optional[Rating]]) -> int:
        return self.quality(self.merge_sources(*sources))

    def average_rating(self, ratings: Iterable[Optional[Rating]]) -> Optional[float]:
        """平均評価（星の数）。評価がなければNone"""
        values = self.rated(ratings)
        if not values:
            return None
        return sum(float(rating) for rating in values) / len(values)
