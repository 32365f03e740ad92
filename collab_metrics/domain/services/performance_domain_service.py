from __future__ import annotations

from collab_metrics.domain.entities.project_metrics import PerformanceLabel, PerformanceScore
from collab_metrics.domain.services.percentages import round_half_up

COMPLETION_WEIGHT = 0.7
TIMELINESS_WEIGHT = 0.3

# (productivity, quality, timeliness) の下限。上から順に判定
_LABEL_THRESHOLDS = (
    (PerformanceLabel.EXCELLENT, (80, 80, 90)),
    (PerformanceLabel.GOOD, (70, 70, 80)),
)


class PerformanceDomainService:
    """完了率・品質・納期遵守率からパフォーマンスを評価する

    数値スコアは完了率70%・納期遵守率30%の加重平均。ラベルは3指標それぞれの
    閾値判定で、数値スコアとは独立に決まる。
    """

    def performance(self, completion_percent: float, quality_percent: float, timeliness_percent: float) -> PerformanceScore:
        return PerformanceScore(
            performance_percent=self.weighted_score(completion_percent, timeliness_percent),
            label=self.classify(completion_percent, quality_percent, timeliness_percent),
        )

    @staticmethod
    def weighted_score(completion_percent: float, timeliness_percent: float) -> int:
        return round_half_up(completion_percent * COMPLETION_WEIGHT + timeliness_percent * TIMELINESS_WEIGHT)

    @staticmethod
    def classify(productivity_percent: float, quality_percent: float, timeliness_percent: float) -> PerformanceLabel:
        for label, (min_productivity, min_quality, min_timeliness) in _LABEL_THRESHOLDS:
            if (
                productivity_percent >= min_productivity
                and quality_percent >= min_quality
                and timeliness_percent >= min_timeliness
            ):
                return label
        return PerformanceLabel.NEEDS_IMPROVEMENT
