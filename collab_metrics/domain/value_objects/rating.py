from dataclasses import dataclass
from typing import Optional, Union

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class Rating:
    """提出物の評価（1〜5の星）のバリューオブジェクト"""
    value: float

    def __post_init__(self):
        if not self._is_valid_rating(self.value):
            raise ValueError(f"Invalid rating: {self.value} (expected {MIN_RATING}-{MAX_RATING})")

    @staticmethod
    def _is_valid_rating(value) -> bool:
        """評価値の妥当性チェック"""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return MIN_RATING <= value <= MAX_RATING

    @classmethod
    def from_raw(cls, raw: Union[int, float, str, None]) -> Optional["Rating"]:
        """外部データの評価値を変換（未評価・0はNone）"""
        if raw is None or raw == "":
            return None
        try:
            number = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid rating: {raw}")
        if number == 0:
            return None
        if number.is_integer():
            return cls(int(number))
        return cls(number)

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return str(self.value)
