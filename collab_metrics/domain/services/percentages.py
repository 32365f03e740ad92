import math


def round_half_up(value: float) -> int:
    """0.5は常に切り上げる丸め（組み込みroundの偶数丸めは使わない）"""
    return int(math.floor(value + 0.5))


def percent_of(numerator: float, denominator: float) -> int:
    """numerator / denominator を百分率の整数で返す。分母0なら0"""
    if denominator <= 0:
        return 0
    return round_half_up(numerator / denominator * 100)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
