"""
频次排序与威胁分级
聚合时对每个城市的标签集合做 Top-N 提取，并根据威胁比例给出等级
"""

from collections import Counter
from typing import Iterable, List

from ..config import DEFAULT_HIGH_THREAT_RATIO, DEFAULT_MEDIUM_THREAT_RATIO
from ..model import ThreatLevel


def top_n(items: Iterable[str], n: int) -> List[str]:
    """
    按出现频次取前 n 个

    排序规则：频次降序；频次相同时按字符串升序

    Args:
        items: 标签多重集合（可重复）
        n: 最多返回的数量

    Returns:
        排好序的标签列表，长度 <= n

    Examples:
        top_n(["b", "a", "b", "c", "a"], 2) → ["a", "b"]
        top_n(["x"], 5) → ["x"]
    """
    if n <= 0:
        return []
    counts = Counter(items)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [item for item, _ in ranked[:n]]


def classify_threat(
    ratio: float,
    high_ratio: float = DEFAULT_HIGH_THREAT_RATIO,
    medium_ratio: float = DEFAULT_MEDIUM_THREAT_RATIO
) -> ThreatLevel:
    """
    根据带威胁标记的记录比例给出威胁等级

    比较均为严格大于：
        - ratio > 0.3  → high
        - ratio > 0.15 → medium
        - 其他         → low

    Examples:
        classify_threat(0.30) → medium
        classify_threat(0.31) → high
        classify_threat(0.15) → low
    """
    if ratio > high_ratio:
        return ThreatLevel.HIGH
    if ratio > medium_ratio:
        return ThreatLevel.MEDIUM
    return ThreatLevel.LOW
