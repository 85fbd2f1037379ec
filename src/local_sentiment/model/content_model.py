"""
内容记录数据模型
对应上游写入的 camerpulse_intelligence_sentiment_logs 表
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple, Dict, Any, Union


class ThreatIndicator(str, Enum):
    """单条记录的威胁标记"""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'ThreatIndicator':
        """
        解析 threat_level 字段

        空值视为 none；其他无法识别的非空值仍算作威胁，按 low 处理
        """
        text = str(value).strip().lower() if value is not None else ""
        if not text:
            return cls.NONE
        try:
            return cls(text)
        except ValueError:
            logging.debug(f"⚠️ 未知的威胁标记 {value!r}，按 low 计入")
            return cls.LOW


def to_utc(dt: datetime) -> datetime:
    """无时区的时间按 UTC 处理"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    解析 Supabase 返回的时间戳

    Examples:
        "2026-01-22T10:00:00+00:00"
        "2026-01-22T10:00:00.123456Z"
    """
    if isinstance(value, datetime):
        return to_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def _as_tuple(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value if v)


@dataclass(frozen=True)
class RawContentRecord:
    """
    已打标的内容记录

    字段说明:
    - sentiment_score: 情感分（通常在 [-1, 1]）
    - emotions: 情绪标签
    - concerns: 关键词/关注点标签
    - hashtags: 话题标签
    - threat_indicator: 威胁标记
    - region / city / division / subdivision / confidence: 地点识别结果，识别前为空
    """
    id: str
    content_text: str
    created_at: datetime
    sentiment_score: float = 0.0
    emotions: Tuple[str, ...] = field(default_factory=tuple)
    concerns: Tuple[str, ...] = field(default_factory=tuple)
    hashtags: Tuple[str, ...] = field(default_factory=tuple)
    threat_indicator: ThreatIndicator = ThreatIndicator.NONE
    region: Optional[str] = None
    city: Optional[str] = None
    division: Optional[str] = None
    subdivision: Optional[str] = None
    confidence: Optional[float] = None

    @property
    def has_threat(self) -> bool:
        return self.threat_indicator != ThreatIndicator.NONE

    @property
    def sort_key(self) -> Tuple[datetime, str]:
        return (self.created_at, self.id)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'RawContentRecord':
        """
        从数据库行创建记录

        sentiment_score 为空时按 0.0 计算；
        confidence 与 division 存放在 coordinates JSON 中
        """
        coordinates = row.get("coordinates") or {}
        score = row.get("sentiment_score")
        return cls(
            id=str(row.get("id")),
            content_text=row.get("content_text") or "",
            created_at=parse_timestamp(row["created_at"]),
            sentiment_score=float(score) if score is not None else 0.0,
            emotions=_as_tuple(row.get("emotional_tone")),
            concerns=_as_tuple(row.get("keywords_detected")),
            hashtags=_as_tuple(row.get("hashtags")),
            threat_indicator=ThreatIndicator.parse(row.get("threat_level")),
            region=row.get("region_detected"),
            city=row.get("city_detected"),
            division=coordinates.get("division"),
            subdivision=row.get("subdivision_detected"),
            confidence=coordinates.get("detection_confidence"),
        )
