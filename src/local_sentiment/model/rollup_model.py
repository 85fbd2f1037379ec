"""
城市日汇总数据模型
对应 camerpulse_intelligence_local_sentiment 表，主键 (city_town, region, date_recorded)
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, List, Tuple, Dict, Any


class ThreatLevel(str, Enum):
    """城市级别的威胁等级"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class SentimentBreakdown:
    """
    情感分布

    不变量: positive + negative + neutral == 记录总数
    """
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    avg_score: float = 0.0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral

    def to_dict(self) -> Dict[str, Any]:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
            "avg_score": self.avg_score,
        }


@dataclass(frozen=True)
class LocalityRollup:
    """
    单个城市单日的情感汇总

    每次运行都完整重算，写入时整行覆盖，不做增量合并
    """
    city: str
    region: str
    date_recorded: date
    content_volume: int
    sentiment: SentimentBreakdown
    dominant_emotions: Tuple[str, ...] = field(default_factory=tuple)
    top_concerns: Tuple[str, ...] = field(default_factory=tuple)
    trending_tags: Tuple[str, ...] = field(default_factory=tuple)
    threat_level: ThreatLevel = ThreatLevel.LOW
    division: Optional[str] = None
    subdivision: Optional[str] = None
    population: Optional[int] = None
    is_major_city: Optional[bool] = None
    urban_rural: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def key(self) -> Tuple[str, str, date]:
        return (self.city, self.region, self.date_recorded)

    def to_row(self) -> Dict[str, Any]:
        """转换为完整的数据库行（不含任何时钟字段，保证重跑结果一致）"""
        return {
            "city_town": self.city,
            "region": self.region,
            "date_recorded": self.date_recorded.isoformat(),
            "division": self.division,
            "subdivision": self.subdivision,
            "content_volume": self.content_volume,
            "overall_sentiment": self.sentiment.avg_score,
            "sentiment_breakdown": self.sentiment.to_dict(),
            "dominant_emotions": list(self.dominant_emotions),
            "top_concerns": list(self.top_concerns),
            "trending_hashtags": list(self.trending_tags),
            "threat_level": self.threat_level.value,
            "population_estimate": self.population,
            "is_major_city": self.is_major_city,
            "urban_rural": self.urban_rural,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


@dataclass
class RunSummary:
    """
    一次聚合运行的摘要

    failed_localities 中的城市可以直接对同一时间窗口重跑
    """
    window_start: datetime
    window_end: datetime
    cities_processed: int = 0
    records_analyzed: int = 0
    failed_localities: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_localities)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window_start": self.window_start.isoformat(),
            "window_end": self.window_end.isoformat(),
            "cities_processed": self.cities_processed,
            "records_analyzed": self.records_analyzed,
            "failed_localities": [
                {"city": city, "region": region}
                for city, region in self.failed_localities
            ],
        }
