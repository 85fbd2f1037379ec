"""
地点数据模型
LocationEntry 是地名词典中的条目，LocationResult 是一次地点识别的结果
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any


UNKNOWN = "Unknown"

# 置信度分级（由命中阶段决定）
CANONICAL_CONFIDENCE = 0.9
ALTERNATE_CONFIDENCE = 0.8
REGION_CONFIDENCE = 0.6
UNKNOWN_CONFIDENCE = 0.1

# 置信度 <= 该值的结果视为低置信度，下游应谨慎使用
LOW_CONFIDENCE_CEILING = REGION_CONFIDENCE


@dataclass(frozen=True)
class LocationMetadata:
    """
    地点元数据（汇总时透传）

    字段说明:
    - population: 人口估计
    - is_major_city: 是否为主要城市
    - urban_rural: 城市/乡村（"urban" / "rural"）
    - division / subdivision: 省下行政区划
    - latitude / longitude: 坐标
    """
    population: Optional[int] = None
    is_major_city: Optional[bool] = None
    urban_rural: Optional[str] = None
    division: Optional[str] = None
    subdivision: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class LocationEntry:
    """
    地名词典条目

    字段说明:
    - city_town: 标准名称（词典内唯一）
    - region: 大区
    - division: 省
    - subdivision: 县
    - alternative_names: 别名/拼写变体（可能与其他条目重叠）
    """
    city_town: str
    region: str
    division: Optional[str] = None
    subdivision: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    alternative_names: Tuple[str, ...] = field(default_factory=tuple)
    population: Optional[int] = None
    is_major_city: Optional[bool] = None
    urban_rural: Optional[str] = None

    @property
    def metadata(self) -> LocationMetadata:
        return LocationMetadata(
            population=self.population,
            is_major_city=self.is_major_city,
            urban_rural=self.urban_rural,
            division=self.division,
            subdivision=self.subdivision,
            latitude=self.latitude,
            longitude=self.longitude,
        )

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'LocationEntry':
        """从 cameroon_locations 表的一行创建条目"""
        return cls(
            city_town=row["city_town"],
            region=row["region"],
            division=row.get("division"),
            subdivision=row.get("subdivision"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            alternative_names=tuple(row.get("alternative_names") or ()),
            population=row.get("population"),
            is_major_city=row.get("is_major_city"),
            urban_rural=row.get("urban_rural"),
        )


@dataclass(frozen=True)
class LocationResult:
    """
    地点识别结果

    confidence 取值于 (0, 1]，由命中阶段决定：
    标准名 0.9 > 别名 0.8 > 大区关键词 0.6 > 未知 0.1
    """
    region: str = UNKNOWN
    city: str = UNKNOWN
    division: Optional[str] = None
    subdivision: Optional[str] = None
    confidence: float = UNKNOWN_CONFIDENCE

    @property
    def is_low_confidence(self) -> bool:
        """低置信度结果不是错误，只是提示下游谨慎使用"""
        return self.confidence <= LOW_CONFIDENCE_CEILING

    @property
    def is_unknown(self) -> bool:
        return self.region == UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "region": self.region,
            "city": self.city,
            "confidence": self.confidence,
        }
        if self.division is not None:
            data["division"] = self.division
        if self.subdivision is not None:
            data["subdivision"] = self.subdivision
        return data
