"""
数据模型模块
定义地点、内容记录、城市汇总三类数据模型
"""

from .location_model import (
    LocationEntry,
    LocationMetadata,
    LocationResult,
    UNKNOWN,
    CANONICAL_CONFIDENCE,
    ALTERNATE_CONFIDENCE,
    REGION_CONFIDENCE,
    UNKNOWN_CONFIDENCE,
)
from .content_model import RawContentRecord, ThreatIndicator, parse_timestamp, to_utc
from .rollup_model import LocalityRollup, SentimentBreakdown, ThreatLevel, RunSummary

__all__ = [
    'LocationEntry', 'LocationMetadata', 'LocationResult', 'UNKNOWN',
    'CANONICAL_CONFIDENCE', 'ALTERNATE_CONFIDENCE', 'REGION_CONFIDENCE', 'UNKNOWN_CONFIDENCE',
    'RawContentRecord', 'ThreatIndicator', 'parse_timestamp', 'to_utc',
    'LocalityRollup', 'SentimentBreakdown', 'ThreatLevel', 'RunSummary'
]
