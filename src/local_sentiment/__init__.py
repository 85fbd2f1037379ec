"""
本地情感分析
地点识别 + 按城市的日情感汇总
"""

from .config import AggregationConfig, default_config
from .errors import LocalSentimentError, DataFetchError, UpsertError
from .gazetteer import Gazetteer, default_gazetteer
from .location_resolver import LocationResolver, resolve_location
from .aggregation import AggregationEngine, top_n, classify_threat, default_window
from .model import (
    LocationEntry,
    LocationMetadata,
    LocationResult,
    RawContentRecord,
    ThreatIndicator,
    LocalityRollup,
    SentimentBreakdown,
    ThreatLevel,
    RunSummary,
)

__all__ = [
    # 配置
    'AggregationConfig', 'default_config',
    # 错误
    'LocalSentimentError', 'DataFetchError', 'UpsertError',
    # 地点识别
    'Gazetteer', 'default_gazetteer', 'LocationResolver', 'resolve_location',
    # 聚合
    'AggregationEngine', 'top_n', 'classify_threat', 'default_window',
    # 数据模型
    'LocationEntry', 'LocationMetadata', 'LocationResult',
    'RawContentRecord', 'ThreatIndicator',
    'LocalityRollup', 'SentimentBreakdown', 'ThreatLevel', 'RunSummary'
]
