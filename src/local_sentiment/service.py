"""
本地情感服务
把 Supabase 数据仓库装配到地点识别器和聚合引擎上，供 API 和定时任务调用
"""

import logging
from datetime import datetime
from typing import Optional

from .aggregation import AggregationEngine, default_window
from .config import AggregationConfig, get_config
from .database import LocationRepository, RollupRepository, SentimentLogRepository
from .location_resolver import LocationResolver
from .model import RunSummary


def build_resolver(location_repo: Optional[LocationRepository] = None) -> LocationResolver:
    """用数据库中的地名词典创建识别器（不可用时使用内置词典）"""
    repo = location_repo or LocationRepository()
    return LocationResolver(repo.load_gazetteer())


def build_engine(config: Optional[AggregationConfig] = None) -> AggregationEngine:
    """创建使用 Supabase 数据仓库的聚合引擎"""
    config = get_config(config)
    return AggregationEngine(
        record_source=SentimentLogRepository(page_size=config.page_size),
        rollup_store=RollupRepository(),
        metadata_source=LocationRepository(),
        config=config,
    )


def run_aggregation(
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
    engine: Optional[AggregationEngine] = None
) -> RunSummary:
    """
    执行一次聚合

    未指定窗口时聚合前一个完整自然日

    Raises:
        DataFetchError: 记录拉取失败
        ValueError: 窗口无效
    """
    if window_start is None or window_end is None:
        default_start, default_end = default_window()
        window_start = window_start or default_start
        window_end = window_end or default_end

    engine = engine or build_engine()
    summary = engine.run_aggregation(window_start, window_end)

    for city, region in summary.failed_localities:
        logging.warning(f"🔁 需要重跑: {city}/{region} ({summary.window_start.date()})")

    return summary
