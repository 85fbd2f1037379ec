"""
本地情感聚合引擎
按时间窗口拉取已识别城市的内容记录，按 (城市, 大区) 分组计算日汇总并整行写入

运行流程：
1. 拉取 [window_start, window_end) 内 city 非空的记录（拉取失败则整次中止）
2. 按 (城市, 大区) 分组累加
3. 每组计算情感分布、Top-N 标签、威胁等级，补充词典元数据
4. 以 (城市, 大区, 日期) 为键整行覆盖写入；单组写入失败只记录，不影响其他组

同一窗口重复运行、输入不变时，写入的汇总完全一致。
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from ..config import AggregationConfig, get_config
from ..errors import DataFetchError
from ..model import (
    LocalityRollup,
    LocationMetadata,
    RawContentRecord,
    RunSummary,
    SentimentBreakdown,
    to_utc,
    UNKNOWN,
)
from .ranking import top_n, classify_threat


LocalityKey = Tuple[str, str]


def default_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    默认聚合窗口：前一个完整自然日（UTC）

    Returns:
        (昨天 00:00, 今天 00:00)
    """
    now = to_utc(now) if now else datetime.now(timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return today - timedelta(days=1), today


@dataclass
class LocalityAccumulator:
    """单个 (城市, 大区) 分组的累加器"""
    city: str
    region: str
    scores: List[float] = field(default_factory=list)
    emotions: List[str] = field(default_factory=list)
    concerns: List[str] = field(default_factory=list)
    hashtags: List[str] = field(default_factory=list)
    threat_count: int = 0
    volume: int = 0
    division: Optional[str] = None
    subdivision: Optional[str] = None

    @property
    def key(self) -> LocalityKey:
        return (self.city, self.region)

    def add(self, record: RawContentRecord) -> None:
        self.scores.append(record.sentiment_score)
        self.emotions.extend(record.emotions)
        self.concerns.extend(record.concerns)
        self.hashtags.extend(record.hashtags)
        if record.has_threat:
            self.threat_count += 1
        if self.division is None:
            self.division = record.division
        if self.subdivision is None:
            self.subdivision = record.subdivision
        self.volume += 1

    def breakdown(self, threshold: float) -> SentimentBreakdown:
        """
        情感分布

        score > threshold → 正面；score < -threshold → 负面；其余为中性
        """
        positive = sum(1 for s in self.scores if s > threshold)
        negative = sum(1 for s in self.scores if s < -threshold)
        neutral = len(self.scores) - positive - negative
        avg_score = sum(self.scores) / len(self.scores) if self.scores else 0.0
        return SentimentBreakdown(
            positive=positive,
            negative=negative,
            neutral=neutral,
            avg_score=avg_score,
        )

    @property
    def threat_ratio(self) -> float:
        return self.threat_count / self.volume if self.volume else 0.0


def group_records(records: List[RawContentRecord]) -> Dict[LocalityKey, LocalityAccumulator]:
    """
    按 (城市, 大区) 分组

    记录先按 (created_at, id) 排序，保证累加顺序与拉取顺序无关
    """
    groups: Dict[LocalityKey, LocalityAccumulator] = {}
    for record in sorted(records, key=lambda r: r.sort_key):
        key = (record.city, record.region or UNKNOWN)
        if key not in groups:
            groups[key] = LocalityAccumulator(city=key[0], region=key[1])
        groups[key].add(record)
    return groups


class AggregationEngine:
    """
    聚合引擎

    依赖均通过构造函数注入：
    - record_source: 提供 fetch_window(start, end) -> List[RawContentRecord]
    - rollup_store: 提供 upsert(LocalityRollup)
    - metadata_source: 提供 lookup_metadata(city, region) -> Optional[LocationMetadata]
    """

    def __init__(self,
                 record_source,
                 rollup_store,
                 metadata_source=None,
                 config: AggregationConfig = None):
        self.record_source = record_source
        self.rollup_store = rollup_store
        self.metadata_source = metadata_source
        self.config = get_config(config)

    # ==================== 运行入口 ====================

    def run_aggregation(self, window_start: datetime, window_end: datetime) -> RunSummary:
        """
        对一个时间窗口执行聚合

        Args:
            window_start: 窗口开始（含）
            window_end: 窗口结束（不含）

        Returns:
            RunSummary

        Raises:
            ValueError: 窗口开始时间不早于结束时间
            DataFetchError: 记录拉取失败，此时不写入任何汇总
        """
        start = to_utc(window_start)
        end = to_utc(window_end)
        if start >= end:
            raise ValueError(f"无效的时间窗口: {start.isoformat()} ~ {end.isoformat()}")

        date_recorded = start.date()
        logging.info(f"🧮 开始聚合: {start.isoformat()} ~ {end.isoformat()}")

        records = self._fetch(start, end)
        summary = RunSummary(window_start=start, window_end=end, records_analyzed=len(records))

        if not records:
            logging.info("📭 窗口内没有带城市信息的记录")
            return summary

        groups = group_records(records)
        keys = sorted(groups)
        logging.info(f"📊 {len(records)} 条记录，{len(keys)} 个城市")

        workers = min(self.config.max_workers, len(keys))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(
                lambda key: self._process_locality(groups[key], date_recorded),
                keys
            ))

        for key, ok in zip(keys, results):
            if ok:
                summary.cities_processed += 1
            else:
                summary.failed_localities.append(key)

        if summary.has_failures:
            logging.warning(
                f"⚠️ 聚合完成（部分失败）: 成功 {summary.cities_processed} 个城市, "
                f"失败 {len(summary.failed_localities)} 个: {summary.failed_localities}"
            )
        else:
            logging.info(f"✅ 聚合完成: {summary.cities_processed} 个城市, {summary.records_analyzed} 条记录")

        return summary

    # ==================== 内部步骤 ====================

    def _fetch(self, start: datetime, end: datetime) -> List[RawContentRecord]:
        try:
            records = self.record_source.fetch_window(start, end)
        except DataFetchError:
            logging.error(f"❌ 记录拉取失败，聚合中止: {start.isoformat()} ~ {end.isoformat()}")
            raise
        except Exception as e:
            logging.error(f"❌ 记录拉取失败，聚合中止: {e}")
            raise DataFetchError(str(e)) from e

        # 再次按半开区间和城市非空过滤
        return [
            r for r in records
            if r.city and start <= to_utc(r.created_at) < end
        ]

    def _lookup_metadata(self, city: str, region: str) -> Optional[LocationMetadata]:
        if self.metadata_source is None:
            return None
        try:
            return self.metadata_source.lookup_metadata(city, region)
        except Exception as e:
            logging.warning(f"⚠️ 元数据查询失败 {city}/{region}，使用空值: {e}")
            return None

    def build_rollup(self, group: LocalityAccumulator, date_recorded: date) -> LocalityRollup:
        """根据分组累加结果构建汇总（纯计算，仅查询元数据）"""
        config = self.config
        metadata = self._lookup_metadata(group.city, group.region)

        return LocalityRollup(
            city=group.city,
            region=group.region,
            date_recorded=date_recorded,
            content_volume=group.volume,
            sentiment=group.breakdown(config.sentiment_threshold),
            dominant_emotions=tuple(top_n(group.emotions, config.top_emotions)),
            top_concerns=tuple(top_n(group.concerns, config.top_concerns)),
            trending_tags=tuple(top_n(group.hashtags, config.top_tags)),
            threat_level=classify_threat(
                group.threat_ratio,
                high_ratio=config.high_threat_ratio,
                medium_ratio=config.medium_threat_ratio
            ),
            division=(metadata.division if metadata else None) or group.division,
            subdivision=group.subdivision or (metadata.subdivision if metadata else None),
            population=metadata.population if metadata else None,
            is_major_city=metadata.is_major_city if metadata else None,
            urban_rural=metadata.urban_rural if metadata else None,
            latitude=metadata.latitude if metadata else None,
            longitude=metadata.longitude if metadata else None,
        )

    def _process_locality(self, group: LocalityAccumulator, date_recorded: date) -> bool:
        """构建并写入一个城市的汇总，返回是否成功"""
        try:
            rollup = self.build_rollup(group, date_recorded)
            self.rollup_store.upsert(rollup)
            logging.debug(f"✓ {group.city}/{group.region}: {group.volume} 条")
            return True
        except Exception as e:
            logging.error(f"❌ 汇总写入失败 {group.city}/{group.region}: {e}")
            return False
