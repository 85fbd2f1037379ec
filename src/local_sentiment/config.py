"""
聚合配置模块
统一管理本地情感聚合相关配置
"""

import os
from typing import Optional

from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

# ================= 聚合配置 =================

# Top-N 默认数量
DEFAULT_TOP_EMOTIONS = 5
DEFAULT_TOP_CONCERNS = 3
DEFAULT_TOP_TAGS = 5

# 情感分界（严格大于/小于）
DEFAULT_SENTIMENT_THRESHOLD = 0.1

# 威胁等级比例阈值（严格大于）
DEFAULT_HIGH_THREAT_RATIO = 0.3
DEFAULT_MEDIUM_THREAT_RATIO = 0.15

# 并发与分页
DEFAULT_MAX_WORKERS = 4
DEFAULT_PAGE_SIZE = 1000

# Supabase 请求超时（秒）
DEFAULT_SUPABASE_TIMEOUT = 10

# 每日聚合任务执行时间
DEFAULT_AGGREGATION_HOUR = 0
DEFAULT_AGGREGATION_MINUTE = 15


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


class AggregationConfig:
    """本地情感聚合配置类"""

    def __init__(self,
                 top_emotions: int = DEFAULT_TOP_EMOTIONS,
                 top_concerns: int = DEFAULT_TOP_CONCERNS,
                 top_tags: int = DEFAULT_TOP_TAGS,
                 sentiment_threshold: float = DEFAULT_SENTIMENT_THRESHOLD,
                 high_threat_ratio: float = DEFAULT_HIGH_THREAT_RATIO,
                 medium_threat_ratio: float = DEFAULT_MEDIUM_THREAT_RATIO,
                 max_workers: int = DEFAULT_MAX_WORKERS,
                 page_size: int = DEFAULT_PAGE_SIZE,
                 supabase_timeout: int = DEFAULT_SUPABASE_TIMEOUT,
                 aggregation_hour: int = DEFAULT_AGGREGATION_HOUR,
                 aggregation_minute: int = DEFAULT_AGGREGATION_MINUTE):
        """
        初始化配置

        Args:
            top_emotions: 主导情绪保留数量
            top_concerns: 主要关注点保留数量
            top_tags: 热门标签保留数量
            sentiment_threshold: 正/负面情感分界值
            high_threat_ratio: 高威胁比例阈值
            medium_threat_ratio: 中威胁比例阈值
            max_workers: 分组并行处理的线程数
            page_size: 拉取记录的分页大小
            supabase_timeout: 数据库请求超时（秒）
            aggregation_hour: 每日聚合执行的小时
            aggregation_minute: 每日聚合执行的分钟
        """
        if max_workers < 1:
            raise ValueError(f"max_workers 必须 >= 1: {max_workers}")
        if page_size < 1:
            raise ValueError(f"page_size 必须 >= 1: {page_size}")

        self.top_emotions = top_emotions
        self.top_concerns = top_concerns
        self.top_tags = top_tags
        self.sentiment_threshold = sentiment_threshold
        self.high_threat_ratio = high_threat_ratio
        self.medium_threat_ratio = medium_threat_ratio
        self.max_workers = max_workers
        self.page_size = page_size
        self.supabase_timeout = supabase_timeout
        self.aggregation_hour = aggregation_hour
        self.aggregation_minute = aggregation_minute

    @classmethod
    def from_env(cls) -> 'AggregationConfig':
        """从环境变量创建配置"""
        return cls(
            top_emotions=_env_int('AGGREGATION_TOP_EMOTIONS', DEFAULT_TOP_EMOTIONS),
            top_concerns=_env_int('AGGREGATION_TOP_CONCERNS', DEFAULT_TOP_CONCERNS),
            top_tags=_env_int('AGGREGATION_TOP_TAGS', DEFAULT_TOP_TAGS),
            max_workers=_env_int('AGGREGATION_MAX_WORKERS', DEFAULT_MAX_WORKERS),
            page_size=_env_int('AGGREGATION_PAGE_SIZE', DEFAULT_PAGE_SIZE),
            supabase_timeout=_env_int('SUPABASE_TIMEOUT', DEFAULT_SUPABASE_TIMEOUT),
            aggregation_hour=_env_int('AGGREGATION_HOUR', DEFAULT_AGGREGATION_HOUR),
            aggregation_minute=_env_int('AGGREGATION_MINUTE', DEFAULT_AGGREGATION_MINUTE),
        )


# 全局默认配置实例
default_config = AggregationConfig.from_env()


def get_config(config: Optional[AggregationConfig] = None) -> AggregationConfig:
    """返回传入的配置，未传入时使用全局默认配置"""
    return config or default_config
