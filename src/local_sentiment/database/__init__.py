"""
数据库模块
提供 Supabase PostgreSQL 连接和数据访问
"""

from .supabase_client import get_supabase_client, SupabaseRepository
from .sentiment_log_repo import SentimentLogRepository
from .rollup_repo import RollupRepository
from .location_repo import LocationRepository

__all__ = [
    "get_supabase_client", "SupabaseRepository",
    "SentimentLogRepository", "RollupRepository", "LocationRepository"
]
