"""
内容记录数据仓库
从 camerpulse_intelligence_sentiment_logs 表按时间窗口读取已识别城市的记录
"""

import logging
from datetime import datetime
from typing import List

from ..config import default_config
from ..errors import DataFetchError
from ..model import RawContentRecord, to_utc
from .supabase_client import SupabaseRepository


SENTIMENT_LOGS_TABLE = "camerpulse_intelligence_sentiment_logs"

# 聚合只需要这些列
SENTIMENT_LOG_COLUMNS = (
    "id, content_text, created_at, sentiment_score, emotional_tone, keywords_detected, "
    "hashtags, threat_level, region_detected, city_detected, subdivision_detected, coordinates"
)


class SentimentLogRepository(SupabaseRepository):
    """内容记录数据仓库（只读）"""

    def __init__(self, client=None, page_size: int = None):
        super().__init__(client)
        self.page_size = page_size or default_config.page_size

    def fetch_window(self, start: datetime, end: datetime) -> List[RawContentRecord]:
        """
        拉取 [start, end) 内 city_detected 非空的记录

        按 (created_at, id) 分页读取，直到某页不足 page_size

        Raises:
            DataFetchError: 数据库不可用、查询失败或返回了无法解析的行
        """
        if not self.is_available():
            raise DataFetchError("数据库不可用，无法拉取内容记录")

        start_iso = to_utc(start).isoformat()
        end_iso = to_utc(end).isoformat()

        rows = []
        offset = 0
        try:
            while True:
                result = self.client.table(SENTIMENT_LOGS_TABLE) \
                    .select(SENTIMENT_LOG_COLUMNS) \
                    .not_.is_("city_detected", "null") \
                    .gte("created_at", start_iso) \
                    .lt("created_at", end_iso) \
                    .order("created_at", desc=False) \
                    .order("id", desc=False) \
                    .range(offset, offset + self.page_size - 1) \
                    .execute()

                page = result.data or []
                rows.extend(page)
                if len(page) < self.page_size:
                    break
                offset += self.page_size

            records = [RawContentRecord.from_row(row) for row in rows]
        except Exception as e:
            raise DataFetchError(f"拉取内容记录失败: {e}") from e

        logging.info(f"📥 拉取到 {len(records)} 条记录 ({start_iso} ~ {end_iso})")
        return records
