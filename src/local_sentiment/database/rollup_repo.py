"""
城市日汇总数据仓库
写入与查询 camerpulse_intelligence_local_sentiment 表
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..errors import UpsertError
from ..model import LocalityRollup
from .supabase_client import SupabaseRepository


LOCAL_SENTIMENT_TABLE = "camerpulse_intelligence_local_sentiment"

# 冲突目标：每个城市每天一行
ROLLUP_CONFLICT_TARGET = "city_town,region,date_recorded"


class RollupRepository(SupabaseRepository):
    """城市日汇总数据仓库"""

    # ==================== 写入方法 ====================

    def upsert(self, rollup: LocalityRollup) -> None:
        """
        整行写入一个城市的日汇总

        冲突时用新行完整覆盖旧行，不做任何字段合并

        Raises:
            UpsertError: 数据库不可用或写入失败
        """
        if not self.is_available():
            raise UpsertError(rollup.city, rollup.region, "数据库不可用")

        try:
            self.client.table(LOCAL_SENTIMENT_TABLE).upsert(
                rollup.to_row(),
                on_conflict=ROLLUP_CONFLICT_TARGET
            ).execute()
        except Exception as e:
            raise UpsertError(rollup.city, rollup.region, str(e)) from e

    # ==================== 查询方法 ====================

    def query_recent(
        self,
        days: int = 7,
        region: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """
        查询最近 N 天的城市汇总

        Args:
            days: 天数
            region: 大区过滤（可选）
            now: 当前时间（测试用）

        Returns:
            按 date_recorded 降序、城市名升序排列的行
        """
        if not self.is_available():
            return []

        now = now or datetime.now(timezone.utc)
        since = (now - timedelta(days=days)).date().isoformat()

        query = self.client.table(LOCAL_SENTIMENT_TABLE) \
            .select("*") \
            .gte("date_recorded", since)
        if region:
            query = query.eq("region", region)

        result = query \
            .order("date_recorded", desc=True) \
            .order("city_town", desc=False) \
            .execute()

        rows = result.data or []
        logging.info(f"📊 查询到 {len(rows)} 条城市汇总 (since={since}, region={region or '全部'})")
        return rows
