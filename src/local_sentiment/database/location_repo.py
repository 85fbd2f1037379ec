"""
地点数据仓库
读取 cameroon_locations 表，提供城市元数据查询与地名词典加载
"""

import logging
from typing import Optional

from ..gazetteer import Gazetteer, default_gazetteer
from ..model import LocationEntry, LocationMetadata
from .supabase_client import SupabaseRepository


LOCATIONS_TABLE = "cameroon_locations"


class LocationRepository(SupabaseRepository):
    """地点数据仓库（只读）"""

    def lookup_metadata(self, city: str, region: str) -> Optional[LocationMetadata]:
        """
        查询城市元数据

        查询失败或未找到时返回 None，不抛出异常
        """
        if not self.is_available():
            return None

        try:
            result = self.client.table(LOCATIONS_TABLE) \
                .select("*") \
                .eq("city_town", city) \
                .eq("region", region) \
                .limit(1) \
                .execute()
        except Exception as e:
            logging.warning(f"⚠️ 查询地点元数据失败 {city}/{region}: {e}")
            return None

        if not result.data:
            logging.debug(f"地点元数据未找到: {city}/{region}")
            return None

        return LocationEntry.from_row(result.data[0]).metadata

    def load_gazetteer(self) -> Gazetteer:
        """
        从数据库加载地名词典

        表为空、不可用或读取失败时使用内置词典
        """
        if not self.is_available():
            return default_gazetteer()

        try:
            result = self.client.table(LOCATIONS_TABLE) \
                .select("*") \
                .order("city_town", desc=False) \
                .execute()
        except Exception as e:
            logging.warning(f"⚠️ 加载地名词典失败，使用内置词典: {e}")
            return default_gazetteer()

        if not result.data:
            logging.info("📖 cameroon_locations 为空，使用内置词典")
            return default_gazetteer()

        gazetteer = Gazetteer.from_rows(result.data)
        logging.info(f"📖 已从数据库加载 {len(gazetteer)} 个地点")
        return gazetteer
