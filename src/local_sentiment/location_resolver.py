"""
地点识别模块
将自由文本解析为 (大区, 城市) 并给出置信度分级

识别顺序（第一个命中即返回）：
1. 标准名子串匹配 → 0.9
2. 别名子串匹配 → 0.8
3. 大区关键词匹配 → 0.6（城市为 Unknown）
4. 全部未命中 → 0.1（大区、城市均为 Unknown）

多个地名同时出现时，按词典给出的扫描顺序取第一个，而不是取最具体的一个。
"""

import logging
from typing import Any, Dict, Optional

from .gazetteer import Gazetteer, default_gazetteer
from .model import (
    LocationEntry,
    LocationResult,
    UNKNOWN,
    CANONICAL_CONFIDENCE,
    ALTERNATE_CONFIDENCE,
    REGION_CONFIDENCE,
    UNKNOWN_CONFIDENCE,
)


def _entry_result(entry: LocationEntry, confidence: float) -> LocationResult:
    return LocationResult(
        region=entry.region,
        city=entry.city_town,
        division=entry.division,
        subdivision=entry.subdivision,
        confidence=confidence,
    )


class LocationResolver:
    """
    地点识别器

    无状态、无副作用，可被任意数量的调用方并发使用
    """

    def __init__(self, gazetteer: Optional[Gazetteer] = None):
        self.gazetteer = gazetteer or default_gazetteer()

    def resolve(self, text: Optional[str]) -> LocationResult:
        """
        识别文本中的地点

        Args:
            text: 自由文本（可以为空）

        Returns:
            LocationResult，永不抛出异常

        Examples:
            resolve("Power cuts again in Douala") → Littoral / Douala / 0.9
            resolve("Traffic in dla is terrible") → Littoral / Douala / 0.8
            resolve("Floods across the littoral") → Littoral / Unknown / 0.6
        """
        content = (text or "").lower()
        if not content:
            return LocationResult()

        for name, entry in self.gazetteer.canonical_index:
            if name in content:
                return _entry_result(entry, CANONICAL_CONFIDENCE)

        for name, entry in self.gazetteer.alternate_index:
            if name in content:
                return _entry_result(entry, ALTERNATE_CONFIDENCE)

        for region, keywords in self.gazetteer.region_keywords:
            if any(keyword in content for keyword in keywords):
                return LocationResult(region=region, city=UNKNOWN, confidence=REGION_CONFIDENCE)

        return LocationResult(region=UNKNOWN, city=UNKNOWN, confidence=UNKNOWN_CONFIDENCE)

    def enhance_record(self, content_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        为上游内容记录补充地点字段

        读取 content 或 content_text 字段，写入：
        - region_detected
        - city_detected（Unknown 时为 None）
        - subdivision_detected
        - coordinates（大区未知时为 None）

        Returns:
            新的字典，不修改传入的数据
        """
        text = content_data.get("content") or content_data.get("content_text") or ""
        location = self.resolve(text)

        enhanced = dict(content_data)
        enhanced["region_detected"] = location.region
        enhanced["city_detected"] = location.city if location.city != UNKNOWN else None
        enhanced["subdivision_detected"] = location.subdivision
        enhanced["coordinates"] = None if location.is_unknown else {
            "detection_confidence": location.confidence,
            "method": "content_analysis",
            "division": location.division,
        }

        if location.is_low_confidence:
            logging.debug(f"📍 低置信度地点识别: {location.region}/{location.city} ({location.confidence})")

        return enhanced


def resolve_location(text: Optional[str], gazetteer: Optional[Gazetteer] = None) -> LocationResult:
    """便捷函数：使用指定（或内置）词典识别地点"""
    return LocationResolver(gazetteer).resolve(text)
