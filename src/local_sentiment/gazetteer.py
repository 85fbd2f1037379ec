"""
喀麦隆地名词典
提供只读的地点条目、别名和大区关键词，供地点识别与汇总时的元数据查询使用

数据说明：
- 内置词典覆盖十个大区的首府和主要城镇
- 可通过 Gazetteer.from_rows() 从 cameroon_locations 表加载
- 扫描顺序是显式排好的列表，不依赖字典的插入顺序
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Any

from .model import LocationEntry, LocationMetadata


# ================= 城镇条目 =================
CAMEROON_LOCATIONS: List[LocationEntry] = [
    # Centre
    LocationEntry("Yaoundé", "Centre", "Mfoundi", "Yaoundé I", 3.848, 11.502,
                  ("yaounde", "yde", "political capital"), is_major_city=True, urban_rural="urban"),
    LocationEntry("Bafia", "Centre", "Mbam-et-Inoubou", "Bafia", 4.75, 11.23),
    LocationEntry("Nanga-Eboko", "Centre", "Haute-Sanaga", "Nanga-Eboko", 4.69, 12.37,
                  ("nanga eboko",)),

    # Littoral
    LocationEntry("Douala", "Littoral", "Wouri", "Douala I", 4.048, 9.754,
                  ("dla", "economic capital"), is_major_city=True, urban_rural="urban"),
    LocationEntry("Edéa", "Littoral", "Sanaga-Maritime", "Edéa", 3.8, 10.13, ("edea",)),
    LocationEntry("Nkongsamba", "Littoral", "Mungo", "Nkongsamba", 4.95, 9.94),

    # Northwest
    LocationEntry("Bamenda", "Northwest", "Mezam", "Bamenda I", 5.96, 10.15,
                  ("abakwa", "mankon"), is_major_city=True, urban_rural="urban"),
    LocationEntry("Kumbo", "Northwest", "Bui", "Kumbo", 6.2, 10.67),
    LocationEntry("Nkambe", "Northwest", "Donga-Mantung", "Nkambe", 6.58, 10.77),
    LocationEntry("Mbengwi", "Northwest", "Momo", "Mbengwi", 6.17, 9.68),
    LocationEntry("Wum", "Northwest", "Menchum", "Wum", 6.38, 10.07),
    LocationEntry("Fundong", "Northwest", "Boyo", "Fundong", 6.22, 10.3),

    # Southwest
    LocationEntry("Buea", "Southwest", "Fako", "Buea", 4.15, 9.24,
                  ("buea town",), is_major_city=True, urban_rural="urban"),
    LocationEntry("Limbe", "Southwest", "Fako", "Limbe I", 4.02, 9.2, ("victoria",)),
    LocationEntry("Kumba", "Southwest", "Meme", "Kumba I", 4.63, 9.45),
    LocationEntry("Mamfe", "Southwest", "Manyu", "Mamfe Central", 5.75, 9.3),
    LocationEntry("Mundemba", "Southwest", "Ndian", "Mundemba", 4.57, 8.87),
    LocationEntry("Tiko", "Southwest", "Fako", "Tiko", 4.08, 9.36),

    # Far North
    LocationEntry("Maroua", "Far North", "Diamaré", "Maroua I", 10.6, 14.32,
                  is_major_city=True, urban_rural="urban"),
    LocationEntry("Yagoua", "Far North", "Mayo-Danay", "Yagoua", 10.33, 15.23),
    LocationEntry("Kousséri", "Far North", "Logone-et-Chari", "Kousséri", 12.08, 15.03,
                  ("kousseri",)),
    LocationEntry("Mora", "Far North", "Mayo-Sava", "Mora", 11.05, 14.13),

    # North
    LocationEntry("Garoua", "North", "Bénoué", "Garoua I", 9.3, 13.4,
                  is_major_city=True, urban_rural="urban"),
    LocationEntry("Poli", "North", "Faro", "Poli", 8.42, 13.25),
    LocationEntry("Tcholliré", "North", "Mayo-Rey", "Tcholliré", 8.38, 14.17, ("tchollire",)),

    # Adamawa
    LocationEntry("Ngaoundéré", "Adamawa", "Vina", "Ngaoundéré I", 7.32, 13.58,
                  ("ngaoundere",), is_major_city=True, urban_rural="urban"),
    LocationEntry("Meiganga", "Adamawa", "Mbéré", "Meiganga", 6.52, 14.3),
    LocationEntry("Tibati", "Adamawa", "Djérem", "Tibati", 6.47, 12.63),

    # East
    LocationEntry("Bertoua", "East", "Lom-et-Djérem", "Bertoua I", 4.58, 13.68,
                  is_major_city=True, urban_rural="urban"),
    LocationEntry("Batouri", "East", "Kadey", "Batouri", 4.43, 14.37),
    LocationEntry("Bélabo", "East", "Lom-et-Djérem", "Bélabo", 4.93, 13.3, ("belabo",)),

    # South
    LocationEntry("Ebolowa", "South", "Mvila", "Ebolowa I", 2.92, 11.15,
                  is_major_city=True, urban_rural="urban"),
    LocationEntry("Sangmélima", "South", "Dja-et-Lobo", "Sangmélima", 2.93, 11.98,
                  ("sangmelima",)),
    LocationEntry("Kribi", "South", "Océan", "Kribi", 2.95, 9.91),

    # West
    LocationEntry("Bafoussam", "West", "Mifi", "Bafoussam I", 5.48, 10.42,
                  is_major_city=True, urban_rural="urban"),
    LocationEntry("Mbouda", "West", "Bamboutos", "Mbouda", 5.62, 10.25),
    LocationEntry("Bafang", "West", "Haut-Nkam", "Bafang", 5.15, 10.18),
    LocationEntry("Foumban", "West", "Noun", "Foumban", 5.72, 10.9),
    LocationEntry("Dschang", "West", "Menoua", "Dschang", 5.45, 10.05),
]

# ================= 大区关键词 =================
# 按声明顺序扫描：Northwest/Southwest/Far North 必须排在 North/South 之前
REGION_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Centre", ("centre", "central", "yaoundé", "yaounde")),
    ("Littoral", ("littoral", "coastal", "douala")),
    ("Northwest", ("northwest", "nw", "nord-ouest", "bamenda")),
    ("Southwest", ("southwest", "sw", "sud-ouest", "buea", "limbe")),
    ("Far North", ("far north", "extreme-nord", "maroua")),
    ("North", ("north", "nord", "garoua")),
    ("Adamawa", ("adamawa", "adamaoua", "ngaoundéré")),
    ("East", ("east", "est", "bertoua")),
    ("South", ("south", "sud", "ebolowa")),
    ("West", ("west", "ouest", "bafoussam")),
]


def _scan_order(item: Tuple[str, LocationEntry]) -> Tuple[int, str, str]:
    """最长的名称优先，其次按名称、再按标准名升序"""
    key, entry = item
    return (-len(key), key, entry.city_town)


class Gazetteer:
    """
    只读地名词典

    扫描规则（第一个命中即返回）：
    - 标准名、别名各自排成显式列表，顺序为「名称越长越靠前，同长按字母升序」
    - 同一别名可以属于多个条目，此时按标准名升序决定先后
    - 大区关键词保持声明顺序
    """

    def __init__(self,
                 entries: Iterable[LocationEntry],
                 region_keywords: Sequence[Tuple[str, Sequence[str]]] = REGION_KEYWORDS):
        self._entries: Tuple[LocationEntry, ...] = tuple(entries)

        canonical: Dict[str, LocationEntry] = {}
        for entry in self._entries:
            key = entry.city_town.lower()
            if key in canonical:
                raise ValueError(f"地名词典中存在重复的标准名: {entry.city_town}")
            canonical[key] = entry

        alternates: List[Tuple[str, LocationEntry]] = []
        for entry in self._entries:
            seen = set()
            for name in entry.alternative_names:
                key = name.strip().lower()
                if key and key not in seen:
                    seen.add(key)
                    alternates.append((key, entry))

        self._canonical_index = sorted(canonical.items(), key=_scan_order)
        self._alternate_index = sorted(alternates, key=_scan_order)
        self._region_keywords = [
            (region, tuple(k.lower() for k in keywords))
            for region, keywords in region_keywords
        ]
        self._by_locality = {(e.city_town, e.region): e for e in self._entries}

    # ==================== 扫描列表 ====================

    @property
    def canonical_index(self) -> List[Tuple[str, LocationEntry]]:
        return list(self._canonical_index)

    @property
    def alternate_index(self) -> List[Tuple[str, LocationEntry]]:
        return list(self._alternate_index)

    @property
    def region_keywords(self) -> List[Tuple[str, Tuple[str, ...]]]:
        return list(self._region_keywords)

    @property
    def entries(self) -> Tuple[LocationEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ==================== 查询方法 ====================

    def get(self, city: str, region: str) -> Optional[LocationEntry]:
        """按 (城市, 大区) 精确查找条目"""
        return self._by_locality.get((city, region))

    def lookup_metadata(self, city: str, region: str) -> Optional[LocationMetadata]:
        """查找城市元数据，未找到返回 None"""
        entry = self.get(city, region)
        return entry.metadata if entry else None

    def get_stats(self) -> Dict[str, int]:
        return {
            "locations": len(self._entries),
            "alternative_names": len(self._alternate_index),
            "regions": len(self._region_keywords),
            "major_cities": sum(1 for e in self._entries if e.is_major_city),
        }

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]]) -> 'Gazetteer':
        """
        从 cameroon_locations 表的行创建词典

        标准名重复的行只保留第一条并打印警告
        """
        entries = []
        seen = set()
        for row in rows:
            entry = LocationEntry.from_row(row)
            key = entry.city_town.lower()
            if key in seen:
                logging.warning(f"⚠️ 忽略重复地名: {entry.city_town} ({entry.region})")
                continue
            seen.add(key)
            entries.append(entry)
        return cls(entries)


_default_gazetteer: Optional[Gazetteer] = None


def default_gazetteer() -> Gazetteer:
    """内置喀麦隆地名词典（单例）"""
    global _default_gazetteer
    if _default_gazetteer is None:
        _default_gazetteer = Gazetteer(CAMEROON_LOCATIONS)
    return _default_gazetteer
