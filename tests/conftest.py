"""
测试公共夹具
提供内存版的记录源、汇总存储和可链式调用的 Supabase 查询替身
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from local_sentiment.errors import UpsertError
from local_sentiment.model import RawContentRecord, ThreatIndicator


WINDOW_START = datetime(2026, 1, 22, 0, 0, 0, tzinfo=timezone.utc)
WINDOW_END = datetime(2026, 1, 23, 0, 0, 0, tzinfo=timezone.utc)


def make_record(
    record_id,
    city="Douala",
    region="Littoral",
    score=0.0,
    created_at=None,
    emotions=(),
    concerns=(),
    hashtags=(),
    threat="none",
    subdivision=None,
):
    return RawContentRecord(
        id=str(record_id),
        content_text=f"record {record_id}",
        created_at=created_at or datetime(2026, 1, 22, 10, 0, 0, tzinfo=timezone.utc),
        sentiment_score=score,
        emotions=tuple(emotions),
        concerns=tuple(concerns),
        hashtags=tuple(hashtags),
        threat_indicator=ThreatIndicator(threat),
        region=region,
        city=city,
        subdivision=subdivision,
    )


class ListRecordSource:
    """按顺序返回固定记录的记录源"""

    def __init__(self, records=None, error=None):
        self.records = list(records or [])
        self.error = error
        self.calls = []

    def fetch_window(self, start, end):
        self.calls.append((start, end))
        if self.error:
            raise self.error
        return list(self.records)


class InMemoryRollupStore:
    """以 (城市, 大区, 日期) 为键整行覆盖的内存存储"""

    def __init__(self, fail_for=()):
        self.rows = {}
        self.fail_for = set(fail_for)
        self.upsert_count = 0

    def upsert(self, rollup):
        if (rollup.city, rollup.region) in self.fail_for:
            raise UpsertError(rollup.city, rollup.region, "simulated failure")
        self.rows[rollup.key] = rollup.to_row()
        self.upsert_count += 1


class FakeQuery:
    """
    Supabase 查询构造器替身

    记录所有链式调用；execute() 依次返回 pages 中的数据
    """

    def __init__(self, pages=None, error=None):
        self.pages = list(pages or [[]])
        self.error = error
        self.calls = []

    @property
    def not_(self):
        self.calls.append(("not_",))
        return self

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name,) + args + tuple(sorted(kwargs.items())))
            return self
        return method

    def execute(self):
        if self.error:
            raise self.error
        data = self.pages.pop(0) if self.pages else []
        return SimpleNamespace(data=data, count=len(data))

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


class FakeClient:
    def __init__(self, query):
        self.query = query
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


@pytest.fixture
def store():
    return InMemoryRollupStore()
