"""
聚合引擎单元测试
使用内存记录源和内存存储，覆盖分组、情感分布、幂等重跑和部分失败
"""

import json
import random
from datetime import date, datetime, timezone
from unittest.mock import Mock

import pytest

from conftest import (
    WINDOW_START,
    WINDOW_END,
    make_record,
    ListRecordSource,
    InMemoryRollupStore,
)
from local_sentiment.aggregation import AggregationEngine, default_window
from local_sentiment.aggregation.engine import LocalityAccumulator, group_records
from local_sentiment.config import AggregationConfig
from local_sentiment.errors import DataFetchError
from local_sentiment.gazetteer import default_gazetteer
from local_sentiment.model import RawContentRecord, ThreatLevel


DOUALA_SCORES = [0.5, 0.4, 0.3, 0.2, -0.3, -0.4, -0.5, 0.0, 0.05, -0.05]


def douala_records():
    records = []
    for i, score in enumerate(DOUALA_SCORES):
        records.append(make_record(
            i,
            score=score,
            threat="medium" if i in (4, 5) else "none",
            emotions=["anger", "hope"] if score < 0 else ["hope"],
            concerns=["power cuts"] if i % 2 else ["water", "power cuts"],
            hashtags=["#DoualaFloods"] if i < 3 else [],
        ))
    return records


def run(records, store=None, metadata_source=None, config=None):
    engine = AggregationEngine(
        record_source=ListRecordSource(records),
        rollup_store=store if store is not None else InMemoryRollupStore(),
        metadata_source=metadata_source,
        config=config or AggregationConfig(max_workers=2),
    )
    return engine, engine.run_aggregation(WINDOW_START, WINDOW_END)


class TestDoualaScenario:
    """10 条 Douala 记录的完整场景"""

    def test_rollup_values(self, store):
        _, summary = run(douala_records(), store, metadata_source=default_gazetteer())

        row = store.rows[("Douala", "Littoral", date(2026, 1, 22))]
        breakdown = row["sentiment_breakdown"]

        assert summary.cities_processed == 1
        assert summary.records_analyzed == 10
        assert summary.failed_localities == []

        assert row["content_volume"] == 10
        assert breakdown["positive"] == 4
        assert breakdown["negative"] == 3
        assert breakdown["neutral"] == 3
        assert breakdown["avg_score"] == pytest.approx(sum(DOUALA_SCORES) / 10)
        assert row["overall_sentiment"] == breakdown["avg_score"]
        assert row["threat_level"] == "medium"

    def test_ranked_lists(self, store):
        run(douala_records(), store)

        row = store.rows[("Douala", "Littoral", date(2026, 1, 22))]

        assert row["dominant_emotions"] == ["hope", "anger"]
        assert row["top_concerns"] == ["power cuts", "water"]
        assert row["trending_hashtags"] == ["#DoualaFloods"]

    def test_metadata_enrichment(self, store):
        run(douala_records(), store, metadata_source=default_gazetteer())

        row = store.rows[("Douala", "Littoral", date(2026, 1, 22))]

        assert row["is_major_city"] is True
        assert row["urban_rural"] == "urban"
        assert row["division"] == "Wouri"
        assert row["subdivision"] == "Douala I"
        assert row["latitude"] == 4.048


class TestGrouping:
    """测试分组与计数不变量"""

    def test_groups_by_city_and_region(self, store):
        records = [
            make_record(1, city="Douala", region="Littoral", score=0.5),
            make_record(2, city="Douala", region="Littoral", score=-0.5),
            make_record(3, city="Buea", region="Southwest", score=0.0),
            # 同名城市但大区不同，单独成组
            make_record(4, city="Buea", region="Littoral", score=0.2),
        ]

        _, summary = run(records, store)

        assert summary.cities_processed == 3
        assert set(store.rows) == {
            ("Douala", "Littoral", date(2026, 1, 22)),
            ("Buea", "Southwest", date(2026, 1, 22)),
            ("Buea", "Littoral", date(2026, 1, 22)),
        }

    def test_counts_sum_to_volume(self, store):
        rng = random.Random(7)
        records = [
            make_record(i, city=rng.choice(["Douala", "Kumba", "Garoua"]),
                        region="Any", score=rng.uniform(-1, 1))
            for i in range(200)
        ]
        # 边界值
        records += [make_record(900 + i, score=s) for i, s in enumerate([0.1, -0.1, 0.1000001])]

        run(records, store)

        for row in store.rows.values():
            b = row["sentiment_breakdown"]
            assert b["positive"] + b["negative"] + b["neutral"] == row["content_volume"]

    def test_threshold_is_strict(self):
        group = LocalityAccumulator(city="Douala", region="Littoral")
        for i, score in enumerate([0.1, -0.1, 0.11, -0.11]):
            group.add(make_record(i, score=score))

        breakdown = group.breakdown(0.1)

        assert (breakdown.positive, breakdown.negative, breakdown.neutral) == (1, 1, 2)

    def test_group_records_ignores_fetch_order(self):
        records = douala_records()
        shuffled = list(records)
        random.Random(3).shuffle(shuffled)

        a = group_records(records)[("Douala", "Littoral")]
        b = group_records(shuffled)[("Douala", "Littoral")]

        assert a.scores == b.scores
        assert a.emotions == b.emotions

    def test_threat_ratio_high(self, store):
        records = [make_record(i, threat="high" if i < 4 else "none") for i in range(10)]

        run(records, store)

        assert store.rows[("Douala", "Littoral", date(2026, 1, 22))]["threat_level"] == ThreatLevel.HIGH.value

    def test_critical_rows_count_as_threats(self, store):
        """上游写入的 critical 标记同样计入威胁"""
        rows = [
            {
                "id": f"log-{i}",
                "content_text": "Gunfire reported in Douala",
                "created_at": "2026-01-22T10:00:00+00:00",
                "sentiment_score": -0.6,
                "threat_level": "critical" if i < 4 else "none",
                "region_detected": "Littoral",
                "city_detected": "Douala",
            }
            for i in range(10)
        ]

        run([RawContentRecord.from_row(row) for row in rows], store)

        assert store.rows[("Douala", "Littoral", date(2026, 1, 22))]["threat_level"] == "high"

    def test_threat_ratio_exactly_thirty_percent(self, store):
        records = [make_record(i, threat="low" if i < 3 else "none") for i in range(10)]

        run(records, store)

        assert store.rows[("Douala", "Littoral", date(2026, 1, 22))]["threat_level"] == "medium"


class TestWindow:
    """测试半开区间窗口"""

    def test_half_open_bounds(self, store):
        records = [
            make_record(1, created_at=WINDOW_START),
            make_record(2, created_at=datetime(2026, 1, 22, 23, 59, 59, tzinfo=timezone.utc)),
            make_record(3, created_at=WINDOW_END),
            make_record(4, created_at=datetime(2026, 1, 21, 23, 59, 59, tzinfo=timezone.utc)),
        ]

        _, summary = run(records, store)

        assert summary.records_analyzed == 2
        assert store.rows[("Douala", "Littoral", date(2026, 1, 22))]["content_volume"] == 2

    def test_records_without_city_skipped(self, store):
        records = [make_record(1), make_record(2, city=None)]

        _, summary = run(records, store)

        assert summary.records_analyzed == 1

    def test_invalid_window(self, store):
        engine = AggregationEngine(ListRecordSource([]), store)

        with pytest.raises(ValueError):
            engine.run_aggregation(WINDOW_END, WINDOW_START)

    def test_empty_window(self, store):
        _, summary = run([], store)

        assert summary.cities_processed == 0
        assert summary.records_analyzed == 0
        assert store.rows == {}

    def test_naive_window_treated_as_utc(self, store):
        engine = AggregationEngine(ListRecordSource([make_record(1)]), store)

        summary = engine.run_aggregation(datetime(2026, 1, 22), datetime(2026, 1, 23))

        assert summary.records_analyzed == 1
        assert summary.window_start.tzinfo is not None

    def test_default_window(self):
        start, end = default_window(datetime(2026, 1, 22, 15, 30, tzinfo=timezone.utc))

        assert start == datetime(2026, 1, 21, tzinfo=timezone.utc)
        assert end == datetime(2026, 1, 22, tzinfo=timezone.utc)


class TestIdempotence:
    """测试同一窗口重跑结果一致"""

    def test_rerun_is_byte_identical(self, store):
        records = douala_records() + [make_record(50, city="Bamenda", region="Northwest", score=-0.4)]
        engine = AggregationEngine(ListRecordSource(records), store, default_gazetteer())

        engine.run_aggregation(WINDOW_START, WINDOW_END)
        first = json.dumps(store.rows[("Douala", "Littoral", date(2026, 1, 22))], sort_keys=True)
        first_count = len(store.rows)

        engine.run_aggregation(WINDOW_START, WINDOW_END)
        second = json.dumps(store.rows[("Douala", "Littoral", date(2026, 1, 22))], sort_keys=True)

        assert first == second
        assert len(store.rows) == first_count
        assert store.upsert_count == 2 * first_count

    def test_fetch_order_does_not_matter(self):
        records = douala_records()
        shuffled = list(records)
        random.Random(11).shuffle(shuffled)

        store_a, store_b = InMemoryRollupStore(), InMemoryRollupStore()
        run(records, store_a)
        run(shuffled, store_b)

        assert json.dumps(store_a.rows[("Douala", "Littoral", date(2026, 1, 22))], sort_keys=True) == \
            json.dumps(store_b.rows[("Douala", "Littoral", date(2026, 1, 22))], sort_keys=True)


class TestFailures:
    """测试错误处理"""

    def test_fetch_failure_aborts_run(self, store):
        engine = AggregationEngine(ListRecordSource(error=RuntimeError("timeout")), store)

        with pytest.raises(DataFetchError):
            engine.run_aggregation(WINDOW_START, WINDOW_END)

        assert store.rows == {}

    def test_data_fetch_error_propagates(self, store):
        engine = AggregationEngine(ListRecordSource(error=DataFetchError("down")), store)

        with pytest.raises(DataFetchError, match="down"):
            engine.run_aggregation(WINDOW_START, WINDOW_END)

    def test_upsert_failure_is_partial(self):
        store = InMemoryRollupStore(fail_for={("Buea", "Southwest")})
        records = [
            make_record(1, city="Douala", region="Littoral"),
            make_record(2, city="Buea", region="Southwest"),
            make_record(3, city="Kumba", region="Southwest"),
        ]

        _, summary = run(records, store)

        assert summary.cities_processed == 2
        assert summary.failed_localities == [("Buea", "Southwest")]
        assert summary.has_failures
        assert ("Kumba", "Southwest", date(2026, 1, 22)) in store.rows

    def test_failed_localities_sorted(self):
        store = InMemoryRollupStore(fail_for={("Tiko", "Southwest"), ("Bafia", "Centre")})
        records = [
            make_record(1, city="Tiko", region="Southwest"),
            make_record(2, city="Bafia", region="Centre"),
        ]

        _, summary = run(records, store)

        assert summary.failed_localities == [("Bafia", "Centre"), ("Tiko", "Southwest")]

    def test_metadata_failure_degrades_to_null(self, store):
        metadata_source = Mock()
        metadata_source.lookup_metadata.side_effect = RuntimeError("lookup down")

        _, summary = run([make_record(1)], store, metadata_source=metadata_source)

        row = store.rows[("Douala", "Littoral", date(2026, 1, 22))]
        assert summary.cities_processed == 1
        assert row["population_estimate"] is None
        assert row["is_major_city"] is None
        assert row["urban_rural"] is None

    def test_metadata_not_found(self, store):
        run([make_record(1, city="Atlantis", region="Littoral")], store, metadata_source=default_gazetteer())

        row = store.rows[("Atlantis", "Littoral", date(2026, 1, 22))]
        assert row["population_estimate"] is None
        assert row["latitude"] is None


class TestConfig:
    """测试可配置的 Top-N 数量"""

    def test_custom_limits(self, store):
        records = [make_record(i, emotions=[f"e{i}"], concerns=[f"c{i}"]) for i in range(8)]
        config = AggregationConfig(top_emotions=2, top_concerns=1, max_workers=1)

        run(records, store, config=config)

        row = store.rows[("Douala", "Littoral", date(2026, 1, 22))]
        assert row["dominant_emotions"] == ["e0", "e1"]
        assert row["top_concerns"] == ["c0"]

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            AggregationConfig(max_workers=0)
