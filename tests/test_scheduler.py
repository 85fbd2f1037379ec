"""
定时任务测试
手动调用 daily_aggregation，验证异常不会向外抛出
"""

from datetime import datetime, timezone
from unittest.mock import patch

from local_sentiment.api import scheduler as scheduler_module
from local_sentiment.config import AggregationConfig
from local_sentiment.errors import DataFetchError
from local_sentiment.model import RunSummary


def test_daily_aggregation_success():
    summary = RunSummary(
        window_start=datetime(2026, 1, 21, tzinfo=timezone.utc),
        window_end=datetime(2026, 1, 22, tzinfo=timezone.utc),
        cities_processed=3,
        records_analyzed=40,
    )
    with patch("local_sentiment.service.run_aggregation", return_value=summary) as mock_run:
        scheduler_module.daily_aggregation()

    mock_run.assert_called_once_with()


def test_daily_aggregation_fetch_failure_is_logged():
    with patch("local_sentiment.service.run_aggregation", side_effect=DataFetchError("down")):
        # 不应抛出异常
        scheduler_module.daily_aggregation()


def test_daily_aggregation_unexpected_error_is_logged():
    with patch("local_sentiment.service.run_aggregation", side_effect=RuntimeError("boom")):
        scheduler_module.daily_aggregation()


def test_setup_scheduler_registers_job():
    scheduler_module.setup_scheduler(AggregationConfig(aggregation_hour=2, aggregation_minute=30))

    job = scheduler_module.scheduler.get_job("daily_aggregation")
    try:
        assert job is not None
        assert job.func is scheduler_module.daily_aggregation
    finally:
        scheduler_module.scheduler.remove_job("daily_aggregation")
