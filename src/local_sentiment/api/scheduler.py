"""
定时任务调度器
使用 APScheduler 每天聚合前一天的本地情感数据
"""

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from local_sentiment.config import default_config
from local_sentiment.errors import DataFetchError

# 全局调度器实例
scheduler = AsyncIOScheduler()


def daily_aggregation():
    """
    每日聚合任务

    聚合前一个完整自然日；拉取失败只记录日志，下次调度或手动重跑即可恢复
    """
    from local_sentiment.service import run_aggregation

    logging.info("🌙 [定时任务] 开始每日本地情感聚合...")

    try:
        summary = run_aggregation()
    except DataFetchError as e:
        logging.error(f"❌ [定时任务] 拉取失败，本次聚合未写入任何数据: {e}")
        return
    except Exception as e:
        logging.exception(f"❌ [定时任务] 聚合失败: {e}")
        return

    logging.info(
        f"🌅 [定时任务] 每日聚合完成！\n"
        f"   城市: {summary.cities_processed} 个\n"
        f"   记录: {summary.records_analyzed} 条\n"
        f"   失败: {len(summary.failed_localities)} 个"
    )


def setup_scheduler(config=None):
    """
    配置定时任务

    环境变量配置：
    - AGGREGATION_HOUR: 每日聚合执行的小时（默认 0）
    - AGGREGATION_MINUTE: 每日聚合执行的分钟（默认 15）
    """
    config = config or default_config
    hour = config.aggregation_hour
    minute = config.aggregation_minute

    scheduler.add_job(
        daily_aggregation,
        CronTrigger(hour=hour, minute=minute, timezone="UTC"),
        id="daily_aggregation",
        name="每日本地情感聚合",
        replace_existing=True,
        max_instances=1,
        coalesce=True
    )

    logging.info(f"📅 定时任务已配置: 每天 {hour:02d}:{minute:02d} (UTC) 执行本地情感聚合")


def start_scheduler():
    """启动调度器"""
    if not scheduler.running:
        setup_scheduler()
        scheduler.start()
        logging.info("✅ 定时任务调度器已启动")


def stop_scheduler():
    """停止调度器"""
    if scheduler.running:
        scheduler.shutdown()
        logging.info("⏹️ 定时任务调度器已停止")


@asynccontextmanager
async def lifespan_scheduler(app):
    """
    FastAPI lifespan 上下文管理器
    用于在应用启动/关闭时管理调度器
    """
    start_scheduler()
    yield
    stop_scheduler()
