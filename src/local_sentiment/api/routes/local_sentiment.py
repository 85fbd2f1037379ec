"""
本地情感汇总 API 路由
触发聚合（供外部调度器调用）与查询已写入的城市日汇总
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from local_sentiment.aggregation import AggregationEngine, default_window
from local_sentiment.database import RollupRepository
from local_sentiment.errors import DataFetchError
from local_sentiment.model import to_utc
from local_sentiment.api.response import success_response, error_response, ErrorCode, new_request_id

router = APIRouter(prefix="/api/local-sentiment", tags=["本地情感"])


class GenerateRequest(BaseModel):
    window_start: Optional[datetime] = Field(None, description="窗口开始（含），默认昨天 00:00 UTC")
    window_end: Optional[datetime] = Field(None, description="窗口结束（不含），默认今天 00:00 UTC")


def get_engine() -> AggregationEngine:
    from local_sentiment.service import build_engine
    return build_engine()


def get_rollup_repo() -> RollupRepository:
    return RollupRepository()


@router.post("/generate")
async def generate_local_sentiment(
    body: Optional[GenerateRequest] = None,
    engine: AggregationEngine = Depends(get_engine)
):
    """
    聚合一个时间窗口内的本地情感数据

    - 同一窗口可以安全重跑，汇总整行覆盖
    - failed_localities 中的城市对同一窗口重跑即可
    - 记录拉取失败时整次中止，返回 DATA_FETCH_FAILED
    """
    request_id = new_request_id()
    started = datetime.now()

    default_start, default_end = default_window()
    window_start = to_utc((body.window_start if body else None) or default_start)
    window_end = to_utc((body.window_end if body else None) or default_end)

    if window_start >= window_end:
        return error_response(
            code=ErrorCode.VALIDATION_ERROR,
            message="window_start 必须早于 window_end",
            request_id=request_id
        )

    logging.info(f"📨 [{request_id}] 聚合请求: {window_start.isoformat()} ~ {window_end.isoformat()}")

    try:
        loop = asyncio.get_running_loop()
        summary = await loop.run_in_executor(None, engine.run_aggregation, window_start, window_end)
    except DataFetchError as e:
        logging.error(f"❌ [{request_id}] 聚合中止: {e}")
        return error_response(
            code=ErrorCode.DATA_FETCH_FAILED,
            message=f"内容记录拉取失败: {e}",
            request_id=request_id
        )
    except Exception as e:
        logging.error(f"❌ [{request_id}] 聚合失败: {e}")
        return error_response(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"服务器错误: {e}",
            request_id=request_id
        )

    duration_ms = int((datetime.now() - started).total_seconds() * 1000)
    return success_response(
        data=summary.to_dict(),
        request_id=request_id,
        partial=summary.has_failures,
        duration_ms=duration_ms
    )


@router.get("")
def get_local_sentiment(
    days: int = Query(7, ge=1, le=90, description="查询最近N天的城市汇总"),
    region: Optional[str] = Query(None, description="大区过滤，如 Littoral"),
    repo: RollupRepository = Depends(get_rollup_repo)
):
    """查询最近 N 天的城市日汇总"""
    request_id = new_request_id()

    if not repo.is_available():
        return error_response(
            code=ErrorCode.DATABASE_UNAVAILABLE,
            message="数据库服务不可用，请检查 Supabase 配置",
            request_id=request_id
        )

    try:
        rows = repo.query_recent(days=days, region=region)
    except Exception as e:
        logging.error(f"❌ [{request_id}] 查询城市汇总失败: {e}")
        return error_response(
            code=ErrorCode.INTERNAL_ERROR,
            message=str(e),
            request_id=request_id
        )

    return success_response(
        data={"rollups": rows, "total": len(rows)},
        request_id=request_id,
        days=days
    )
