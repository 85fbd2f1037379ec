"""
地点识别 API 路由
供上游打标步骤在创建内容记录时同步调用
"""

from functools import lru_cache
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from local_sentiment.location_resolver import LocationResolver
from local_sentiment.api.response import success_response, new_request_id

router = APIRouter(prefix="/api/location", tags=["地点识别"])


class DetectRequest(BaseModel):
    content: Optional[str] = Field("", description="待识别的自由文本")


class EnhanceRequest(BaseModel):
    content_data: Dict[str, Any] = Field(..., description="上游内容记录（需包含 content 或 content_text）")


@lru_cache(maxsize=1)
def get_resolver() -> LocationResolver:
    """启动后首次调用时加载地名词典"""
    from local_sentiment.service import build_resolver
    return build_resolver()


@router.post("/detect")
def detect_location(body: DetectRequest, resolver: LocationResolver = Depends(get_resolver)):
    """
    识别文本中的地点

    返回 region / city / division / subdivision / confidence，
    confidence <= 0.6 时 low_confidence 为 true
    """
    request_id = new_request_id()
    location = resolver.resolve(body.content)
    logging.info(f"📍 [{request_id}] 识别结果: {location.region}/{location.city} ({location.confidence})")

    return success_response(
        data={
            "location": location.to_dict(),
            "low_confidence": location.is_low_confidence
        },
        request_id=request_id
    )


@router.post("/enhance")
def enhance_location(body: EnhanceRequest, resolver: LocationResolver = Depends(get_resolver)):
    """为上游内容记录补充 region_detected / city_detected / subdivision_detected / coordinates"""
    request_id = new_request_id()
    enhanced = resolver.enhance_record(body.content_data)
    return success_response(data=enhanced, request_id=request_id)
