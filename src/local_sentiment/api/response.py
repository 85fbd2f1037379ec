"""
统一 API 响应格式
确保所有端点返回一致的响应结构：

    {"success": true, "data": {...}, "error": null,
     "meta": {"request_id": "abc12345", "timestamp": "2026-01-23T10:30:00.000000Z"}}

错误时 data 为 null，error 为 {"code": ..., "message": ..., "details": ...}
"""

from typing import Any
from datetime import datetime, timezone
import uuid


def new_request_id() -> str:
    return str(uuid.uuid4())[:8]


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def success_response(
    data: Any = None,
    request_id: str = None,
    **extra_meta
) -> dict:
    """
    创建成功响应

    Args:
        data: 响应数据
        request_id: 请求ID（可选，自动生成）
        **extra_meta: 额外的元数据
    """
    return {
        "success": True,
        "data": data,
        "error": None,
        "meta": {
            "request_id": request_id or new_request_id(),
            "timestamp": _timestamp(),
            **extra_meta
        }
    }


def error_response(
    code: str,
    message: str,
    request_id: str = None,
    details: Any = None,
    **extra_meta
) -> dict:
    """
    创建错误响应

    Args:
        code: 错误代码（见 ErrorCode）
        message: 错误信息
        request_id: 请求ID（可选，自动生成）
        details: 错误详情（可选）
        **extra_meta: 额外的元数据
    """
    error_info = {
        "code": code,
        "message": message
    }
    if details:
        error_info["details"] = details

    return {
        "success": False,
        "data": None,
        "error": error_info,
        "meta": {
            "request_id": request_id or new_request_id(),
            "timestamp": _timestamp(),
            **extra_meta
        }
    }


# 常用错误代码常量
class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    DATA_FETCH_FAILED = "DATA_FETCH_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
