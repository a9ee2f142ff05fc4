"""通用响应 Schema。"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    message: str


class CacheInvalidationResponse(BaseModel):
    team_id: Optional[str] = None
    removed: int


# 看板与球队接口的数据源错误响应（OpenAPI 文档用）
ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "上游资源不存在"},
    500: {"model": ErrorResponse, "description": "服务端缺少配置"},
    502: {"model": ErrorResponse, "description": "上游返回错误或无法解析的数据"},
    503: {"model": ErrorResponse, "description": "无法连接上游"},
}
