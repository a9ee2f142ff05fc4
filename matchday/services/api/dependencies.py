"""FastAPI 依赖注入：管理服务实例的生命周期。"""
from __future__ import annotations

import logging
from functools import lru_cache

import httpx

from matchday.data_pipeline.football_data_client import FootballDataClient
from matchday.data_pipeline.mock_source import MockFootballDataClient
from matchday.services.dashboard_service import DashboardService, FootballDataSource
from matchday.shared.config import Settings, get_settings

logger = logging.getLogger(__name__)


# 1. 获取全局配置的依赖
def get_app_settings() -> Settings:
    return get_settings()


# 2. 数据源（按配置选择真实 API 或 Mock）
@lru_cache(maxsize=1)
def get_data_source() -> FootballDataSource:
    settings = get_settings()
    if settings.dashboard.data_source == "mock":
        logger.info("使用 Mock 数据源")
        return MockFootballDataClient()
    if not settings.football_data_token:
        # 不在启动时失败：请求时以配置错误的形式暴露给用户
        logger.error("未配置 FOOTBALL_DATA_TOKEN，看板请求将返回配置错误")
    return FootballDataClient.from_settings(settings)


# 3. 看板服务（全局单例，持有球队详情缓存）
@lru_cache(maxsize=1)
def get_dashboard_service() -> DashboardService:
    return DashboardService(get_data_source(), get_settings())


# 4. 代理转发使用的 HTTP 客户端
@lru_cache(maxsize=1)
def get_proxy_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient()
