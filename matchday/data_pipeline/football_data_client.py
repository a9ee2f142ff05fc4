"""
Football-data.org API 客户端

职责：
1. 统一注入 X-Auth-Token
2. 网络错误指数退避重试（HTTP 状态错误不重试）
3. 非 2xx 响应转换为可读的错误信息
4. 在边界处把 JSON 解析为强类型 Schema
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from matchday.data_pipeline.schemas import (
    ExternalMatchesResponse,
    ExternalScorersResponse,
    ExternalStandingsResponse,
    ExternalTeamProfile,
    ExternalTeamsResponse,
)
from matchday.shared.config import Settings
from matchday.shared.exceptions import (
    ConfigurationError,
    UpstreamHTTPError,
    UpstreamNetworkError,
    UpstreamPayloadError,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

MISSING_TOKEN_MESSAGE = "Missing Football Data API token"


def extract_error_message(status_code: int, body: str) -> str:
    """
    从错误响应体中提取可读信息

    优先级：JSON 的 message → JSON 的 error → 原始文本 → 通用提示
    """
    text = body.strip() if body else ""
    try:
        data = json.loads(text) if text else None
    except ValueError:
        data = None

    if isinstance(data, dict):
        for key in ("message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()

    return text or f"Request failed with status {status_code}"


class FootballDataClient:
    """Football-data.org v4 异步客户端"""

    def __init__(
        self,
        base_url: str,
        token: Optional[str],
        *,
        retry_attempts: int = 3,
        retry_wait_min: float = 2,
        retry_wait_max: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._retry_attempts = max(1, retry_attempts)
        self._retry_wait_min = retry_wait_min
        self._retry_wait_max = retry_wait_max
        self._http = httpx.AsyncClient(transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "FootballDataClient":
        return cls(
            settings.football_data.base_url,
            settings.football_data_token,
            retry_attempts=settings.football_data.retry_attempts,
            **kwargs,
        )

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "FootballDataClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # ==================== 底层请求 ====================

    async def _send(self, path: str, params: Optional[Dict[str, Any]]) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=1, min=self._retry_wait_min, max=self._retry_wait_max),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await self._http.get(
                    f"{self.base_url}{path}",
                    headers={"X-Auth-Token": self._token},
                    params=params,
                )
        raise AssertionError("unreachable")  # pragma: no cover

    async def request(
        self,
        path: str,
        schema: Type[ResponseT],
        params: Optional[Dict[str, Any]] = None,
    ) -> ResponseT:
        """
        发起 GET 请求并解析为指定 Schema

        Raises:
            ConfigurationError: 未配置 Token
            UpstreamHTTPError: 上游返回非 2xx
            UpstreamNetworkError: 请求无法完成
            UpstreamPayloadError: 响应无法解析
        """
        if not self._token:
            raise ConfigurationError(MISSING_TOKEN_MESSAGE)

        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self._send(path, params)
        except httpx.TransportError as e:
            logger.error(f"请求 {path} 失败（网络错误）: {e}")
            raise UpstreamNetworkError() from e

        if response.is_error:
            message = extract_error_message(response.status_code, response.text)
            if response.status_code == 429:
                logger.warning(f"API 速率限制: {path}")
            elif response.status_code in (401, 403):
                logger.error("API 认证失败，请检查 API Token")
            else:
                logger.error(f"HTTP 错误 {response.status_code} @ {path}: {message}")
            raise UpstreamHTTPError(response.status_code, message)

        try:
            return schema.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"响应结构无法解析 {path}: {e}")
            raise UpstreamPayloadError(f"Unexpected response from {path}") from e

    # ==================== 资源 ====================

    async def get_standings(self, competition: str) -> ExternalStandingsResponse:
        return await self.request(f"/competitions/{competition}/standings", ExternalStandingsResponse)

    async def get_scorers(self, competition: str, limit: int) -> ExternalScorersResponse:
        return await self.request(
            f"/competitions/{competition}/scorers",
            ExternalScorersResponse,
            params={"limit": limit},
        )

    async def get_teams(self, competition: str) -> ExternalTeamsResponse:
        return await self.request(f"/competitions/{competition}/teams", ExternalTeamsResponse)

    async def get_competition_matches(
        self,
        competition: str,
        status: str,
        season: Optional[int] = None,
    ) -> ExternalMatchesResponse:
        return await self.request(
            f"/competitions/{competition}/matches",
            ExternalMatchesResponse,
            params={"status": status, "season": season},
        )

    async def get_team(self, team_id: str) -> ExternalTeamProfile:
        return await self.request(f"/teams/{team_id}", ExternalTeamProfile)

    async def get_team_matches(self, team_id: str, status: str) -> ExternalMatchesResponse:
        return await self.request(
            f"/teams/{team_id}/matches",
            ExternalMatchesResponse,
            params={"status": status},
        )
