"""
Football-data 代理转发

功能：
1. 把 /football-data/<path>?<query> 原样转发到上游
2. 在服务端注入 X-Auth-Token，Token 不会到达浏览器
3. 请求头 / 响应头只转发白名单内的字段
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from matchday.data_pipeline.football_data_client import MISSING_TOKEN_MESSAGE
from matchday.services.api.dependencies import get_app_settings, get_proxy_http_client
from matchday.shared.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/football-data", tags=["proxy"])

FORWARD_REQUEST_HEADERS = ("accept", "content-type")
FORWARD_RESPONSE_HEADERS = ("content-type", "cache-control", "expires")


def build_target_url(base_url: str, path: str, query: str) -> str:
    base = base_url.rstrip("/")
    suffix = f"/{path.lstrip('/')}" if path else ""
    return f"{base}{suffix}{'?' + query if query else ''}"


def _pick_headers(source, allowed) -> Dict[str, str]:
    headers = {}
    for name in allowed:
        value = source.get(name)
        if value:
            headers[name] = value
    return headers


@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def proxy_football_data(
    path: str,
    request: Request,
    settings: Settings = Depends(get_app_settings),
    http_client: httpx.AsyncClient = Depends(get_proxy_http_client),
) -> Response:
    token = settings.football_data_token
    if not token:
        logger.error("代理请求失败：未配置 Football Data API Token")
        return JSONResponse(status_code=500, content={"error": MISSING_TOKEN_MESSAGE})

    target_url = build_target_url(settings.football_data.base_url, path, request.url.query)
    headers = _pick_headers(request.headers, FORWARD_REQUEST_HEADERS)
    headers["X-Auth-Token"] = token

    body: Optional[bytes] = None
    if request.method not in ("GET", "HEAD"):
        body = await request.body() or None

    try:
        upstream = await http_client.request(
            request.method, target_url, headers=headers, content=body
        )
    except httpx.RequestError as e:
        logger.error(f"代理请求无法到达上游 {target_url}: {e}")
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to reach Football Data API", "details": str(e)},
        )

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers=_pick_headers(upstream.headers, FORWARD_RESPONSE_HEADERS),
    )
