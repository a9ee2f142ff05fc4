"""
测试 Football-data 代理转发

测试内容：
1. 路径与查询串原样拼接到上游 base_url
2. 服务端注入 X-Auth-Token，请求/响应头白名单
3. 缺少 Token → 500；上游不可达 → 502
"""
from typing import List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient

from matchday.services.api.dependencies import get_app_settings, get_proxy_http_client
from matchday.services.api.main import app
from matchday.services.api.routers.proxy import build_target_url

from conftest import make_settings


@pytest.mark.parametrize(
    "base, path, query, expected",
    [
        ("https://api.test/v4", "competitions/PL/standings", "", "https://api.test/v4/competitions/PL/standings"),
        ("https://api.test/v4/", "teams/57", "limit=5", "https://api.test/v4/teams/57?limit=5"),
        ("https://api.test/v4", "", "", "https://api.test/v4"),
    ],
)
def test_build_target_url(base, path, query, expected):
    assert build_target_url(base, path, query) == expected


class UpstreamRecorder:
    """记录转发到上游的请求，并返回预设响应"""

    def __init__(self, response: Optional[httpx.Response] = None, error: Optional[Exception] = None):
        self.requests: List[httpx.Request] = []
        self.response = response or httpx.Response(
            200,
            json={"count": 0},
            headers={"cache-control": "max-age=60", "x-internal": "secret"},
        )
        self.error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


def override(recorder: UpstreamRecorder, **settings_kwargs) -> None:
    settings = make_settings(**settings_kwargs)
    upstream_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_proxy_http_client] = lambda: upstream_client


@pytest_asyncio.fixture
async def recorder(client: AsyncClient) -> UpstreamRecorder:
    rec = UpstreamRecorder()
    override(rec)
    return rec


@pytest.mark.asyncio
class TestProxy:
    """代理转发测试套件"""

    async def test_forwards_path_query_and_token(self, client: AsyncClient, recorder):
        response = await client.get(
            "/football-data/competitions/PL/matches",
            params={"status": "FINISHED", "season": "2024"},
            headers={"Accept": "application/json", "X-Auth-Token": "from-browser", "X-Custom": "1"},
        )

        assert response.status_code == 200
        assert response.json() == {"count": 0}

        sent = recorder.requests[0]
        assert str(sent.url) == "https://api.test/v4/competitions/PL/matches?status=FINISHED&season=2024"
        assert sent.method == "GET"
        assert sent.headers["X-Auth-Token"] == "test-token"
        assert sent.headers["accept"] == "application/json"
        assert "x-custom" not in sent.headers

    async def test_response_headers_allowlist(self, client: AsyncClient, recorder):
        response = await client.get("/football-data/competitions/PL/standings")

        assert response.headers["cache-control"] == "max-age=60"
        assert response.headers["content-type"] == "application/json"
        assert "x-internal" not in response.headers

    async def test_upstream_status_passthrough(self, client: AsyncClient):
        recorder = UpstreamRecorder(
            response=httpx.Response(403, json={"message": "restricted", "errorCode": 403})
        )
        override(recorder)

        response = await client.get("/football-data/competitions/CL/standings")

        assert response.status_code == 403
        assert response.json()["message"] == "restricted"

    async def test_body_forwarded_for_post(self, client: AsyncClient, recorder):
        await client.post(
            "/football-data/some/resource",
            content=b'{"x": 1}',
            headers={"Content-Type": "application/json"},
        )

        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert sent.content == b'{"x": 1}'
        assert sent.headers["content-type"] == "application/json"

    async def test_missing_token(self, client: AsyncClient):
        recorder = UpstreamRecorder()
        override(recorder, token=None)

        response = await client.get("/football-data/competitions/PL/standings")

        assert response.status_code == 500
        assert response.json() == {"error": "Missing Football Data API token"}
        assert recorder.requests == []

    async def test_upstream_unreachable(self, client: AsyncClient):
        recorder = UpstreamRecorder(error=httpx.ConnectError("connection refused"))
        override(recorder)

        response = await client.get("/football-data/competitions/PL/standings")

        assert response.status_code == 502
        data = response.json()
        assert data["error"] == "Failed to reach Football Data API"
        assert "connection refused" in data["details"]
