"""
Pytest 配置文件

提供测试固件和通用配置：
1. 测试用 Settings（不依赖 YAML 与环境变量）
2. 上游原始 JSON 构造器
3. 基于 AsyncMock 的假数据源
4. FastAPI 测试客户端
"""
import os
from typing import Any, AsyncGenerator, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from matchday.data_pipeline.schemas import (
    ExternalMatchesResponse,
    ExternalScorersResponse,
    ExternalStandingsResponse,
    ExternalTeamProfile,
    ExternalTeamsResponse,
)
from matchday.shared.config import (
    ApiConfig,
    DashboardConfig,
    FootballDataOrgConfig,
    Settings,
    TeamDetailCacheConfig,
)

# 设置测试环境
os.environ.setdefault("MATCHDAY_ENVIRONMENT", "test")


# ============ 配置 ============

def make_settings(token: Optional[str] = "test-token", **dashboard_overrides) -> Settings:
    return Settings(
        football_data_token=token,
        environment="test",
        api=ApiConfig(),
        football_data=FootballDataOrgConfig(
            base_url="https://api.test/v4",
            season=2024,
            retry_attempts=1,
        ),
        dashboard=DashboardConfig(**dashboard_overrides),
        team_detail_cache=TeamDetailCacheConfig(),
    )


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


# ============ 上游原始数据 ============

def raw_team(team_id: Any, name: str, short_name: Optional[str] = None, **extra) -> Dict[str, Any]:
    team = {"id": team_id, "name": name, "shortName": short_name, "crest": f"https://crests/{team_id}.svg"}
    team.update(extra)
    return team


def raw_standing(team: Dict[str, Any], position: Optional[int], won: int, draw: int, lost: int,
                 goals_for: int, goals_against: int, form: Optional[str] = "W,D,L") -> Dict[str, Any]:
    return {
        "position": position,
        "team": team,
        "playedGames": won + draw + lost,
        "won": won,
        "draw": draw,
        "lost": lost,
        "goalsFor": goals_for,
        "goalsAgainst": goals_against,
        "points": won * 3 + draw,
        "goalDifference": goals_for - goals_against,
        "form": form,
    }


def raw_match(match_id: int, utc_date: str, home: Dict[str, Any], away: Dict[str, Any],
              home_score: Optional[int] = None, away_score: Optional[int] = None,
              status: str = "FINISHED") -> Dict[str, Any]:
    return {
        "id": match_id,
        "utcDate": utc_date,
        "status": status,
        "competition": {"id": 2021, "name": "Premier League", "code": "PL", "type": "LEAGUE"},
        "homeTeam": home,
        "awayTeam": away,
        "score": {"fullTime": {"home": home_score, "away": away_score}},
    }


CITY = raw_team(65, "Manchester City FC", "Man City")
ARSENAL = raw_team(57, "Arsenal FC", "Arsenal")
LIVERPOOL = raw_team(64, "Liverpool FC", "Liverpool")
BRENTFORD = raw_team(402, "Brentford FC", "Brentford")


@pytest.fixture
def standings_payload() -> Dict[str, Any]:
    return {
        "standings": [
            {
                "type": "TOTAL",
                "table": [
                    raw_standing(CITY, 1, 8, 1, 0, 24, 8, "W,W,W,D,W"),
                    raw_standing(ARSENAL, 2, 6, 2, 1, 20, 9, "W,D,W,W,L"),
                    raw_standing(LIVERPOOL, 3, 6, 1, 2, 19, 10, None),
                ],
            }
        ]
    }


@pytest.fixture
def teams_payload() -> Dict[str, Any]:
    return {
        "teams": [
            dict(ARSENAL, venue="Emirates Stadium", founded=1886, clubColors="Red / White",
                 coach={"name": "Mikel Arteta"}),
            dict(CITY, venue="Etihad Stadium", founded=1880, coach={"nickname": "Pep"}),
            dict(BRENTFORD, venue=None, address="Lionel Road"),
        ]
    }


@pytest.fixture
def scorers_payload() -> Dict[str, Any]:
    return {
        "scorers": [
            {"player": {"id": 1, "name": "Erling Haaland"}, "team": CITY, "goals": 9, "assists": 3},
            {"player": {"id": 2, "name": "Bukayo Saka"}, "team": ARSENAL, "goals": 5, "assists": 6},
            {"player": {"id": 3, "name": "Mohamed Salah"}, "team": LIVERPOOL, "goals": 9, "assists": None},
        ]
    }


@pytest.fixture
def finished_payload() -> Dict[str, Any]:
    return {
        "matches": [
            raw_match(1, "2024-10-05T14:00:00Z", ARSENAL, CITY, 2, 1),
            raw_match(2, "2024-10-19T16:30:00Z", CITY, LIVERPOOL, 3, 3),
            raw_match(3, "2024-09-28T14:00:00Z", LIVERPOOL, ARSENAL, 0, 1),
        ]
    }


@pytest.fixture
def scheduled_payload() -> Dict[str, Any]:
    return {
        "matches": [
            raw_match(10, "2024-11-02T15:00:00Z", LIVERPOOL, CITY, status="SCHEDULED"),
            raw_match(11, "2024-10-26T11:30:00Z", CITY, ARSENAL, status="SCHEDULED"),
        ]
    }


# ============ 假数据源 ============

@pytest.fixture
def fake_source(standings_payload, teams_payload, scorers_payload,
                finished_payload, scheduled_payload) -> MagicMock:
    """
    Mock 数据源

    所有方法为 AsyncMock，返回已解析的 Schema；测试可按需替换 side_effect
    """
    source = MagicMock()
    source.has_token = True
    source.aclose = AsyncMock()
    source.get_standings = AsyncMock(
        return_value=ExternalStandingsResponse.model_validate(standings_payload)
    )
    source.get_scorers = AsyncMock(
        return_value=ExternalScorersResponse.model_validate(scorers_payload)
    )
    source.get_teams = AsyncMock(return_value=ExternalTeamsResponse.model_validate(teams_payload))

    async def competition_matches(competition, status, season=None):
        payload = finished_payload if status == "FINISHED" else scheduled_payload
        return ExternalMatchesResponse.model_validate(payload)

    source.get_competition_matches = AsyncMock(side_effect=competition_matches)

    async def team_matches(team_id, status):
        payload = finished_payload if status == "FINISHED" else scheduled_payload
        matches = [
            m for m in payload["matches"]
            if team_id in (str(m["homeTeam"]["id"]), str(m["awayTeam"]["id"]))
        ]
        return ExternalMatchesResponse.model_validate({"matches": matches})

    source.get_team_matches = AsyncMock(side_effect=team_matches)
    source.get_team = AsyncMock(
        return_value=ExternalTeamProfile.model_validate(
            dict(
                CITY,
                venue="Etihad Stadium",
                founded=1880,
                clubColors="Sky Blue / White",
                coach={"name": "Pep Guardiola"},
                squad=[
                    {"id": 100, "name": "Erling Haaland", "position": "Offence", "role": "PLAYER"},
                    {"id": 101, "name": "Rodri", "position": "Midfield"},
                    {"id": 102, "name": "Kit Manager", "role": "STAFF"},
                ],
            )
        )
    )
    return source


# ============ HTTP 客户端 ============

@pytest_asyncio.fixture
async def client() -> AsyncGenerator:
    """
    FastAPI 测试客户端

    使用 httpx.AsyncClient 进行 API 测试；结束时清理依赖覆盖
    """
    from httpx import ASGITransport, AsyncClient
    from matchday.services.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


# ============ 真实客户端 + MockTransport ============

def make_live_client(routes: Dict[str, Dict[str, Any]], settings: Optional[Settings] = None):
    """
    基于 httpx.MockTransport 的 FootballDataClient

    routes 以路径后缀匹配（如 "/standings"），按声明顺序取第一个匹配项
    """
    import httpx

    from matchday.data_pipeline.football_data_client import FootballDataClient

    def handler(request: httpx.Request) -> httpx.Response:
        for suffix, payload in routes.items():
            if request.url.path.endswith(suffix):
                return httpx.Response(200, json=payload)
        return httpx.Response(404, json={"message": f"No route for {request.url.path}"})

    return FootballDataClient.from_settings(
        settings or make_settings(), transport=httpx.MockTransport(handler)
    )
