"""
DashboardService - 看板数据聚合服务

职责：
1. 并发拉取多个上游资源（固定小批量），组装一致的看板快照
2. 按需拉取球队详情，并写入显式的 TeamDetailCache
3. 定义部分失败策略：
   - 快照：任一请求失败则整体失败，不返回半新半旧的数据
   - 球队详情：球队资料失败则整体失败；赛程/赛果/积分榜失败降级为空

注意：
- 映射逻辑全部在 adapters 中，这里只负责编排
- 不做取消与超时控制（沿用 HTTP 客户端默认值）
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Sequence

from matchday.data_pipeline.schemas import (
    ExternalMatchesResponse,
    ExternalScorersResponse,
    ExternalStandingsResponse,
    ExternalTeamProfile,
    ExternalTeamsResponse,
)
from matchday.services import adapters
from matchday.services.config import adapter_config
from matchday.services.formatters import current_season, resolve_timezone
from matchday.services.team_detail_cache import TeamDetailCache
from matchday.services.view_models import (
    DashboardSnapshot,
    LeagueStanding,
    TeamDetail,
    TopScorer,
)
from matchday.shared.config import Settings
from matchday.shared.exceptions import FootballDataError

logger = logging.getLogger(__name__)


class FootballDataSource(Protocol):
    """FootballDataClient 与 MockFootballDataClient 的共同接口"""

    has_token: bool

    async def aclose(self) -> None: ...

    async def get_standings(self, competition: str) -> ExternalStandingsResponse: ...

    async def get_scorers(self, competition: str, limit: int) -> ExternalScorersResponse: ...

    async def get_teams(self, competition: str) -> ExternalTeamsResponse: ...

    async def get_competition_matches(
        self, competition: str, status: str, season: Optional[int] = None
    ) -> ExternalMatchesResponse: ...

    async def get_team(self, team_id: str) -> ExternalTeamProfile: ...

    async def get_team_matches(self, team_id: str, status: str) -> ExternalMatchesResponse: ...


class DashboardService:
    """
    看板聚合服务

    设计原则：
    - 数据源与缓存通过构造函数注入，便于测试替换
    - 每次快照整体重算，不做增量更新
    """

    def __init__(
        self,
        source: FootballDataSource,
        settings: Settings,
        cache: Optional[TeamDetailCache] = None,
    ):
        self._source = source
        self._settings = settings
        self._cache = cache if cache is not None else TeamDetailCache(
            ttl_seconds=settings.team_detail_cache.ttl_seconds
        )
        self._tz = resolve_timezone(settings.dashboard.display_timezone)

    @property
    def cache(self) -> TeamDetailCache:
        return self._cache

    @property
    def _competition(self) -> str:
        return self._settings.football_data.competition_code

    @property
    def _competition_name(self) -> str:
        return self._settings.football_data.competition_name

    def _season(self) -> int:
        return self._settings.football_data.season or current_season()

    # ==================== 看板快照 ====================

    async def get_snapshot(self) -> DashboardSnapshot:
        """
        获取看板快照

        并发发出五个请求；任一失败则异常直接向上抛出。

        Returns:
            排序、截断并完成关联的看板快照
        """
        season = self._season()
        dashboard = self._settings.dashboard
        logger.info(f"获取 {self._competition} {season} 赛季看板快照")

        standings_raw, scorers_raw, teams_raw, finished_raw, scheduled_raw = await asyncio.gather(
            self._source.get_standings(self._competition),
            self._source.get_scorers(self._competition, self._settings.football_data.scorers_limit),
            self._source.get_teams(self._competition),
            self._source.get_competition_matches(self._competition, "FINISHED", season),
            self._source.get_competition_matches(self._competition, "SCHEDULED", season),
        )

        standings = adapters.map_standings(standings_raw)
        if not standings:
            logger.warning(f"{self._competition} 积分榜为空")

        teams = adapters.merge_team_summaries(teams_raw, standings)

        recent = adapters.sort_by_kickoff(finished_raw.matches, descending=True)
        recent = recent[: dashboard.recent_matches_limit]
        upcoming = adapters.sort_by_kickoff(scheduled_raw.matches)
        upcoming = upcoming[: dashboard.upcoming_matches_limit]

        snapshot = DashboardSnapshot(
            standings=standings,
            scorers=adapters.map_scorers(scorers_raw),
            teams=teams,
            recent_matches=[
                adapters.to_match_summary(m, self._competition_name, self._tz) for m in recent
            ],
            upcoming_fixtures=[
                adapters.to_match_summary(m, self._competition_name, self._tz, full_date=True)
                for m in upcoming
            ],
            generated_at=datetime.now(timezone.utc),
        )
        logger.info(
            f"快照完成: {len(snapshot.standings)} 支上榜球队, {len(snapshot.teams)} 支球队, "
            f"{len(snapshot.scorers)} 名射手"
        )
        return snapshot

    # ==================== 射手榜 ====================

    async def get_top_scorers(
        self,
        sort_by: adapters.ScorerSortKey = "goals",
        limit: Optional[int] = None,
    ) -> List[TopScorer]:
        """只请求射手榜接口，按指定口径排序后截断"""
        scorers_raw = await self._source.get_scorers(
            self._competition, self._settings.football_data.scorers_limit
        )
        ranked = adapters.sort_scorers(adapters.map_scorers(scorers_raw), sort_by)
        return ranked if limit is None else ranked[:limit]

    # ==================== 球队详情 ====================

    async def get_team_detail(
        self,
        team_id: str,
        refresh: bool = False,
        standings: Optional[Sequence[LeagueStanding]] = None,
    ) -> TeamDetail:
        """
        获取球队详情（优先读缓存）

        Args:
            team_id: 球队 ID
            refresh: 为 True 时跳过缓存重新拉取
            standings: 已有的积分榜；不传则与其它请求一起并发拉取

        Returns:
            球队详情
        """
        team_id = str(team_id)
        if not refresh:
            cached = self._cache.get(team_id)
            if cached is not None:
                logger.debug(f"球队 {team_id} 详情命中缓存")
                return cached

        detail = await self._fetch_team_detail(team_id, standings)
        self._cache.set(team_id, detail)
        return detail

    async def _fetch_team_detail(
        self,
        team_id: str,
        standings: Optional[Sequence[LeagueStanding]],
    ) -> TeamDetail:
        requests = [
            self._source.get_team(team_id),
            self._source.get_team_matches(team_id, "SCHEDULED"),
            self._source.get_team_matches(team_id, "FINISHED"),
        ]
        if standings is None:
            requests.append(self._source.get_standings(self._competition))

        outcomes = await asyncio.gather(*requests, return_exceptions=True)
        team_raw = outcomes[0]
        if isinstance(team_raw, BaseException):
            logger.error(f"获取球队 {team_id} 资料失败: {team_raw}")
            raise team_raw

        scheduled = self._matches_or_empty(outcomes[1], team_id, "SCHEDULED")
        finished = self._matches_or_empty(outcomes[2], team_id, "FINISHED")
        if standings is None:
            standings = self._standings_or_empty(outcomes[3])

        return self._build_team_detail(team_raw, team_id, scheduled, finished, standings)

    @staticmethod
    def _matches_or_empty(outcome, team_id: str, status: str) -> list:
        if isinstance(outcome, FootballDataError):
            logger.warning(f"获取球队 {team_id} 的 {status} 比赛失败，降级为空列表: {outcome}")
            return []
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome.matches

    @staticmethod
    def _standings_or_empty(outcome) -> List[LeagueStanding]:
        if isinstance(outcome, FootballDataError):
            logger.warning(f"获取积分榜失败，球队详情将不含积分榜数据: {outcome}")
            return []
        if isinstance(outcome, BaseException):
            raise outcome
        return adapters.map_standings(outcome)

    def _build_team_detail(
        self,
        team_raw: ExternalTeamProfile,
        team_id: str,
        scheduled: list,
        finished: list,
        standings: Sequence[LeagueStanding],
    ) -> TeamDetail:
        dashboard = self._settings.dashboard
        competition_name = self._competition_name

        fixtures = [
            adapters.to_fixture(m, team_id, competition_name, self._tz)
            for m in adapters.sort_by_kickoff(scheduled)[: dashboard.team_fixtures_limit]
        ]
        results = [
            adapters.to_result(m, team_id, competition_name, self._tz)
            for m in adapters.sort_by_kickoff(finished, descending=True)[: dashboard.team_results_limit]
        ]
        # 赛果按时间倒序，last_five 统一为最早在前
        last_five = [r.outcome for r in reversed(results)]

        standing = next((s for s in standings if s.team_id == team_id), None)
        running = adapters.find_league_competition(
            team_raw, self._competition, competition_name
        )

        if standing is not None:
            stats = adapters.stats_from_standing(standing)
            position = standing.position
        else:
            stats = adapters.stats_from_running_competition(running) if running else None
            position = (running.position or running.leagueRank) if running else None

        summary = adapters.to_team_summary(team_raw, standing)
        if standing is not None:
            form = standing.form
        else:
            form = ",".join(last_five) or None

        return TeamDetail(
            **summary.model_dump(exclude={"id", "position", "form", "venue"}),
            id=team_raw.id or team_id,
            venue=team_raw.venue or adapter_config.UNKNOWN_VENUE,
            position=position,
            form=form,
            description=adapters.build_description(team_raw, competition_name),
            strengths=adapters.build_strengths(stats, last_five),
            last_five=last_five,
            stats=stats,
            upcoming_fixtures=fixtures,
            recent_results=results,
            squad=adapters.map_squad(team_raw),
        )

