"""
数据适配层：上游 Schema → 看板视图模型

职责：
1. 每个上游资源对应一个纯映射函数（无 I/O、无共享状态）
2. 可选字段缺失时填充默认值，永不因此抛错
3. 球队与积分榜按 ID 关联，保证上榜球队不丢失

注意：
- 输入已经过边界 Schema 解析（见 matchday.data_pipeline.schemas）
- 排序/截断等展示策略由调用方（DashboardService）决定，例外是球队列表的顺序
"""
from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Dict, Iterable, List, Literal, Optional, Sequence

from matchday.data_pipeline.schemas import (
    ExternalMatch,
    ExternalRunningCompetition,
    ExternalScorersResponse,
    ExternalStandingEntry,
    ExternalStandingsResponse,
    ExternalTeam,
    ExternalTeamProfile,
    ExternalTeamsResponse,
)
from matchday.services.config import adapter_config, strengths_config
from matchday.services.formatters import (
    format_full_date,
    format_short_date,
    match_outcome,
    slugify,
)
from matchday.services.view_models import (
    Fixture,
    LeagueStanding,
    MatchSummary,
    Result,
    SquadPlayer,
    TeamStats,
    TeamSummary,
    TopScorer,
)

logger = logging.getLogger(__name__)

ScorerSortKey = Literal["goals", "assists", "contributions"]


# ==================== 积分榜 ====================

def to_standing(entry: ExternalStandingEntry, position: int) -> LeagueStanding:
    won, drawn, lost = entry.won, entry.draw, entry.lost
    played = entry.playedGames if entry.playedGames is not None else won + drawn + lost
    return LeagueStanding(
        position=position,
        team_id=entry.team.id or "",
        team=entry.team.display_name,
        crest=entry.team.crest or "",
        played=played,
        won=won,
        drawn=drawn,
        lost=lost,
        goals_for=entry.goalsFor,
        goals_against=entry.goalsAgainst,
        # 由计数推导，保证与胜平负/进失球一致
        goal_difference=entry.goalsFor - entry.goalsAgainst,
        points=won * adapter_config.POINTS_PER_WIN + drawn * adapter_config.POINTS_PER_DRAW,
        form=entry.form,
    )


def map_standings(response: ExternalStandingsResponse) -> List[LeagueStanding]:
    """
    映射积分榜

    优先使用 TOTAL 分组，否则取第一个分组；保持上游顺序。
    积分榜节点缺失或为空时返回空列表（调用方视为"数据暂不可用"）。

    排名：所有行都带 position 时沿用上游值；只要有一行缺失，
    整张表按上游顺序重新编号，避免与其它行的排名重复。
    """
    if not response.standings:
        return []

    group = next(
        (g for g in response.standings if g.type == adapter_config.STANDINGS_TABLE_TYPE),
        response.standings[0],
    )

    rows = []
    for index, entry in enumerate(group.table, start=1):
        if entry.team.id is None:
            logger.warning(f"积分榜第 {index} 行缺少球队 ID，已跳过")
            continue
        rows.append(entry)

    renumber = any(entry.position is None for entry in rows)
    if renumber:
        logger.info("积分榜存在缺失排名的行，按上游顺序重新编号")

    return [
        to_standing(entry, position=index if renumber else entry.position)
        for index, entry in enumerate(rows, start=1)
    ]


# ==================== 射手榜 ====================

def map_scorers(response: ExternalScorersResponse) -> List[TopScorer]:
    """映射射手榜，保持上游顺序，不做排序"""
    scorers = []
    for entry in response.scorers:
        team_key = entry.team.id or slugify(entry.team.display_name)
        player_key = entry.player.id or slugify(entry.player.name)
        scorers.append(
            TopScorer(
                id=f"{player_key}-{team_key}",
                player=entry.player.name,
                team=entry.team.display_name,
                team_id=entry.team.id,
                team_crest=entry.team.crest or "",
                goals=entry.goals,
                assists=entry.assists,
            )
        )
    return scorers


def sort_scorers(scorers: Iterable[TopScorer], by: ScorerSortKey = "goals") -> List[TopScorer]:
    """
    按进球 / 助攻 / 进球+助攻降序排列

    sorted 为稳定排序：数值相同时保留原列表顺序，多个榜单结果可复现。
    """
    if by == "goals":
        key = lambda s: s.goals  # noqa: E731
    elif by == "assists":
        key = lambda s: s.assists  # noqa: E731
    elif by == "contributions":
        key = lambda s: s.contributions  # noqa: E731
    else:
        raise ValueError(f"Unsupported scorer sort key: {by}")
    return sorted(scorers, key=key, reverse=True)


# ==================== 球队 ====================

def _coach_name(team: ExternalTeamProfile) -> Optional[str]:
    if team.coach is None:
        return None
    return team.coach.name or team.coach.nickname


def to_team_summary(
    team: ExternalTeamProfile,
    standing: Optional[LeagueStanding] = None,
) -> TeamSummary:
    return TeamSummary(
        id=team.id or "",
        name=team.display_name,
        crest=team.crest or "",
        venue=team.venue or team.address or adapter_config.DEFAULT_VENUE,
        founded=team.founded,
        club_colors=team.clubColors,
        coach=_coach_name(team),
        form=standing.form if standing else None,
        points=standing.points if standing else None,
        goal_difference=standing.goal_difference if standing else None,
        position=standing.position if standing else None,
    )


def summary_from_standing(standing: LeagueStanding) -> TeamSummary:
    """球队列表中缺失、但积分榜上存在的球队：仅凭积分榜行合成"""
    return TeamSummary(
        id=standing.team_id,
        name=standing.team,
        crest=standing.crest,
        venue=adapter_config.DEFAULT_VENUE,
        form=standing.form,
        points=standing.points,
        goal_difference=standing.goal_difference,
        position=standing.position,
    )


def _team_sort_key(team: TeamSummary):
    # 有排名的在前（按排名升序），无排名的按名称字母序
    if team.position is not None:
        return (0, team.position, "")
    return (1, 0, team.name.casefold())


def merge_team_summaries(
    teams_response: ExternalTeamsResponse,
    standings: Sequence[LeagueStanding],
) -> List[TeamSummary]:
    """
    按球队 ID 关联球队列表与积分榜

    - 未上榜球队保留，排名相关字段为 None
    - 上榜但不在球队列表中的球队由积分榜行合成
    - 每个 ID 只出现一次
    """
    standing_lookup: Dict[str, LeagueStanding] = {s.team_id: s for s in standings}

    merged: Dict[str, TeamSummary] = {}
    for team in teams_response.teams:
        if team.id is None or team.id in merged:
            continue
        merged[team.id] = to_team_summary(team, standing_lookup.get(team.id))

    for standing in standings:
        if standing.team_id not in merged:
            logger.info(f"球队 {standing.team} ({standing.team_id}) 不在球队列表中，按积分榜合成")
            merged[standing.team_id] = summary_from_standing(standing)

    return sorted(merged.values(), key=_team_sort_key)


# ==================== 比赛 ====================

def _competition_name(match: ExternalMatch, default: str) -> str:
    if match.competition and match.competition.name:
        return match.competition.name
    return default


def _is_home(match: ExternalMatch, team_id: str) -> bool:
    return match.homeTeam.id == str(team_id)


def _opponent(match: ExternalMatch, team_id: str) -> ExternalTeam:
    return match.awayTeam if _is_home(match, team_id) else match.homeTeam


def to_fixture(
    match: ExternalMatch,
    team_id: str,
    competition: str,
    tz: Optional[tzinfo] = None,
) -> Fixture:
    """以指定球队视角映射未赛比赛"""
    return Fixture(
        id=match.id or "",
        opponent=_opponent(match, team_id).display_name,
        date=format_full_date(match.utcDate, tz),
        kickoff=match.utcDate,
        venue="Home" if _is_home(match, team_id) else "Away",
        competition=_competition_name(match, competition),
    )


def to_result(
    match: ExternalMatch,
    team_id: str,
    competition: str,
    tz: Optional[tzinfo] = None,
) -> Result:
    """以指定球队视角映射已赛比赛；比分始终为 主队 - 客队"""
    home_score = match.score.fullTime.home or 0
    away_score = match.score.fullTime.away or 0
    if _is_home(match, team_id):
        outcome = match_outcome(home_score, away_score)
    else:
        outcome = match_outcome(away_score, home_score)

    return Result(
        id=match.id or "",
        opponent=_opponent(match, team_id).display_name,
        date=format_full_date(match.utcDate, tz),
        kickoff=match.utcDate,
        competition=_competition_name(match, competition),
        score=f"{home_score} - {away_score}",
        outcome=outcome,
    )


def to_match_summary(
    match: ExternalMatch,
    competition: str,
    tz: Optional[tzinfo] = None,
    full_date: bool = False,
) -> MatchSummary:
    formatter = format_full_date if full_date else format_short_date
    return MatchSummary(
        id=match.id or "",
        home_team=match.homeTeam.display_name,
        away_team=match.awayTeam.display_name,
        home_score=match.score.fullTime.home,
        away_score=match.score.fullTime.away,
        date=formatter(match.utcDate, tz),
        kickoff=match.utcDate,
        competition=_competition_name(match, competition),
    )


def sort_by_kickoff(matches: Iterable[ExternalMatch], descending: bool = False) -> List[ExternalMatch]:
    return sorted(matches, key=lambda m: m.utcDate, reverse=descending)


# ==================== 球队详情 ====================

def map_squad(team: ExternalTeamProfile) -> List[SquadPlayer]:
    """只保留球员（role 为 PLAYER 或缺失），排除教练组等工作人员"""
    return [
        SquadPlayer(
            id=member.id or slugify(member.name),
            name=member.name,
            position=member.position,
            nationality=member.nationality,
            shirt_number=member.shirtNumber,
        )
        for member in team.squad
        if member.role is None or member.role.upper() == adapter_config.PLAYER_ROLE
    ]


def stats_from_standing(standing: LeagueStanding) -> TeamStats:
    return TeamStats(
        played=standing.played,
        wins=standing.won,
        draws=standing.drawn,
        losses=standing.lost,
        goals_for=standing.goals_for,
        goals_against=standing.goals_against,
        goal_difference=standing.goal_difference,
        points=standing.points,
    )


def find_league_competition(
    team: ExternalTeamProfile,
    competition_code: str,
    competition_name: str,
) -> Optional[ExternalRunningCompetition]:
    for comp in team.runningCompetitions:
        if comp.type != "LEAGUE":
            continue
        if comp.code == competition_code or (comp.name and competition_name in comp.name):
            return comp
    return None


def stats_from_running_competition(comp: ExternalRunningCompetition) -> Optional[TeamStats]:
    """runningCompetitions 通常只有赛事信息；没有任何累计数据时返回 None"""
    counts = (comp.wins, comp.draws, comp.losses, comp.goalsFor, comp.goalsAgainst, comp.points)
    if comp.playedGames is None and not any(counts):
        return None
    return TeamStats(
        played=comp.playedGames if comp.playedGames is not None else comp.wins + comp.draws + comp.losses,
        wins=comp.wins,
        draws=comp.draws,
        losses=comp.losses,
        goals_for=comp.goalsFor,
        goals_against=comp.goalsAgainst,
        goal_difference=comp.goalsFor - comp.goalsAgainst,
        points=comp.points,
    )


def build_strengths(stats: Optional[TeamStats], last_five: Sequence[str]) -> List[str]:
    """基于现有数据的展示用亮点，非权威数据"""
    strengths = []
    if stats is not None:
        if stats.wins > stats.losses:
            strengths.append("Consistent league form with more wins than losses")
        if stats.goals_for > stats.goals_against:
            strengths.append("Positive goal difference across the campaign")
    recent = list(last_five)[-strengths_config.FORM_WINDOW:]
    if recent.count("W") >= strengths_config.MIN_RECENT_WINS:
        strengths.append("Momentum building with three wins in the last five matches")
    return strengths


def build_description(team: ExternalTeamProfile, competition_name: str) -> str:
    venue = team.venue or adapter_config.UNKNOWN_VENUE
    if team.clubColors:
        return f"{team.display_name} turn out in {team.clubColors.lower()} and call {venue} home."
    return f"{team.display_name} compete in the {competition_name} from {venue}."
