"""数据页分析：进攻数据、状态走势与射手榜单。"""
from __future__ import annotations

from typing import Dict, List, Sequence

from matchday.services.adapters import sort_scorers
from matchday.services.config import analytics_config
from matchday.services.formatters import form_to_points, parse_form
from matchday.services.view_models import (
    AttackingStat,
    DashboardSnapshot,
    LeagueStanding,
    StatsOverview,
)


def attacking_stats(
    standings: Sequence[LeagueStanding],
    top_n: int = analytics_config.ATTACKING_STATS_TOP_N,
) -> List[AttackingStat]:
    return [
        AttackingStat(
            team_id=s.team_id,
            team=s.team,
            goals_for=s.goals_for,
            goals_against=s.goals_against,
            wins=s.won,
            points=s.points,
        )
        for s in standings[:top_n]
    ]


def momentum_trend(
    standings: Sequence[LeagueStanding],
    top_n: int = analytics_config.MOMENTUM_TOP_N,
    most_recent_first: bool = False,
) -> Dict[str, List[int]]:
    """积分榜前 N 名的近况走势（每场得分，最早在前）；无 form 的球队跳过"""
    trend = {}
    for standing in standings[:top_n]:
        symbols = parse_form(standing.form, most_recent_first)
        if symbols:
            trend[standing.team] = form_to_points(symbols)
    return trend


def build_stats_overview(
    snapshot: DashboardSnapshot,
    most_recent_first: bool = False,
    leaderboard_size: int = analytics_config.LEADERBOARD_SIZE,
) -> StatsOverview:
    return StatsOverview(
        attacking_stats=attacking_stats(snapshot.standings),
        momentum_trend=momentum_trend(snapshot.standings, most_recent_first=most_recent_first),
        top_goalscorers=sort_scorers(snapshot.scorers, "goals")[:leaderboard_size],
        top_assisters=sort_scorers(snapshot.scorers, "assists")[:leaderboard_size],
        top_contributors=sort_scorers(snapshot.scorers, "contributions")[:leaderboard_size],
    )
