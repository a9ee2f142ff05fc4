"""看板视图模型（前端消费的稳定结构），与上游字段名解耦。

属性使用 snake_case，序列化时输出 camelCase（teamId、goalDifference 等）。
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LeagueStanding(ViewModel):
    position: int = Field(..., ge=1)
    team_id: str
    team: str
    crest: str = ""
    played: int = Field(..., ge=0)
    won: int = Field(..., ge=0)
    drawn: int = Field(..., ge=0)
    lost: int = Field(..., ge=0)
    goals_for: int = Field(..., ge=0)
    goals_against: int = Field(..., ge=0)
    goal_difference: int
    points: int
    form: str = ""


class TopScorer(ViewModel):
    id: str
    player: str
    team: str
    team_id: Optional[str] = None
    team_crest: str = ""
    goals: int = 0
    assists: int = 0

    @property
    def contributions(self) -> int:
        return self.goals + self.assists


class TeamSummary(ViewModel):
    id: str
    name: str
    crest: str = ""
    venue: Optional[str] = None
    founded: Optional[int] = None
    club_colors: Optional[str] = None
    coach: Optional[str] = None
    # 以下字段来自积分榜关联；未上榜时为 None（前端显示 N/A，而不是 0）
    form: Optional[str] = None
    points: Optional[int] = None
    goal_difference: Optional[int] = None
    position: Optional[int] = None


class TeamStats(ViewModel):
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0


class SquadPlayer(ViewModel):
    id: str
    name: str
    position: Optional[str] = None
    nationality: Optional[str] = None
    shirt_number: Optional[int] = None


class Fixture(ViewModel):
    id: str
    opponent: str
    date: str
    kickoff: datetime
    venue: Literal["Home", "Away"]
    competition: str


class Result(ViewModel):
    id: str
    opponent: str
    date: str
    kickoff: datetime
    competition: str
    score: str
    outcome: Literal["W", "D", "L"]


class MatchSummary(ViewModel):
    id: str
    home_team: str
    away_team: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    date: str
    kickoff: datetime
    competition: str


class TeamDetail(TeamSummary):
    description: str = ""
    strengths: List[str] = Field(default_factory=list)
    # 按时间顺序，最早在前
    last_five: List[Literal["W", "D", "L"]] = Field(default_factory=list)
    stats: Optional[TeamStats] = None
    upcoming_fixtures: List[Fixture] = Field(default_factory=list)
    recent_results: List[Result] = Field(default_factory=list)
    squad: List[SquadPlayer] = Field(default_factory=list)


class DashboardSnapshot(ViewModel):
    standings: List[LeagueStanding] = Field(default_factory=list)
    scorers: List[TopScorer] = Field(default_factory=list)
    teams: List[TeamSummary] = Field(default_factory=list)
    recent_matches: List[MatchSummary] = Field(default_factory=list)
    upcoming_fixtures: List[MatchSummary] = Field(default_factory=list)
    generated_at: datetime


class AttackingStat(ViewModel):
    team_id: str
    team: str
    goals_for: int
    goals_against: int
    wins: int
    points: int


class StatsOverview(ViewModel):
    attacking_stats: List[AttackingStat] = Field(default_factory=list)
    # 球队名 → 近几场每场得分（W=3, D=1, L=0），最早在前
    momentum_trend: Dict[str, List[int]] = Field(default_factory=dict)
    top_goalscorers: List[TopScorer] = Field(default_factory=list)
    top_assisters: List[TopScorer] = Field(default_factory=list)
    top_contributors: List[TopScorer] = Field(default_factory=list)
