"""定义外部 API (football-data.org v4) 的数据结构。

所有上游响应在进入映射逻辑之前先在这里解析：
- 缺失或为 null 的计数字段 → 0
- 为 null 的列表 → []
- 球队 ID 统一转为字符串（上游可能是数字也可能是字符串）
- utcDate 解析为带时区的 datetime
- 计数不得为负、排名从 1 开始；不满足时解析失败（客户端转换为 UpstreamPayloadError）

适配器因此只面对已知形状的输入，不需要层层判空。
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

UNKNOWN_PLAYER = "Unknown player"


def _none_to_zero(value: Any) -> Any:
    return 0 if value is None else value


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


def _none_to_blank(value: Any) -> Any:
    return "" if value is None else value


def _unknown_player(value: Any) -> Any:
    return value or UNKNOWN_PLAYER


def _to_identifier(value: Any) -> Any:
    if value is None:
        return None
    return str(value)


Count = Annotated[int, BeforeValidator(_none_to_zero), Field(ge=0)]
OptionalCount = Optional[Annotated[int, Field(ge=0)]]
Rank = Optional[Annotated[int, Field(ge=1)]]
Identifier = Annotated[Optional[str], BeforeValidator(_to_identifier)]
PersonName = Annotated[str, BeforeValidator(_unknown_player)]


class ExternalModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ExternalTeam(ExternalModel):
    id: Identifier = None
    name: Optional[str] = None
    shortName: Optional[str] = None
    tla: Optional[str] = None  # e.g. 'MUN'
    crest: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.shortName or self.name or "TBC"


class ExternalCompetition(ExternalModel):
    id: Identifier = None
    name: Optional[str] = None
    code: Optional[str] = None
    type: Optional[str] = None


# ==================== 积分榜 ====================

class ExternalStandingEntry(ExternalModel):
    position: Rank = None
    team: ExternalTeam
    playedGames: OptionalCount = None
    won: Count = 0
    draw: Count = 0
    lost: Count = 0
    goalsFor: Count = 0
    goalsAgainst: Count = 0
    points: Optional[int] = None
    goalDifference: Optional[int] = None
    form: Annotated[str, BeforeValidator(_none_to_blank)] = ""


class ExternalStandingGroup(ExternalModel):
    stage: Optional[str] = None
    type: Optional[str] = None
    group: Optional[str] = None
    table: Annotated[List[ExternalStandingEntry], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


class ExternalStandingsResponse(ExternalModel):
    competition: Optional[ExternalCompetition] = None
    standings: Annotated[List[ExternalStandingGroup], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


# ==================== 射手榜 ====================

class ExternalPlayer(ExternalModel):
    id: Identifier = None
    name: PersonName = UNKNOWN_PLAYER


class ExternalScorer(ExternalModel):
    player: ExternalPlayer
    team: ExternalTeam
    playedMatches: Optional[int] = None
    goals: Count = 0
    assists: Count = 0
    penalties: Optional[int] = None


class ExternalScorersResponse(ExternalModel):
    scorers: Annotated[List[ExternalScorer], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


# ==================== 球队 ====================

class ExternalCoach(ExternalModel):
    id: Identifier = None
    name: Optional[str] = None
    nickname: Optional[str] = None


class ExternalSquadMember(ExternalModel):
    id: Identifier = None
    name: PersonName = UNKNOWN_PLAYER
    position: Optional[str] = None
    nationality: Optional[str] = None
    shirtNumber: Optional[int] = None
    role: Optional[str] = None


class ExternalRunningCompetition(ExternalCompetition):
    """runningCompetitions 条目；部分数据源会附带当季累计数据"""
    position: Rank = None
    leagueRank: Rank = None
    playedGames: OptionalCount = None
    wins: Count = 0
    draws: Count = 0
    losses: Count = 0
    goalsFor: Count = 0
    goalsAgainst: Count = 0
    points: Count = 0


class ExternalTeamProfile(ExternalTeam):
    founded: Optional[int] = None
    venue: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    clubColors: Optional[str] = None
    coach: Optional[ExternalCoach] = None
    squad: Annotated[List[ExternalSquadMember], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
    runningCompetitions: Annotated[
        List[ExternalRunningCompetition], BeforeValidator(_none_to_list)
    ] = Field(default_factory=list)


class ExternalTeamsResponse(ExternalModel):
    teams: Annotated[List[ExternalTeamProfile], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


# ==================== 比赛 ====================

class ExternalScoreFullTime(ExternalModel):
    home: Optional[int] = None
    away: Optional[int] = None


class ExternalScore(ExternalModel):
    winner: Optional[str] = None
    duration: Optional[str] = None
    fullTime: ExternalScoreFullTime = Field(default_factory=ExternalScoreFullTime)

    @field_validator("fullTime", mode="before")
    @classmethod
    def _default_full_time(cls, value: Any) -> Any:
        return {} if value is None else value


class ExternalMatch(ExternalModel):
    id: Identifier = None
    utcDate: datetime
    status: Optional[str] = None
    matchday: Optional[int] = None
    competition: Optional[ExternalCompetition] = None
    homeTeam: ExternalTeam
    awayTeam: ExternalTeam
    score: ExternalScore = Field(default_factory=ExternalScore)

    @field_validator("utcDate")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("score", mode="before")
    @classmethod
    def _default_score(cls, value: Any) -> Any:
        return {} if value is None else value


class ExternalMatchesResponse(ExternalModel):
    matches: Annotated[List[ExternalMatch], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
