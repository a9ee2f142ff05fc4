"""Mock 数据源：未配置 Token 或离线演示时使用

返回与 football-data.org 同构的原始 JSON，经过同一套 Schema 解析，
因此 Mock 模式与真实模式走完全相同的适配逻辑。
数据为固定快照（2024/25 赛季第 9 轮前后），保证确定性，便于调试。
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from matchday.data_pipeline.schemas import (
    ExternalMatchesResponse,
    ExternalScorersResponse,
    ExternalStandingsResponse,
    ExternalTeamProfile,
    ExternalTeamsResponse,
)
from matchday.shared.exceptions import UpstreamHTTPError

CREST_URL = "https://crests.football-data.org/{id}.svg"


def _team(team_id: int, name: str, short_name: str, tla: str) -> Dict[str, Any]:
    return {
        "id": team_id,
        "name": name,
        "shortName": short_name,
        "tla": tla,
        "crest": CREST_URL.format(id=team_id),
    }


MAN_CITY = _team(65, "Manchester City FC", "Man City", "MCI")
ARSENAL = _team(57, "Arsenal FC", "Arsenal", "ARS")
LIVERPOOL = _team(64, "Liverpool FC", "Liverpool", "LIV")
ASTON_VILLA = _team(58, "Aston Villa FC", "Aston Villa", "AVL")
TOTTENHAM = _team(73, "Tottenham Hotspur FC", "Tottenham", "TOT")
CHELSEA = _team(61, "Chelsea FC", "Chelsea", "CHE")

COMPETITION = {"id": 2021, "name": "Premier League", "code": "PL", "type": "LEAGUE"}

# (team, played, won, draw, lost, goalsFor, goalsAgainst, form)
_TABLE_ROWS = [
    (MAN_CITY, 9, 7, 1, 1, 24, 8, "W,W,W,D,W"),
    (ARSENAL, 9, 6, 2, 1, 20, 9, "W,D,W,W,L"),
    (LIVERPOOL, 9, 6, 2, 1, 19, 8, "W,W,D,W,D"),
    (ASTON_VILLA, 9, 5, 2, 2, 17, 11, "L,W,W,D,W"),
    (TOTTENHAM, 9, 5, 1, 3, 18, 12, "D,W,W,D,D"),
    (CHELSEA, 9, 4, 3, 2, 16, 12, "W,L,W,W,L"),
]

STANDINGS: Dict[str, Any] = {
    "competition": COMPETITION,
    "standings": [
        {
            "stage": "REGULAR_SEASON",
            "type": "TOTAL",
            "table": [
                {
                    "position": index + 1,
                    "team": team,
                    "playedGames": played,
                    "won": won,
                    "draw": draw,
                    "lost": lost,
                    "goalsFor": goals_for,
                    "goalsAgainst": goals_against,
                    "goalDifference": goals_for - goals_against,
                    "points": won * 3 + draw,
                    "form": form,
                }
                for index, (team, played, won, draw, lost, goals_for, goals_against, form) in enumerate(
                    _TABLE_ROWS
                )
            ],
        }
    ],
}

SCORERS: Dict[str, Any] = {
    "scorers": [
        {"player": {"id": 38101, "name": "Erling Haaland"}, "team": MAN_CITY, "goals": 9, "assists": 3},
        {"player": {"id": 3754, "name": "Mohamed Salah"}, "team": LIVERPOOL, "goals": 8, "assists": 5},
        {"player": {"id": 7801, "name": "Ollie Watkins"}, "team": ASTON_VILLA, "goals": 7, "assists": 4},
        {"player": {"id": 3237, "name": "Heung-Min Son"}, "team": TOTTENHAM, "goals": 6, "assists": 2},
        {"player": {"id": 7784, "name": "Bukayo Saka"}, "team": ARSENAL, "goals": 5, "assists": 6},
        {"player": {"id": 8004, "name": "Cole Palmer"}, "team": CHELSEA, "goals": 5, "assists": None},
    ]
}


def _profile(team: Dict[str, Any], founded: int, venue: str, colors: str, coach: str,
             squad: List[Dict[str, Any]]) -> Dict[str, Any]:
    profile = dict(team)
    profile.update(
        {
            "founded": founded,
            "venue": venue,
            "clubColors": colors,
            "coach": {"name": coach},
            "runningCompetitions": [COMPETITION],
            "squad": squad,
        }
    )
    return profile


TEAM_PROFILES: Dict[str, Dict[str, Any]] = {
    "65": _profile(MAN_CITY, 1880, "Etihad Stadium", "Sky Blue / White", "Pep Guardiola", [
        {"id": 38101, "name": "Erling Haaland", "position": "Offence", "nationality": "Norway", "shirtNumber": 9},
        {"id": 3222, "name": "Kevin De Bruyne", "position": "Midfield", "nationality": "Belgium", "shirtNumber": 17},
        {"id": 7888, "name": "Rodri", "position": "Midfield", "nationality": "Spain", "shirtNumber": 16},
    ]),
    "57": _profile(ARSENAL, 1886, "Emirates Stadium", "Red / White", "Mikel Arteta", [
        {"id": 7784, "name": "Bukayo Saka", "position": "Offence", "nationality": "England", "shirtNumber": 7},
        {"id": 8325, "name": "Martin Ødegaard", "position": "Midfield", "nationality": "Norway", "shirtNumber": 8},
    ]),
    "64": _profile(LIVERPOOL, 1892, "Anfield", "Red / White", "Arne Slot", [
        {"id": 3754, "name": "Mohamed Salah", "position": "Offence", "nationality": "Egypt", "shirtNumber": 11},
        {"id": 7869, "name": "Virgil van Dijk", "position": "Defence", "nationality": "Netherlands", "shirtNumber": 4},
    ]),
    "58": _profile(ASTON_VILLA, 1872, "Villa Park", "Claret / Sky Blue", "Unai Emery", [
        {"id": 7801, "name": "Ollie Watkins", "position": "Offence", "nationality": "England", "shirtNumber": 11},
    ]),
    "73": _profile(TOTTENHAM, 1882, "Tottenham Hotspur Stadium", "Navy Blue / White", "Ange Postecoglou", [
        {"id": 3237, "name": "Heung-Min Son", "position": "Offence", "nationality": "Korea Republic", "shirtNumber": 7},
    ]),
    "61": _profile(CHELSEA, 1905, "Stamford Bridge", "Royal Blue / White", "Enzo Maresca", [
        {"id": 8004, "name": "Cole Palmer", "position": "Midfield", "nationality": "England", "shirtNumber": 20},
    ]),
}

TEAMS: Dict[str, Any] = {"competition": COMPETITION, "teams": list(TEAM_PROFILES.values())}


def _match(match_id: int, utc_date: str, home: Dict[str, Any], away: Dict[str, Any],
           score: Optional[tuple] = None) -> Dict[str, Any]:
    home_score, away_score = score if score else (None, None)
    return {
        "id": match_id,
        "utcDate": utc_date,
        "status": "FINISHED" if score else "SCHEDULED",
        "matchday": 9 if score else 10,
        "competition": COMPETITION,
        "homeTeam": home,
        "awayTeam": away,
        "score": {"fullTime": {"home": home_score, "away": away_score}},
    }


FINISHED_MATCHES: List[Dict[str, Any]] = [
    _match(497401, "2024-10-19T16:30:00Z", ARSENAL, CHELSEA, (3, 1)),
    _match(497402, "2024-10-20T15:30:00Z", LIVERPOOL, TOTTENHAM, (2, 2)),
    _match(497403, "2024-10-21T19:00:00Z", MAN_CITY, ASTON_VILLA, (4, 1)),
    _match(497404, "2024-10-05T14:00:00Z", CHELSEA, MAN_CITY, (1, 2)),
    _match(497405, "2024-10-05T16:30:00Z", TOTTENHAM, ARSENAL, (0, 1)),
    _match(497406, "2024-10-06T13:00:00Z", ASTON_VILLA, LIVERPOOL, (1, 1)),
]

SCHEDULED_MATCHES: List[Dict[str, Any]] = [
    _match(497501, "2024-10-26T11:30:00Z", MAN_CITY, LIVERPOOL),
    _match(497502, "2024-10-26T14:00:00Z", CHELSEA, ARSENAL),
    _match(497503, "2024-10-27T16:30:00Z", ASTON_VILLA, TOTTENHAM),
    _match(497504, "2024-11-02T15:00:00Z", ARSENAL, MAN_CITY),
    _match(497505, "2024-11-02T17:30:00Z", LIVERPOOL, CHELSEA),
    _match(497506, "2024-11-03T14:00:00Z", TOTTENHAM, ASTON_VILLA),
]


def _involves(match: Dict[str, Any], team_id: str) -> bool:
    return str(match["homeTeam"]["id"]) == team_id or str(match["awayTeam"]["id"]) == team_id


class MockFootballDataClient:
    """与 FootballDataClient 接口一致的静态数据源"""

    base_url = "mock://football-data"
    has_token = True

    async def aclose(self) -> None:
        return None

    @staticmethod
    def _matches(status: str) -> List[Dict[str, Any]]:
        return FINISHED_MATCHES if status == "FINISHED" else SCHEDULED_MATCHES

    async def get_standings(self, competition: str) -> ExternalStandingsResponse:
        return ExternalStandingsResponse.model_validate(copy.deepcopy(STANDINGS))

    async def get_scorers(self, competition: str, limit: int) -> ExternalScorersResponse:
        payload = {"scorers": copy.deepcopy(SCORERS["scorers"][:limit])}
        return ExternalScorersResponse.model_validate(payload)

    async def get_teams(self, competition: str) -> ExternalTeamsResponse:
        return ExternalTeamsResponse.model_validate(copy.deepcopy(TEAMS))

    async def get_competition_matches(
        self, competition: str, status: str, season: Optional[int] = None
    ) -> ExternalMatchesResponse:
        return ExternalMatchesResponse.model_validate({"matches": copy.deepcopy(self._matches(status))})

    async def get_team(self, team_id: str) -> ExternalTeamProfile:
        profile = TEAM_PROFILES.get(str(team_id))
        if profile is None:
            raise UpstreamHTTPError(404, f"Team {team_id} not found")
        return ExternalTeamProfile.model_validate(copy.deepcopy(profile))

    async def get_team_matches(self, team_id: str, status: str) -> ExternalMatchesResponse:
        matches = [m for m in self._matches(status) if _involves(m, str(team_id))]
        return ExternalMatchesResponse.model_validate({"matches": copy.deepcopy(matches)})
