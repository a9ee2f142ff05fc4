"""日期、赛果与状态（form）相关的格式化工具。"""
from __future__ import annotations

import re
from datetime import date, datetime, timezone, tzinfo
from typing import List, Literal, Optional
from zoneinfo import ZoneInfo

from matchday.services.config import adapter_config

Outcome = Literal["W", "D", "L"]

_FORM_SYMBOLS = {"W", "D", "L"}
_FORM_POINTS = {
    "W": adapter_config.POINTS_PER_WIN,
    "D": adapter_config.POINTS_PER_DRAW,
    "L": adapter_config.POINTS_PER_LOSS,
}


def resolve_timezone(name: Optional[str]) -> tzinfo:
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def _localize(value: datetime, tz: Optional[tzinfo]) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz or timezone.utc)


def format_short_date(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """短日期，如 "Sat 19 Oct"（用于赛果速览）"""
    local = _localize(value, tz)
    return f"{local:%a} {local.day} {local:%b}"


def format_full_date(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """完整日期，如 "Sat 19 October, 16:30"（用于赛程）"""
    local = _localize(value, tz)
    return f"{local:%a} {local.day} {local:%B}, {local:%H:%M}"


def match_outcome(own_score: int, other_score: int) -> Outcome:
    if own_score > other_score:
        return "W"
    if own_score == other_score:
        return "D"
    return "L"


def parse_form(form: Optional[str], most_recent_first: bool = False) -> List[str]:
    """
    解析 form 字符串为按时间顺序（最早在前）排列的 W/D/L 列表

    兼容 "W,W,D"、"W W D"、"WWD" 等写法，忽略无法识别的字符。
    """
    if not form:
        return []
    symbols = [ch for ch in re.sub(r"[\s,\-]", "", form.upper()) if ch in _FORM_SYMBOLS]
    if most_recent_first:
        symbols.reverse()
    return symbols


def form_to_points(symbols: List[str]) -> List[int]:
    return [_FORM_POINTS[symbol] for symbol in symbols]


def current_season(today: Optional[date] = None) -> int:
    """football-data 的赛季以开始年份标识，7 月前仍属上一赛季"""
    today = today or datetime.now(timezone.utc).date()
    return today.year if today.month >= 7 else today.year - 1


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "unknown"
