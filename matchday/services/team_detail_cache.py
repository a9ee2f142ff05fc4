"""
球队详情缓存

显式对象（由 DashboardService 持有），取代模块级全局字典：
- ttl_seconds=None：进程生命周期内不过期
- ttl_seconds=0：不缓存
- ttl_seconds>0：超时后视为未命中
只缓存成功获取的结果；可按球队或整体手动失效。
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from matchday.services.view_models import TeamDetail

logger = logging.getLogger(__name__)


class TeamDetailCache:

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds is not None and ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0 or None")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, TeamDetail]] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds != 0

    def _is_fresh(self, stored_at: float) -> bool:
        if self.ttl_seconds is None:
            return True
        return self._clock() - stored_at < self.ttl_seconds

    def get(self, team_id: str) -> Optional[TeamDetail]:
        entry = self._entries.get(str(team_id))
        if entry is None:
            return None
        stored_at, detail = entry
        if not self._is_fresh(stored_at):
            logger.debug(f"球队 {team_id} 的详情缓存已过期")
            del self._entries[str(team_id)]
            return None
        return detail

    def set(self, team_id: str, detail: TeamDetail) -> None:
        if not self.enabled:
            return
        self._entries[str(team_id)] = (self._clock(), detail)

    def invalidate(self, team_id: Optional[str] = None) -> int:
        """失效指定球队（或全部），返回被移除的条目数"""
        if team_id is None:
            removed = len(self._entries)
            self._entries.clear()
        else:
            removed = 1 if self._entries.pop(str(team_id), None) is not None else 0
        if removed:
            logger.info(f"已失效 {removed} 条球队详情缓存")
        return removed

    def __contains__(self, team_id: object) -> bool:
        return self.get(str(team_id)) is not None

    def __len__(self) -> int:
        return len(self._entries)
