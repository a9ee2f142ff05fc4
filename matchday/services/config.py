"""
服务层配置

统一管理适配层和聚合层使用的常量，避免硬编码
"""
from dataclasses import dataclass


@dataclass
class AdapterConfig:
    """数据映射配置"""

    # 积分计算（联赛惯例）
    POINTS_PER_WIN: int = 3
    POINTS_PER_DRAW: int = 1
    POINTS_PER_LOSS: int = 0

    # 上游缺失字段时的展示默认值
    DEFAULT_VENUE: str = "Venue to be confirmed"
    UNKNOWN_VENUE: str = "Unknown venue"

    # 阵容中代表球员的角色
    PLAYER_ROLE: str = "PLAYER"

    # 优先使用的积分榜分组
    STANDINGS_TABLE_TYPE: str = "TOTAL"


@dataclass
class StrengthsConfig:
    """球队亮点（启发式）配置"""

    FORM_WINDOW: int = 5
    MIN_RECENT_WINS: int = 3


@dataclass
class AnalyticsConfig:
    """数据页配置"""

    ATTACKING_STATS_TOP_N: int = 5
    MOMENTUM_TOP_N: int = 5
    LEADERBOARD_SIZE: int = 10


# 全局配置实例
adapter_config = AdapterConfig()
strengths_config = StrengthsConfig()
analytics_config = AnalyticsConfig()
