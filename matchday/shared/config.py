"""全局配置加载与强类型定义。
该模块负责读取 config/ 目录下的 YAML 文件，并映射为 Pydantic 模型。
"""
from __future__ import annotations

import functools
import pathlib
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 定位到项目根目录
BASE_DIR = pathlib.Path(__file__).resolve().parents[2]
CONFIG_DIR = BASE_DIR / "config"


def _load_yaml(filename: str) -> Dict[str, Any]:
    """辅助函数：安全加载 YAML 文件"""
    path = CONFIG_DIR / filename
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_section(section: str) -> Dict[str, Any]:
    return _load_yaml("service.yaml").get(section) or {}


# --- 1. API Config ---
class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    enable_docs: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


# --- 2. Data Source Config ---
class FootballDataOrgConfig(BaseModel):
    base_url: str = "https://api.football-data.org/v4"
    competition_code: str = "PL"
    competition_name: str = "Premier League"
    # None 表示按当前日期推算赛季
    season: Optional[int] = None
    scorers_limit: int = 30
    retry_attempts: int = 3


class DashboardConfig(BaseModel):
    data_source: Literal["live", "mock"] = "live"
    recent_matches_limit: int = 6
    upcoming_matches_limit: int = 6
    team_fixtures_limit: int = 5
    team_results_limit: int = 5
    display_timezone: str = "UTC"
    # 上游 form 字段的顺序；False 表示最早的比赛在前
    form_most_recent_first: bool = False


class TeamDetailCacheConfig(BaseModel):
    # None = 进程生命周期内不过期，0 = 不缓存
    ttl_seconds: Optional[float] = None


# --- 全局 Settings 聚合 ---
class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MATCHDAY_",
        env_nested_delimiter="__",
        populate_by_name=True,
        extra="ignore",
    )

    app_name: str = "Matchday Hub"
    app_version: str = "0.1.0"
    environment: str = "dev"

    # Token 只从环境变量读取，绝不写入配置文件
    # 两个变量同时存在时服务端变量优先，VITE_ 前缀仅作回退
    football_data_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "football_data_token",
            "FOOTBALL_DATA_TOKEN",
            "VITE_FOOTBALL_DATA_TOKEN",
        ),
    )

    api: ApiConfig = Field(default_factory=lambda: ApiConfig(**_load_section("api")))
    football_data: FootballDataOrgConfig = Field(
        default_factory=lambda: FootballDataOrgConfig(**_load_section("football_data"))
    )
    dashboard: DashboardConfig = Field(
        default_factory=lambda: DashboardConfig(**_load_section("dashboard"))
    )
    team_detail_cache: TeamDetailCacheConfig = Field(
        default_factory=lambda: TeamDetailCacheConfig(**_load_section("team_detail_cache"))
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取全局单例配置。"""
    return Settings()
