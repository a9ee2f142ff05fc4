"""配置加载测试"""
import pytest

from matchday.shared.config import Settings


@pytest.fixture
def clean_token_env(monkeypatch):
    for name in ("FOOTBALL_DATA_TOKEN", "VITE_FOOTBALL_DATA_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_server_token_wins_over_vite_token(clean_token_env):
    clean_token_env.setenv("FOOTBALL_DATA_TOKEN", "server-token")
    clean_token_env.setenv("VITE_FOOTBALL_DATA_TOKEN", "vite-token")

    assert Settings().football_data_token == "server-token"


def test_vite_token_is_fallback(clean_token_env):
    clean_token_env.setenv("VITE_FOOTBALL_DATA_TOKEN", "vite-token")

    assert Settings().football_data_token == "vite-token"


def test_no_token(clean_token_env):
    assert Settings().football_data_token is None


def test_yaml_sections_loaded(clean_token_env):
    settings = Settings()

    assert settings.football_data.competition_code == "PL"
    assert settings.dashboard.recent_matches_limit == 6
    assert settings.team_detail_cache.ttl_seconds is None
