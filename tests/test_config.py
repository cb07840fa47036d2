"""配置测试：验证环境变量覆盖与规划阈值汇总。"""

from mission_orchestrator.config import Settings
from mission_orchestrator.domain.models import PlanningThresholds


def test_defaults_match_planning_thresholds() -> None:
    assert Settings().planning_thresholds() == PlanningThresholds()
    assert Settings().keyword_match_mode == "substring"


def test_env_overrides_thresholds_and_lists(monkeypatch) -> None:
    """环境变量可覆盖阈值与逗号分隔列表。"""
    monkeypatch.setenv("MAX_SELECTED_AGENTS", "2")
    monkeypatch.setenv("RECOMMEND_SPLIT_DURATION_MINUTES", "90")
    monkeypatch.setenv("KEYWORD_MATCH_MODE", "token")
    monkeypatch.setenv("LOG_DEBUG_MISSION_IDS", " m-1, ,m-2 ")

    settings = Settings()
    thresholds = settings.planning_thresholds()

    assert thresholds.max_selected_agents == 2
    assert thresholds.recommend_split_duration_minutes == 90
    assert settings.keyword_match_mode == "token"
    assert settings.log_debug_mission_ids_list() == ["m-1", "m-2"]
