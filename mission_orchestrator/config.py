"""全局配置加载模块：从环境变量构建运行参数并提供缓存访问。"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mission_orchestrator.domain.models import PlanningThresholds


def _csv_to_list(value: str) -> list[str]:
    """将逗号分隔字符串转换为去空白列表。"""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """系统运行配置对象，从环境变量读取并提供类型化访问。"""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Mission Orchestrator"
    api_prefix: str = "/api/v1"
    environment: str = "dev"
    cors_allowed_origins: str = ""
    cors_allowed_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allowed_headers: str = "Authorization,Content-Type,X-Request-Id"
    cors_allow_credentials: bool = False

    database_url: str = "sqlite:///./orchestrator.db"
    redis_url: str = "redis://localhost:6379/0"
    celery_task_always_eager: bool = False
    orchestration_soft_timeout_seconds: int = 60
    orchestration_hard_timeout_seconds: int = 120

    log_dir: Path = Field(default=Path("./logs"))
    log_level: str = "INFO"
    log_debug_modules: str = ""
    log_debug_mission_ids: str = ""
    log_redaction_mode: str = "standard"
    log_payload_preview_chars: int = 2000
    log_max_bytes: int = 20 * 1024 * 1024
    log_backup_count: int = 5

    # substring | token
    keyword_match_mode: str = "substring"
    max_selected_agents: int = 4

    recommend_split_duration_minutes: int = 120
    recommend_min_confidence: float = 80
    recommend_max_risks: int = 2
    critical_min_agents: int = 3
    risk_max_critical_steps: int = 2
    risk_min_agent_performance: int = 80
    expert_min_performance: int = 85

    # Single tenant for v1, but schema is multi-tenant ready.
    default_tenant_id: str = "default"
    default_created_by: str = "system"

    def cors_allowed_origins_list(self) -> list[str]:
        return _csv_to_list(self.cors_allowed_origins)

    def cors_allowed_methods_list(self) -> list[str]:
        return _csv_to_list(self.cors_allowed_methods)

    def cors_allowed_headers_list(self) -> list[str]:
        return _csv_to_list(self.cors_allowed_headers)

    def log_debug_modules_list(self) -> list[str]:
        return _csv_to_list(self.log_debug_modules)

    def log_debug_mission_ids_list(self) -> list[str]:
        return _csv_to_list(self.log_debug_mission_ids)

    def planning_thresholds(self) -> PlanningThresholds:
        """将规划阈值字段汇总为领域层阈值对象。"""
        return PlanningThresholds(
            max_selected_agents=self.max_selected_agents,
            recommend_split_duration_minutes=self.recommend_split_duration_minutes,
            recommend_min_confidence=self.recommend_min_confidence,
            recommend_max_risks=self.recommend_max_risks,
            critical_min_agents=self.critical_min_agents,
            risk_max_critical_steps=self.risk_max_critical_steps,
            risk_min_agent_performance=self.risk_min_agent_performance,
            expert_min_performance=self.expert_min_performance,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """构建并缓存 Settings，相对日志目录按当前工作目录解析。"""
    settings = Settings()
    if not settings.log_dir.is_absolute():
        settings.log_dir = (Path.cwd() / settings.log_dir).resolve()
    return settings
