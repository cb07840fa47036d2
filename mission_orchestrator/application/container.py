"""依赖容器模块，负责单例化创建注册中心、仓储、编排器与应用服务对象。"""

from __future__ import annotations

from functools import lru_cache

from mission_orchestrator.application.orchestrator import MissionOrchestrator
from mission_orchestrator.application.service import MissionService
from mission_orchestrator.config import get_settings
from mission_orchestrator.domain.agents.registry import AgentRegistry
from mission_orchestrator.infra.db.repository import MissionRepository
from mission_orchestrator.infra.db.session import SessionLocal


@lru_cache(maxsize=1)
def get_agent_registry() -> AgentRegistry:
    """获取代理注册中心单例。"""
    return AgentRegistry()


@lru_cache(maxsize=1)
def get_repository() -> MissionRepository:
    """获取任务仓储单例。"""
    return MissionRepository(SessionLocal)


@lru_cache(maxsize=1)
def get_mission_orchestrator() -> MissionOrchestrator:
    """获取编排器单例；阈值与匹配模式来自配置。"""
    settings = get_settings()
    return MissionOrchestrator(
        registry=get_agent_registry(),
        repository=get_repository(),
        thresholds=settings.planning_thresholds(),
        keyword_match_mode=settings.keyword_match_mode,
    )


@lru_cache(maxsize=1)
def get_mission_service() -> MissionService:
    """获取任务服务单例。"""
    return MissionService(
        settings=get_settings(),
        repository=get_repository(),
        registry=get_agent_registry(),
        orchestrator=get_mission_orchestrator(),
    )


def shutdown_container_resources() -> None:
    """清理依赖容器缓存，确保后续请求可重新构建全新实例。"""
    for provider in (
        get_mission_service,
        get_mission_orchestrator,
        get_repository,
        get_agent_registry,
    ):
        provider.cache_clear()
