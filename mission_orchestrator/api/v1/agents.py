"""代理目录接口：列出内置代理并查询指定代理档案。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from mission_orchestrator.api.v1.schemas import AgentResponse
from mission_orchestrator.application.container import get_mission_service
from mission_orchestrator.application.service import MissionService

router = APIRouter()


def _service() -> MissionService:
    """依赖注入辅助函数，返回任务服务实例。"""
    return get_mission_service()


@router.get("/agents", response_model=list[AgentResponse])
def list_agents(service: MissionService = Depends(_service)) -> list[AgentResponse]:
    """按注册顺序返回全部代理。"""
    return [AgentResponse.from_profile(agent) for agent in service.list_agents()]


@router.get("/agents/{agent_id}", response_model=AgentResponse)
def get_agent(agent_id: str, service: MissionService = Depends(_service)) -> AgentResponse:
    """返回指定代理的档案。"""
    try:
        return AgentResponse.from_profile(service.get_agent(agent_id))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
