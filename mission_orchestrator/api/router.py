"""API 总路由配置，按业务域注册 missions 与 agents 子路由。"""

from __future__ import annotations

from fastapi import APIRouter

from mission_orchestrator.api.v1.agents import router as agents_router
from mission_orchestrator.api.v1.missions import router as missions_router
from mission_orchestrator.config import get_settings

settings = get_settings()

api_router = APIRouter(prefix=settings.api_prefix)
api_router.include_router(missions_router, tags=["missions"])
api_router.include_router(agents_router, tags=["agents"])
