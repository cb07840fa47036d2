"""任务管理接口：创建、查询、删除任务，触发编排并查询编排进度。"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from mission_orchestrator.api.v1.schemas import (
    BriefResponse,
    MissionCreateRequest,
    MissionResponse,
    OrchestrateQueuedResponse,
    OrchestrateResponse,
    OrchestrationProgress,
    OrchestrationStatusResponse,
    PlanResponse,
    StoredPlanResponse,
)
from mission_orchestrator.application.container import get_mission_service
from mission_orchestrator.application.service import MissionService
from mission_orchestrator.domain.enums import MissionStatus

router = APIRouter()
logger = logging.getLogger(__name__)


def _service() -> MissionService:
    return get_mission_service()


@router.post("/missions", response_model=MissionResponse, status_code=status.HTTP_201_CREATED)
def create_mission(
    payload: MissionCreateRequest,
    service: MissionService = Depends(_service),
) -> MissionResponse:
    """创建任务。"""
    try:
        mission = service.create_mission(
            objective=payload.objective,
            context=payload.context,
            priority=payload.priority,
            deadline=payload.deadline,
            budget=payload.budget,
            constraints=payload.constraints,
            expected_outcome=payload.expected_outcome,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MissionResponse.model_validate(mission)


@router.get("/missions", response_model=list[MissionResponse])
def list_missions(
    status_filter: MissionStatus | None = Query(default=None, alias="status"),
    limit: int = 100,
    service: MissionService = Depends(_service),
) -> list[MissionResponse]:
    """按可选状态过滤并返回任务列表。"""
    missions = service.list_missions(status=status_filter, limit=max(1, min(limit, 500)))
    return [MissionResponse.model_validate(item) for item in missions]


@router.get("/missions/{mission_id}", response_model=MissionResponse)
def get_mission(
    mission_id: str,
    service: MissionService = Depends(_service),
) -> MissionResponse:
    """查询任务详情。"""
    try:
        return MissionResponse.model_validate(service.get_mission(mission_id))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/missions/{mission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_mission(
    mission_id: str,
    service: MissionService = Depends(_service),
) -> Response:
    """删除任务及其简报与计划。"""
    try:
        service.delete_mission(mission_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/missions/{mission_id}/orchestrate",
    response_model=OrchestrateResponse,
    responses={202: {"model": OrchestrateQueuedResponse}},
)
async def orchestrate_mission(
    mission_id: str,
    background: bool = False,
    service: MissionService = Depends(_service),
) -> OrchestrateResponse | JSONResponse:
    """同步编排任务并落地简报；background=true 时投递到后台。"""
    logger.info("orchestrate_mission requested: mission_id=%s background=%s", mission_id, background)
    if background:
        try:
            task_id = await asyncio.to_thread(service.enqueue_orchestration, mission_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except Exception as exc:
            raise HTTPException(status_code=503, detail=f"unable to enqueue orchestration: {exc}") from exc
        queued = OrchestrateQueuedResponse(mission_id=mission_id, status=MissionStatus.queued.value, task_id=task_id)
        return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=queued.model_dump())

    try:
        result, executed = await asyncio.to_thread(service.orchestrate_mission, mission_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not result.success or result.plan is None:
        raise HTTPException(status_code=500, detail=f"orchestration failed: {result.error}")

    logger.info("orchestrate_mission succeeded: mission_id=%s execution_success=%s", mission_id, executed)
    return OrchestrateResponse(
        success=True,
        execution_success=executed,
        plan=PlanResponse.from_plan(result.plan),
        recommendations=result.recommendations,
    )


@router.get("/missions/{mission_id}/orchestration", response_model=OrchestrationStatusResponse)
def get_orchestration(
    mission_id: str,
    service: MissionService = Depends(_service),
) -> OrchestrationStatusResponse:
    """查询任务的最新编排计划、简报与完成进度。"""
    try:
        snapshot = service.get_orchestration_status(mission_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    plan = snapshot["plan"]
    return OrchestrationStatusResponse(
        mission=MissionResponse.model_validate(snapshot["mission"]),
        orchestration_plan=StoredPlanResponse.model_validate(plan) if plan is not None else None,
        briefs=[BriefResponse.model_validate(item) for item in snapshot["briefs"]],
        status=OrchestrationProgress(
            total_briefs=snapshot["total_briefs"],
            completed_briefs=snapshot["completed_briefs"],
            progress=snapshot["progress"],
        ),
    )
