"""任务服务门面：处理任务创建、查询、删除、编排、入队与进度聚合。"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from mission_orchestrator.application.orchestrator import MissionOrchestrator
from mission_orchestrator.config import Settings
from mission_orchestrator.domain.agents.registry import AgentRegistry
from mission_orchestrator.domain.enums import BriefStatus, MissionStatus
from mission_orchestrator.domain.models import AgentProfile, MissionBrief, OrchestrationResult
from mission_orchestrator.infra.db.models import MissionORM
from mission_orchestrator.infra.db.repository import MissionRepository

DEFAULT_EXPECTED_OUTCOME = "Livrables de qualité professionnelle"

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    # 带时区的截止时间统一转为 UTC，SQLite 读回时不保留时区。
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


class MissionService:
    """应用服务门面，对外提供任务生命周期与编排相关能力。"""
    def __init__(
        self,
        *,
        settings: Settings,
        repository: MissionRepository,
        registry: AgentRegistry,
        orchestrator: MissionOrchestrator,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._registry = registry
        self._orchestrator = orchestrator

    def create_mission(
        self,
        *,
        objective: str,
        context: str | None = None,
        priority: str = "medium",
        deadline: datetime | None = None,
        budget: float | None = None,
        constraints: list[str] | None = None,
        expected_outcome: str | None = None,
        tenant_id: str | None = None,
        created_by: str | None = None,
    ) -> MissionORM:
        """创建任务记录，初始状态为 pending。"""
        if not objective or not objective.strip():
            raise ValueError("objective is required")
        mission = self._repository.create_mission(
            mission_id=str(uuid4()),
            tenant_id=tenant_id or self._settings.default_tenant_id,
            objective=objective.strip(),
            context=context,
            priority=priority,
            deadline=_as_utc(deadline),
            budget=budget,
            constraints=constraints or None,
            expected_outcome=expected_outcome,
            created_by=created_by or self._settings.default_created_by,
        )
        logger.info("mission created", extra={"event": "mission.created", "mission_id": mission.id})
        return mission

    def get_mission(self, mission_id: str) -> MissionORM:
        mission = self._repository.get_mission(mission_id)
        if mission is None:
            raise KeyError(f"mission not found: {mission_id}")
        return mission

    def list_missions(
        self,
        *,
        tenant_id: str | None = None,
        status: MissionStatus | None = None,
        limit: int = 100,
    ) -> list[MissionORM]:
        return self._repository.list_missions(tenant_id or self._settings.default_tenant_id, status=status, limit=limit)

    def delete_mission(self, mission_id: str) -> None:
        if not self._repository.delete_mission(mission_id):
            raise KeyError(f"mission not found: {mission_id}")

    @staticmethod
    def build_brief(mission: MissionORM) -> MissionBrief:
        """由任务记录构造编排输入。"""
        return MissionBrief(
            objective=mission.objective,
            context=mission.context,
            priority=mission.priority,
            deadline=mission.deadline,
            budget=mission.budget,
            constraints=list(mission.constraints_json or []),
            expected_outcome=mission.expected_outcome or DEFAULT_EXPECTED_OUTCOME,
        )

    def orchestrate_mission(self, mission_id: str) -> tuple[OrchestrationResult, bool]:
        """编排任务并在成功时落地简报，返回编排结果与执行是否成功。"""
        mission = self.get_mission(mission_id)
        self._repository.set_status(mission_id, MissionStatus.orchestrating, source="api")

        result = self._orchestrator.orchestrate(mission_id, self.build_brief(mission))
        if not result.success or result.plan is None:
            self._repository.set_status(mission_id, MissionStatus.failed, error_message=result.error)
            self._repository.add_event(
                mission_id,
                source="worker",
                event_type="orchestration.failed",
                status=MissionStatus.failed.value,
                message=result.error,
            )
            return result, False

        executed = self._orchestrator.execute(result.plan)
        if not executed:
            self._repository.add_event(
                mission_id,
                source="worker",
                event_type="plan.execute.failed",
                message="brief creation failed",
            )
        return result, executed

    def mark_failed(self, mission_id: str, error: str) -> None:
        """后台编排放弃时将任务标记为 failed，之后允许重新入队。"""
        self._repository.set_status(mission_id, MissionStatus.failed, error_message=error)
        self._repository.add_event(
            mission_id,
            source="worker",
            event_type="orchestration.abandoned",
            status=MissionStatus.failed.value,
            message=error,
        )

    def enqueue_orchestration(self, mission_id: str) -> str:
        """将任务投递到 Celery 后台编排，返回 task id。"""
        mission = self.get_mission(mission_id)
        if mission.status in {MissionStatus.queued.value, MissionStatus.orchestrating.value}:
            raise ValueError(f"mission cannot be orchestrated from status={mission.status}")

        from mission_orchestrator.worker.tasks import run_orchestration_task

        self._repository.set_status(mission_id, MissionStatus.queued, source="api")
        try:
            task = run_orchestration_task.delay(mission_id)
        except Exception:
            # 投递失败时恢复原状态，允许调用方重试。
            self._repository.set_status(mission_id, MissionStatus(mission.status), source="api")
            raise
        logger.info(
            "orchestration enqueued",
            extra={"event": "mission.enqueued", "mission_id": mission_id, "payload_preview": {"task_id": task.id}},
        )
        self._repository.add_event(
            mission_id,
            source="api",
            event_type="mission.enqueued",
            status=MissionStatus.queued.value,
            message=task.id,
            payload={"task_id": task.id},
        )
        return task.id

    def get_orchestration_status(self, mission_id: str) -> dict[str, Any]:
        """聚合任务、最新计划、简报与完成进度。"""
        mission = self.get_mission(mission_id)
        plan = self._repository.get_latest_plan(mission_id)
        briefs = self._repository.list_briefs(mission_id)
        completed = sum(1 for item in briefs if item.status == BriefStatus.done.value)
        return {
            "mission": mission,
            "plan": plan,
            "briefs": briefs,
            "total_briefs": len(briefs),
            "completed_briefs": completed,
            "progress": completed / len(briefs) * 100 if briefs else 0.0,
        }

    def list_agents(self) -> list[AgentProfile]:
        return self._registry.all()

    def get_agent(self, agent_id: str) -> AgentProfile:
        return self._registry.get(agent_id)
