"""任务编排器：把任务简述转换为编排计划，并将计划落地为代理简报。

流程依次为需求分析、代理评分选择、工作流构建、指标计算、风险与备选方案生成。
计划保存失败只记录日志，不影响本次编排结果；流水线内任何异常都返回失败结果，
不返回部分计划。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from mission_orchestrator.domain.agents.registry import AgentRegistry
from mission_orchestrator.domain.enums import BriefStatus, MissionStatus
from mission_orchestrator.domain.models import (
    AgentProfile,
    MissionBrief,
    OrchestrationPlan,
    OrchestrationResult,
    PlanningThresholds,
    WorkflowStep,
)
from mission_orchestrator.domain.planning.assessment import PlanAssessor, calculate_metrics, utcnow
from mission_orchestrator.domain.planning.brief import render_brief
from mission_orchestrator.domain.planning.requirements import KeywordMatcher, RequirementAnalyzer, priority_key
from mission_orchestrator.domain.planning.selector import AgentSelector
from mission_orchestrator.domain.planning.workflow import WorkflowBuilder
from mission_orchestrator.infra.db.repository import MissionRepository

logger = logging.getLogger(__name__)


class MissionOrchestrator:
    """编排组件：纯计算流水线加至多两类尽力而为的外部写入。"""
    def __init__(
        self,
        *,
        registry: AgentRegistry,
        repository: MissionRepository,
        thresholds: PlanningThresholds | None = None,
        keyword_match_mode: str = "substring",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._registry = registry
        self._repository = repository
        self._thresholds = thresholds or PlanningThresholds()
        self._clock = clock
        matcher = KeywordMatcher(keyword_match_mode)
        self._analyzer = RequirementAnalyzer(matcher)
        self._selector = AgentSelector(registry, max_selected=self._thresholds.max_selected_agents)
        self._workflow_builder = WorkflowBuilder(matcher)
        self._assessor = PlanAssessor(self._thresholds, clock=clock)

    def orchestrate(self, mission_id: str, brief: MissionBrief) -> OrchestrationResult:
        """生成编排计划；流水线异常时返回 success=False 与错误信息。"""
        logger.info(
            "orchestration started",
            extra={
                "event": "orchestration.started",
                "mission_id": mission_id,
                "payload_preview": {"priority": priority_key(brief.priority), "objective_len": len(brief.objective or "")},
            },
        )
        try:
            plan = self.build_plan(mission_id, brief)
            self._save_plan(plan)
            recommendations = self._assessor.recommend(plan, brief)
        except Exception as exc:
            logger.exception(
                "orchestration failed",
                extra={
                    "event": "orchestration.failed",
                    "mission_id": mission_id,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return OrchestrationResult(success=False, error=str(exc) or type(exc).__name__)

        logger.info(
            "orchestration succeeded",
            extra={
                "event": "orchestration.succeeded",
                "mission_id": mission_id,
                "payload_preview": {
                    "agents": [agent.id for agent in plan.agents],
                    "steps": len(plan.workflow),
                    "estimated_duration": plan.estimated_duration,
                    "confidence": plan.confidence,
                    "risks": len(plan.risks),
                },
            },
        )
        return OrchestrationResult(success=True, plan=plan, recommendations=recommendations)

    def build_plan(self, mission_id: str, brief: MissionBrief) -> OrchestrationPlan:
        """执行纯计算部分，不触发任何外部写入。"""
        requirements = self._analyzer.analyze(brief)
        logger.debug("requirements extracted", extra={"mission_id": mission_id, "payload_preview": requirements})

        agents = self._selector.select(requirements, brief)
        workflow = self._workflow_builder.build(agents, brief)
        metrics = calculate_metrics(agents, workflow)
        risks = self._assessor.identify_risks(agents, workflow, brief)
        alternatives = self._assessor.generate_alternatives(agents, self._registry.all())

        return OrchestrationPlan(
            mission_id=mission_id,
            agents=agents,
            workflow=workflow,
            estimated_duration=metrics.total_time,
            confidence=metrics.confidence,
            efficiency=metrics.efficiency,
            risks=risks,
            alternatives=alternatives,
        )

    def execute(self, plan: OrchestrationPlan) -> bool:
        """将任务标记为 orchestrated，并为每个步骤写入 queued 简报。

        中途失败不回滚已写入的简报，整体返回 False。
        """
        logger.info("plan execution started", extra={"event": "plan.execute.started", "mission_id": plan.mission_id})
        try:
            self._repository.set_status(plan.mission_id, MissionStatus.orchestrated)
            for step in plan.workflow:
                agent = plan.agent(step.agent_id)
                if agent is not None:
                    self._create_brief(plan.mission_id, agent, step)
        except Exception as exc:
            logger.exception(
                "plan execution failed",
                extra={
                    "event": "plan.execute.failed",
                    "mission_id": plan.mission_id,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return False

        logger.info(
            "plan execution succeeded",
            extra={
                "event": "plan.execute.succeeded",
                "mission_id": plan.mission_id,
                "payload_preview": {"briefs": len(plan.workflow)},
            },
        )
        return True

    def _save_plan(self, plan: OrchestrationPlan) -> None:
        try:
            self._repository.save_plan(plan)
        except Exception as exc:
            # 计划落库失败不影响编排结果。
            logger.error(
                "orchestration plan save failed",
                extra={
                    "event": "orchestration.plan.save.failed",
                    "mission_id": plan.mission_id,
                    "external_service": "database",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )

    def _create_brief(self, mission_id: str, agent: AgentProfile, step: WorkflowStep) -> None:
        self._repository.create_brief(
            mission_id,
            agent=agent.id,
            content_json={
                "brief": render_brief(agent, step),
                "status": BriefStatus.queued.value,
                "step": step.step,
                "dependencies": list(step.dependencies),
                "estimated_time": step.estimated_time,
                "critical": step.critical,
                "created_at": self._clock().astimezone(timezone.utc).isoformat(),
            },
            status=BriefStatus.queued,
        )
