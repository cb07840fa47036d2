"""计划评估：计算指标，识别风险，生成备选代理组合与优化建议。"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from mission_orchestrator.domain.enums import Complexity, Priority
from mission_orchestrator.domain.models import (
    AgentProfile,
    MissionBrief,
    OrchestrationPlan,
    PlanMetrics,
    PlanningThresholds,
    WorkflowStep,
)
from mission_orchestrator.domain.planning.requirements import priority_key

RISK_DEADLINE = "Délai insuffisant pour compléter la mission"
RISK_TOO_MANY_CRITICAL = "Trop d'étapes critiques - risque de blocage"
RISK_LOW_PERFORMANCE = "Agents avec performance faible détectés"
RISK_UNAVAILABLE = "Agents non disponibles détectés"

RECOMMEND_SPLIT = "Considérer diviser la mission en sous-missions pour réduire le délai"
RECOMMEND_VALIDATION = "Ajouter des agents de validation pour améliorer la confiance"
RECOMMEND_REVISE = "Réviser le plan pour réduire les risques identifiés"
RECOMMEND_MORE_AGENTS = "Ajouter des agents pour les missions critiques"

CONFIDENCE_PER_STEP = 5


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def calculate_metrics(agents: list[AgentProfile], workflow: list[WorkflowStep]) -> PlanMetrics:
    """总时长为步骤时长之和；置信度限制在 [0, 100]。"""
    total_time = sum(step.estimated_time for step in workflow)
    avg_performance = sum(agent.performance for agent in agents) / len(agents) if agents else 0.0
    confidence = max(0.0, min(100.0, avg_performance + len(workflow) * CONFIDENCE_PER_STEP))
    efficiency = len(agents) * 100 / total_time if total_time > 0 else 0.0
    return PlanMetrics(total_time=total_time, confidence=confidence, efficiency=efficiency)


class PlanAssessor:
    """计划评估器，阈值可配置，时钟可注入以便测试。"""
    def __init__(
        self,
        thresholds: PlanningThresholds | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._thresholds = thresholds or PlanningThresholds()
        self._clock = clock

    def minutes_until(self, deadline: datetime) -> float:
        """距截止时间的剩余分钟数，已过期时为 0。"""
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=timezone.utc)
        delta = deadline - self._clock()
        return max(0.0, delta.total_seconds() / 60)

    def identify_risks(
        self,
        agents: list[AgentProfile],
        workflow: list[WorkflowStep],
        brief: MissionBrief,
    ) -> list[str]:
        risks: list[str] = []
        total_time = sum(step.estimated_time for step in workflow)
        if brief.deadline is not None and total_time > self.minutes_until(brief.deadline):
            risks.append(RISK_DEADLINE)

        if sum(1 for step in workflow if step.critical) > self._thresholds.risk_max_critical_steps:
            risks.append(RISK_TOO_MANY_CRITICAL)

        if any(agent.performance < self._thresholds.risk_min_agent_performance for agent in agents):
            risks.append(RISK_LOW_PERFORMANCE)

        if any(not agent.availability for agent in agents):
            risks.append(RISK_UNAVAILABLE)
        return risks

    def generate_alternatives(
        self,
        selected: list[AgentProfile],
        registry_agents: list[AgentProfile],
    ) -> list[list[AgentProfile]]:
        """最小化组合取排名前二；专家组合取注册表中的高阶高分代理前三。"""
        alternatives: list[list[AgentProfile]] = []
        minimal = selected[:2]
        if len(minimal) >= 2:
            alternatives.append(minimal)

        experts = [
            agent
            for agent in registry_agents
            if agent.complexity == Complexity.advanced and agent.performance > self._thresholds.expert_min_performance
        ][:3]
        if len(experts) >= 2:
            alternatives.append(experts)
        return alternatives

    def recommend(self, plan: OrchestrationPlan, brief: MissionBrief) -> list[str]:
        recommendations: list[str] = []
        if plan.estimated_duration > self._thresholds.recommend_split_duration_minutes:
            recommendations.append(RECOMMEND_SPLIT)
        if plan.confidence < self._thresholds.recommend_min_confidence:
            recommendations.append(RECOMMEND_VALIDATION)
        if len(plan.risks) > self._thresholds.recommend_max_risks:
            recommendations.append(RECOMMEND_REVISE)
        if priority_key(brief.priority) == Priority.critical.value and len(plan.agents) < self._thresholds.critical_min_agents:
            recommendations.append(RECOMMEND_MORE_AGENTS)
        return recommendations
