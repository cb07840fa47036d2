"""计划评估测试：验证指标计算、风险识别、备选组合与优化建议。"""

from datetime import datetime, timedelta, timezone

import pytest

from mission_orchestrator.domain.agents.registry import AgentRegistry
from mission_orchestrator.domain.enums import Complexity, StepKind
from mission_orchestrator.domain.models import (
    AgentProfile,
    MissionBrief,
    OrchestrationPlan,
    PlanningThresholds,
    WorkflowStep,
)
from mission_orchestrator.domain.planning.assessment import (
    RECOMMEND_MORE_AGENTS,
    RECOMMEND_REVISE,
    RECOMMEND_SPLIT,
    RECOMMEND_VALIDATION,
    RISK_DEADLINE,
    RISK_LOW_PERFORMANCE,
    RISK_TOO_MANY_CRITICAL,
    RISK_UNAVAILABLE,
    PlanAssessor,
    calculate_metrics,
)

FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _step(number: int, *, minutes: int = 30, critical: bool = False) -> WorkflowStep:
    return WorkflowStep(
        step=number,
        agent_id="KarineAI",
        kind=StepKind.analysis,
        action="Analyse",
        dependencies=list(range(1, number)),
        estimated_time=minutes,
        critical=critical,
    )


def _assessor() -> PlanAssessor:
    return PlanAssessor(clock=lambda: FIXED_NOW)


def test_metrics_sum_durations_and_average_performance() -> None:
    registry = AgentRegistry()
    agents = [registry.get("KarineAI"), registry.get("JPBot")]
    metrics = calculate_metrics(agents, [_step(1, minutes=45), _step(2, minutes=30)])

    assert metrics.total_time == 75
    assert metrics.confidence == pytest.approx((92 + 85) / 2 + 10)
    assert metrics.efficiency == pytest.approx(2 * 100 / 75)


def test_confidence_is_clamped_to_hundred() -> None:
    """置信度上限为 100。"""
    registry = AgentRegistry()
    agents = [registry.get("KarineAI")]
    metrics = calculate_metrics(agents, [_step(n) for n in range(1, 4)])
    assert metrics.confidence == 100


def test_empty_plan_metrics_are_zero() -> None:
    metrics = calculate_metrics([], [])
    assert metrics.total_time == 0
    assert metrics.confidence == 0
    assert metrics.efficiency == 0


def test_tight_deadline_is_flagged() -> None:
    """截止时间仅剩 5 分钟而总时长更长时识别为延期风险。"""
    registry = AgentRegistry()
    brief = MissionBrief(objective="x", deadline=FIXED_NOW + timedelta(minutes=5))
    risks = _assessor().identify_risks([registry.get("KarineAI")], [_step(1, minutes=45)], brief)
    assert risks == [RISK_DEADLINE]


def test_past_deadline_counts_as_zero_minutes() -> None:
    assessor = _assessor()
    assert assessor.minutes_until(FIXED_NOW - timedelta(hours=1)) == 0
    naive = (FIXED_NOW + timedelta(minutes=90)).replace(tzinfo=None)
    assert assessor.minutes_until(naive) == pytest.approx(90)


def test_generous_deadline_is_not_flagged() -> None:
    registry = AgentRegistry()
    brief = MissionBrief(objective="x", deadline=FIXED_NOW + timedelta(days=2))
    assert _assessor().identify_risks([registry.get("KarineAI")], [_step(1)], brief) == []


def test_critical_steps_low_performance_and_unavailability() -> None:
    weak = AgentProfile(
        id="weak",
        name="Weak",
        description="",
        specialties=("analyse",),
        complexity=Complexity.intermediate,
        performance=70,
        availability=False,
        estimated_time=10,
    )
    workflow = [_step(n, critical=True) for n in range(1, 4)]
    risks = _assessor().identify_risks([weak], workflow, MissionBrief(objective="x"))
    assert risks == [RISK_TOO_MANY_CRITICAL, RISK_LOW_PERFORMANCE, RISK_UNAVAILABLE]


def test_alternatives_include_minimal_and_expert_teams() -> None:
    """最小组合取选中前二，专家组合为 performance>85 的 advanced 代理。"""
    registry = AgentRegistry()
    selected = [registry.get("KarineAI"), registry.get("ElodieAI"), registry.get("HugoAI")]
    alternatives = _assessor().generate_alternatives(selected, registry.all())

    assert [[agent.id for agent in group] for group in alternatives] == [
        ["KarineAI", "ElodieAI"],
        ["KarineAI", "HugoAI", "ClaraLaCloseuse"],
    ]


def test_single_agent_has_no_minimal_alternative() -> None:
    registry = AgentRegistry()
    alternatives = _assessor().generate_alternatives([registry.get("JPBot")], [registry.get("JPBot")])
    assert alternatives == []


def test_recommendations_follow_rule_order() -> None:
    registry = AgentRegistry()
    plan = OrchestrationPlan(
        mission_id="m-1",
        agents=[registry.get("KarineAI"), registry.get("HugoAI")],
        workflow=[],
        estimated_duration=150,
        confidence=70,
        efficiency=1.3,
        risks=["a", "b", "c"],
        alternatives=[],
    )
    brief = MissionBrief(objective="x", priority="critical")
    assert _assessor().recommend(plan, brief) == [
        RECOMMEND_SPLIT,
        RECOMMEND_VALIDATION,
        RECOMMEND_REVISE,
        RECOMMEND_MORE_AGENTS,
    ]


def test_recommendation_thresholds_are_configurable() -> None:
    registry = AgentRegistry()
    plan = OrchestrationPlan(
        mission_id="m-1",
        agents=[registry.get("KarineAI")],
        workflow=[],
        estimated_duration=100,
        confidence=95,
        efficiency=1.0,
        risks=[],
        alternatives=[],
    )
    assessor = PlanAssessor(PlanningThresholds(recommend_split_duration_minutes=90), clock=lambda: FIXED_NOW)

    assert _assessor().recommend(plan, MissionBrief(objective="x")) == []
    assert assessor.recommend(plan, MissionBrief(objective="x")) == [RECOMMEND_SPLIT]
