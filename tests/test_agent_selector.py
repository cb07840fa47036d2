"""代理选择测试：验证评分公式、排序稳定性与选中数量上限。"""

import pytest

from mission_orchestrator.domain.agents.registry import AgentRegistry
from mission_orchestrator.domain.enums import Complexity
from mission_orchestrator.domain.models import AgentProfile, MissionBrief
from mission_orchestrator.domain.planning.requirements import RequirementAnalyzer
from mission_orchestrator.domain.planning.selector import AgentSelector, specialty_category


def _profile(agent_id: str, **overrides) -> AgentProfile:
    values = {
        "id": agent_id,
        "name": agent_id,
        "description": "test agent",
        "specialties": ("analyse",),
        "complexity": Complexity.intermediate,
        "performance": 80,
        "availability": True,
        "estimated_time": 30,
    }
    values.update(overrides)
    return AgentProfile(**values)


def test_marketing_brief_selects_strategist_first() -> None:
    """营销任务中 KarineAI 得分最高，其余按基础分排序。"""
    registry = AgentRegistry()
    brief = MissionBrief(
        objective="Créer une stratégie marketing pour une startup tech",
        context="Startup B2B, budget limité",
        priority="high",
    )
    requirements = RequirementAnalyzer().analyze(brief)
    selector = AgentSelector(registry)

    ranked = selector.rank(requirements, brief)
    assert ranked[0].agent.id == "KarineAI"
    assert ranked[0].score == pytest.approx(15.6 * 0.92 + 9.2 + 10)

    selected = selector.select(requirements, brief)
    assert [agent.id for agent in selected] == ["KarineAI", "ElodieAI", "HugoAI", "ClaraLaCloseuse"]


def test_selection_never_exceeds_limit() -> None:
    registry = AgentRegistry()
    brief = MissionBrief(objective="analyse data marketing seo vente productivité développement")
    requirements = RequirementAnalyzer().analyze(brief)

    assert len(AgentSelector(registry).select(requirements, brief)) == 4
    assert len(AgentSelector(registry, max_selected=2).select(requirements, brief)) == 2


def test_critical_priority_favours_advanced_agents() -> None:
    """critical 优先级为 advanced 代理额外加 20 分。"""
    registry = AgentRegistry()
    brief = MissionBrief(objective="", priority="critical")
    requirements = RequirementAnalyzer().analyze(brief)

    selected = AgentSelector(registry).select(requirements, brief)
    assert [agent.id for agent in selected] == ["KarineAI", "HugoAI", "ClaraLaCloseuse", "ElodieAI"]


def test_equal_scores_keep_registration_order() -> None:
    """同分代理保持注册顺序。"""
    registry = AgentRegistry([_profile("first"), _profile("second"), _profile("third")])
    brief = MissionBrief(objective="analyse")
    requirements = RequirementAnalyzer().analyze(brief)

    selected = AgentSelector(registry, max_selected=2).select(requirements, brief)
    assert [agent.id for agent in selected] == ["first", "second"]


def test_only_positive_scores_are_selected() -> None:
    registry = AgentRegistry([_profile("idle", performance=0, availability=False), _profile("ready")])
    brief = MissionBrief(objective="rien")
    requirements = RequirementAnalyzer().analyze(brief)

    selected = AgentSelector(registry).select(requirements, brief)
    assert [agent.id for agent in selected] == ["ready"]


def test_unavailable_agent_loses_bonus() -> None:
    selector = AgentSelector(AgentRegistry([]))
    brief = MissionBrief(objective="")
    requirements = RequirementAnalyzer().analyze(brief)

    available = selector.score(_profile("a"), requirements, brief)
    unavailable = selector.score(_profile("b", availability=False), requirements, brief)
    assert available - unavailable == pytest.approx(10)


def test_unmapped_specialty_counts_as_analysis() -> None:
    assert specialty_category("copywriting").value == "analysis"
    assert specialty_category("seo").value == "content"
    assert specialty_category("optimisation").value == "productivity"
