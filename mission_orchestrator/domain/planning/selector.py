"""代理选择器：根据需求向量与任务优先级为每个代理打分并选出前几名。"""

from __future__ import annotations

from mission_orchestrator.domain.agents.registry import AgentRegistry
from mission_orchestrator.domain.enums import Complexity, Priority, RequirementCategory
from mission_orchestrator.domain.models import AgentProfile, MissionBrief, ScoredAgent
from mission_orchestrator.domain.planning.requirements import RequirementVector, priority_key

SPECIALTY_CATEGORIES: dict[str, RequirementCategory] = {
    "stratégie": RequirementCategory.marketing,
    "marketing": RequirementCategory.marketing,
    "développement": RequirementCategory.technical,
    "technique": RequirementCategory.technical,
    "rédaction": RequirementCategory.content,
    "contenu": RequirementCategory.content,
    "seo": RequirementCategory.content,
    "analyse": RequirementCategory.analysis,
    "data": RequirementCategory.analysis,
    "conversion": RequirementCategory.conversion,
    "vente": RequirementCategory.conversion,
    "productivité": RequirementCategory.productivity,
    "optimisation": RequirementCategory.productivity,
}

AVAILABILITY_BONUS = 10.0
CRITICAL_ADVANCED_BONUS = 20.0


def specialty_category(specialty: str) -> RequirementCategory:
    """未登记的专长默认归入 analysis。"""
    return SPECIALTY_CATEGORIES.get(specialty, RequirementCategory.analysis)


class AgentSelector:
    """代理选择器，按分数降序选择，平分时保持注册顺序。"""
    def __init__(self, registry: AgentRegistry, max_selected: int = 4) -> None:
        self._registry = registry
        self._max_selected = max_selected

    def score(self, agent: AgentProfile, requirements: RequirementVector, brief: MissionBrief) -> float:
        score = 0.0
        for specialty in agent.specialties:
            weight = requirements.get(specialty_category(specialty).value, 0.0)
            score += weight * agent.performance / 100
        score += agent.performance / 10
        if agent.availability:
            score += AVAILABILITY_BONUS
        if priority_key(brief.priority) == Priority.critical.value and agent.complexity == Complexity.advanced:
            score += CRITICAL_ADVANCED_BONUS
        return score

    def rank(self, requirements: RequirementVector, brief: MissionBrief) -> list[ScoredAgent]:
        """返回全部代理的评分结果，sorted 为稳定排序。"""
        scored = [ScoredAgent(agent=agent, score=self.score(agent, requirements, brief)) for agent in self._registry.all()]
        return sorted(scored, key=lambda item: item.score, reverse=True)

    def select(self, requirements: RequirementVector, brief: MissionBrief) -> list[AgentProfile]:
        """选出得分为正的前 max_selected 个代理。"""
        ranked = [item for item in self.rank(requirements, brief) if item.score > 0]
        return [item.agent for item in ranked[: self._max_selected]]
