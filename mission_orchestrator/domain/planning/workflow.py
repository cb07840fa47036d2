"""工作流构建：按固定模板把选中代理排成有序步骤，依赖只指向已创建的步骤。"""

from __future__ import annotations

from mission_orchestrator.domain.enums import StepKind
from mission_orchestrator.domain.models import AgentProfile, MissionBrief, WorkflowStep
from mission_orchestrator.domain.planning.requirements import KeywordMatcher

ACTION_LABELS: dict[StepKind, str] = {
    StepKind.analysis: "Analyse du contexte et planification stratégique",
    StepKind.development: "Développement et architecture technique",
    StepKind.content: "Création de contenu optimisé",
    StepKind.conversion: "Optimisation des conversions",
    StepKind.validation: "Validation et critique qualité",
}

DEVELOPMENT_TRIGGER = "développement"


def _first_with(agents: list[AgentProfile], *specialties: str) -> AgentProfile | None:
    return next((agent for agent in agents if agent.has_any(*specialties)), None)


class WorkflowBuilder:
    """工作流构建器；agents 需按评分降序传入。"""
    def __init__(self, matcher: KeywordMatcher | None = None) -> None:
        self._matcher = matcher or KeywordMatcher()

    def build(self, agents: list[AgentProfile], brief: MissionBrief) -> list[WorkflowStep]:
        workflow: list[WorkflowStep] = []

        def append(agent: AgentProfile, kind: StepKind, dependencies: list[int], critical: bool) -> WorkflowStep:
            step = WorkflowStep(
                step=len(workflow) + 1,
                agent_id=agent.id,
                kind=kind,
                action=ACTION_LABELS[kind],
                dependencies=dependencies,
                estimated_time=agent.estimated_time,
                critical=critical,
            )
            workflow.append(step)
            return step

        analyst = _first_with(agents, "analyse", "stratégie")
        analysis_step = append(analyst, StepKind.analysis, [], True) if analyst else None
        after_analysis = [analysis_step.step] if analysis_step else []

        developer = _first_with(agents, "développement", "technique")
        if developer and self._matcher.contains(brief.objective or "", DEVELOPMENT_TRIGGER):
            append(developer, StepKind.development, list(after_analysis), True)

        content_step = None
        writer = _first_with(agents, "rédaction", "contenu")
        if writer:
            content_step = append(writer, StepKind.content, list(after_analysis), False)

        closer = _first_with(agents, "conversion", "vente")
        if closer:
            dependencies = after_analysis + ([content_step.step] if content_step else [])
            append(closer, StepKind.conversion, dependencies, False)

        validator = next(
            (agent for agent in agents if "analyse" in agent.specialties and (analyst is None or agent.id != analyst.id)),
            None,
        )
        if validator:
            append(validator, StepKind.validation, [item.step for item in workflow], True)

        return workflow
