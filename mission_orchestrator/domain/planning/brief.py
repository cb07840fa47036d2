"""代理简报渲染：把单个工作流步骤转换为面向代理的指令文档。"""

from __future__ import annotations

from mission_orchestrator.domain.models import AgentProfile, WorkflowStep


def render_brief(agent: AgentProfile, step: WorkflowStep) -> str:
    """生成代理执行某一步骤时使用的简报文本。"""
    dependencies = f"Étapes {', '.join(str(item) for item in step.dependencies)}" if step.dependencies else "Aucune"
    return (
        f"**Mission:** {step.action}\n\n"
        f"**Agent:** {agent.name}\n"
        f"**Étape:** {step.step}\n"
        f"**Temps estimé:** {step.estimated_time} minutes\n"
        f"**Critique:** {'Oui' if step.critical else 'Non'}\n\n"
        "**Instructions spécifiques:**\n"
        f"- Exécute cette étape avec ta spécialité: {', '.join(agent.specialties)}\n"
        f"- Respecte les dépendances: {dependencies}\n"
        "- Livre un résultat de qualité professionnelle\n"
        "- Structure ta réponse de manière claire et exploitable\n\n"
        f"**Objectif:** {step.action}"
    )
