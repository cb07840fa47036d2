"""内置代理目录：六个静态代理档案，按注册顺序参与评分并决定平分时的先后。"""

from __future__ import annotations

from mission_orchestrator.domain.enums import Complexity
from mission_orchestrator.domain.models import AgentProfile

DEFAULT_AGENTS: tuple[AgentProfile, ...] = (
    AgentProfile(
        id="KarineAI",
        name="Karine - Stratège Marketing",
        description="Spécialiste en stratégie marketing et planification",
        specialties=("stratégie", "marketing", "planification", "analyse", "optimisation", "croissance"),
        complexity=Complexity.advanced,
        performance=92,
        availability=True,
        estimated_time=45,
    ),
    AgentProfile(
        id="HugoAI",
        name="Hugo - Développeur Web",
        description="Expert en développement web et architecture technique",
        specialties=("développement", "architecture", "technique", "web", "optimisation", "intégration"),
        complexity=Complexity.advanced,
        performance=88,
        availability=True,
        estimated_time=60,
    ),
    AgentProfile(
        id="JPBot",
        name="JP - Analyste Critique",
        description="Analyste de données et critique qualité",
        specialties=("analyse", "data", "critique", "qualité", "optimisation", "validation"),
        complexity=Complexity.intermediate,
        performance=85,
        availability=True,
        estimated_time=30,
    ),
    AgentProfile(
        id="ElodieAI",
        name="Élodie - Rédactrice SEO",
        description="Rédactrice SEO et experte en contenu",
        specialties=("rédaction", "seo", "contenu", "communication", "copywriting", "ux"),
        complexity=Complexity.intermediate,
        performance=90,
        availability=True,
        estimated_time=40,
    ),
    AgentProfile(
        id="ClaraLaCloseuse",
        name="Clara - Experte Conversion",
        description="Spécialiste en conversion et optimisation des ventes",
        specialties=("conversion", "vente", "persuasion", "cta", "funnel", "optimisation"),
        complexity=Complexity.advanced,
        performance=87,
        availability=True,
        estimated_time=35,
    ),
    AgentProfile(
        id="FauconLeMaitreFocus",
        name="Faucon - Coach Productivité",
        description="Coach en productivité et optimisation des processus",
        specialties=("productivité", "focus", "optimisation", "efficacité", "organisation", "workflow"),
        complexity=Complexity.intermediate,
        performance=83,
        availability=True,
        estimated_time=25,
    ),
)
