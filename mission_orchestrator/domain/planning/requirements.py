"""需求分析：基于关键词从任务文本推导六类需求权重，并按优先级缩放。"""

from __future__ import annotations

import re

from mission_orchestrator.domain.enums import RequirementCategory
from mission_orchestrator.domain.models import MissionBrief

RequirementVector = dict[str, float]

KEYWORD_INCREMENT = 3.0

CATEGORY_KEYWORDS: dict[RequirementCategory, tuple[str, ...]] = {
    RequirementCategory.marketing: ("marketing", "stratégie", "campagne"),
    RequirementCategory.technical: ("développement", "technique", "web"),
    RequirementCategory.content: ("contenu", "rédaction", "seo"),
    RequirementCategory.analysis: ("analyse", "data", "performance"),
    RequirementCategory.conversion: ("conversion", "vente", "cta"),
    RequirementCategory.productivity: ("productivité", "optimisation", "processus"),
}

PRIORITY_MULTIPLIERS: dict[str, float] = {
    "low": 0.7,
    "medium": 1.0,
    "high": 1.3,
    "critical": 1.5,
}

MATCH_MODES = ("substring", "token")

_TOKEN_RE = re.compile(r"\w+")


def priority_key(priority: object) -> str:
    """将枚举或字符串优先级统一为小写字符串键。"""
    value = getattr(priority, "value", priority)
    return str(value or "").strip().lower()


def priority_multiplier(priority: object) -> float:
    """未知优先级按 medium 处理，不抛异常。"""
    return PRIORITY_MULTIPLIERS.get(priority_key(priority), 1.0)


class KeywordMatcher:
    """关键词匹配器：默认 substring 模式做子串匹配，token 模式只匹配整词。"""
    def __init__(self, mode: str = "substring") -> None:
        if mode not in MATCH_MODES:
            raise ValueError(f"unsupported keyword match mode: {mode}")
        self.mode = mode

    def matches(self, text: str, keywords: tuple[str, ...]) -> list[str]:
        """返回在文本中命中的关键词（去重，保持关键词表顺序）。"""
        lowered = text.lower()
        if self.mode == "substring":
            return [keyword for keyword in keywords if keyword in lowered]
        tokens = set(_TOKEN_RE.findall(lowered))
        return [keyword for keyword in keywords if keyword in tokens]

    def contains(self, text: str, keyword: str) -> bool:
        return bool(self.matches(text, (keyword,)))


class RequirementAnalyzer:
    """需求分析器，输出每个类别的非负权重。"""
    def __init__(self, matcher: KeywordMatcher | None = None) -> None:
        self._matcher = matcher or KeywordMatcher()

    def analyze(self, brief: MissionBrief) -> RequirementVector:
        text = f"{brief.objective or ''} {brief.context or ''}"
        requirements: RequirementVector = {category.value: 0.0 for category in RequirementCategory}
        for category, keywords in CATEGORY_KEYWORDS.items():
            hits = self._matcher.matches(text, keywords)
            requirements[category.value] += KEYWORD_INCREMENT * len(hits)

        multiplier = priority_multiplier(brief.priority)
        return {key: weight * multiplier for key, weight in requirements.items()}
