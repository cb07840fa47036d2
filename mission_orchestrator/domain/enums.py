"""领域枚举定义：统一任务优先级、代理复杂度、任务与简报状态取值。"""

from __future__ import annotations

from enum import Enum


class Priority(str, Enum):
    """任务优先级枚举。"""
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class Complexity(str, Enum):
    """代理能力层级枚举。"""
    basic = "basic"
    intermediate = "intermediate"
    advanced = "advanced"


class RequirementCategory(str, Enum):
    """需求向量的六个固定类别。"""
    marketing = "marketing"
    technical = "technical"
    content = "content"
    analysis = "analysis"
    conversion = "conversion"
    productivity = "productivity"


class StepKind(str, Enum):
    """工作流步骤类型枚举。"""
    analysis = "analysis"
    development = "development"
    content = "content"
    conversion = "conversion"
    validation = "validation"


class MissionStatus(str, Enum):
    """任务生命周期状态枚举。"""
    pending = "pending"
    queued = "queued"
    orchestrating = "orchestrating"
    orchestrated = "orchestrated"
    failed = "failed"
    completed = "completed"


class BriefStatus(str, Enum):
    """代理简报状态枚举。"""
    queued = "queued"
    in_progress = "in_progress"
    done = "done"
    failed = "failed"
