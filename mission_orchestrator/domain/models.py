"""领域数据结构定义：代理档案、任务简述、工作流步骤与编排计划等值对象。"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from mission_orchestrator.domain.enums import Complexity, StepKind


@dataclass(frozen=True, slots=True)
class AgentProfile:
    """静态代理档案，进程启动时定义，运行期间只读。"""
    id: str
    name: str
    description: str
    specialties: tuple[str, ...]
    complexity: Complexity
    performance: int  # 0-100
    availability: bool
    estimated_time: int  # minutes

    def has_any(self, *specialties: str) -> bool:
        return any(item in self.specialties for item in specialties)

    def descriptor(self) -> dict[str, Any]:
        """返回可直接序列化的代理描述。"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "specialties": list(self.specialties),
            "complexity": self.complexity.value,
            "performance": self.performance,
            "availability": self.availability,
            "estimated_time": self.estimated_time,
        }


@dataclass(slots=True)
class MissionBrief:
    """单次编排请求的输入，由调用方构造，编排器不保留。"""
    objective: str
    context: str | None = None
    priority: str = "medium"
    deadline: datetime | None = None
    budget: float | None = None
    constraints: list[str] = field(default_factory=list)
    expected_outcome: str | None = None


@dataclass(slots=True)
class WorkflowStep:
    """编排计划中的单个步骤，创建后不再修改。"""
    step: int
    agent_id: str
    kind: StepKind
    action: str
    dependencies: list[int]
    estimated_time: int
    critical: bool

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["kind"] = self.kind.value
        return payload


@dataclass(slots=True)
class ScoredAgent:
    """带评分的代理，用于排序与解释选择结果。"""
    agent: AgentProfile
    score: float


@dataclass(slots=True)
class PlanMetrics:
    """计划整体指标：总时长、置信度与效率。"""
    total_time: int
    confidence: float
    efficiency: float


@dataclass(slots=True)
class OrchestrationPlan:
    """编排输出聚合：选中代理、工作流、指标、风险与备选方案。"""
    mission_id: str
    agents: list[AgentProfile]
    workflow: list[WorkflowStep]
    estimated_duration: int
    confidence: float
    efficiency: float
    risks: list[str]
    alternatives: list[list[AgentProfile]]

    def agent(self, agent_id: str) -> AgentProfile | None:
        return next((item for item in self.agents if item.id == agent_id), None)

    def to_payload(self) -> dict[str, Any]:
        """转换为落库用的 JSON 结构，代理只保留 ID。"""
        return {
            "mission_id": self.mission_id,
            "agents": [item.id for item in self.agents],
            "workflow": [step.to_payload() for step in self.workflow],
            "estimated_duration": self.estimated_duration,
            "confidence": self.confidence,
            "efficiency": self.efficiency,
            "risks": list(self.risks),
            "alternatives": [[item.id for item in group] for group in self.alternatives],
        }


@dataclass(slots=True)
class OrchestrationResult:
    """编排调用结果；失败时只携带错误信息，不返回部分计划。"""
    success: bool
    plan: OrchestrationPlan | None = None
    error: str | None = None
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PlanningThresholds:
    """风险、备选与建议规则使用的阈值。"""
    max_selected_agents: int = 4
    recommend_split_duration_minutes: int = 120
    recommend_min_confidence: float = 80
    recommend_max_risks: int = 2
    critical_min_agents: int = 3
    risk_max_critical_steps: int = 2
    risk_min_agent_performance: int = 80
    expert_min_performance: int = 85
