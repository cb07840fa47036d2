"""API 请求/响应数据模型定义，约束任务、编排计划与代理等接口结构。"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from mission_orchestrator.domain.models import AgentProfile, OrchestrationPlan


class MissionCreateRequest(BaseModel):
    """创建任务接口请求模型；priority 不做枚举校验，未知值按 medium 计算。"""
    objective: str
    context: str | None = None
    priority: str = "medium"
    deadline: datetime | None = None
    budget: float | None = None
    constraints: list[str] = Field(default_factory=list)
    expected_outcome: str | None = None


class MissionResponse(BaseModel):
    """任务详情接口响应模型。"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    objective: str
    context: str | None
    priority: str
    deadline: datetime | None
    budget: float | None
    constraints: list[str] | None = Field(default=None, validation_alias=AliasChoices("constraints_json", "constraints"))
    expected_outcome: str | None
    status: str
    error_message: str | None
    created_at: datetime
    updated_at: datetime


class AgentResponse(BaseModel):
    """代理档案接口响应模型。"""
    id: str
    name: str
    description: str
    specialties: list[str]
    complexity: str
    performance: int
    availability: bool
    estimated_time: int

    @classmethod
    def from_profile(cls, agent: AgentProfile) -> AgentResponse:
        return cls(**agent.descriptor())


class WorkflowStepResponse(BaseModel):
    """工作流步骤响应模型。"""
    step: int
    agent_id: str
    kind: str
    action: str
    dependencies: list[int]
    estimated_time: int
    critical: bool


class PlanResponse(BaseModel):
    """编排计划响应模型，代理以完整档案返回。"""
    mission_id: str
    agents: list[AgentResponse]
    workflow: list[WorkflowStepResponse]
    estimated_duration: int
    confidence: float
    efficiency: float
    risks: list[str]
    alternatives: list[list[AgentResponse]]

    @classmethod
    def from_plan(cls, plan: OrchestrationPlan) -> PlanResponse:
        return cls(
            mission_id=plan.mission_id,
            agents=[AgentResponse.from_profile(agent) for agent in plan.agents],
            workflow=[WorkflowStepResponse(**step.to_payload()) for step in plan.workflow],
            estimated_duration=plan.estimated_duration,
            confidence=plan.confidence,
            efficiency=plan.efficiency,
            risks=plan.risks,
            alternatives=[[AgentResponse.from_profile(agent) for agent in group] for group in plan.alternatives],
        )


class OrchestrateResponse(BaseModel):
    """同步编排接口响应模型。"""
    success: bool
    execution_success: bool
    plan: PlanResponse
    recommendations: list[str]


class OrchestrateQueuedResponse(BaseModel):
    """后台编排接口响应模型。"""
    mission_id: str
    status: str
    task_id: str


class StoredPlanResponse(BaseModel):
    """已落库编排计划响应模型，代理只含 ID。"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    mission_id: str
    agents: list[str]
    workflow: list[dict[str, Any]]
    estimated_duration: int
    confidence: float
    efficiency: float
    risks: list[str]
    alternatives: list[list[str]]
    created_at: datetime


class BriefResponse(BaseModel):
    """代理简报响应模型。"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    mission_id: str
    agent: str
    status: str
    content_json: dict[str, Any]
    created_at: datetime


class OrchestrationProgress(BaseModel):
    """简报完成进度。"""
    total_briefs: int
    completed_briefs: int
    progress: float


class OrchestrationStatusResponse(BaseModel):
    """编排状态查询接口响应模型。"""
    success: bool = True
    mission: MissionResponse
    orchestration_plan: StoredPlanResponse | None
    briefs: list[BriefResponse]
    status: OrchestrationProgress
