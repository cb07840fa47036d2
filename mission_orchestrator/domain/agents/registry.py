"""代理注册中心：管理代理档案注册、查询与描述信息汇总。"""

from __future__ import annotations

from collections.abc import Iterable

from mission_orchestrator.domain.agents.catalog import DEFAULT_AGENTS
from mission_orchestrator.domain.models import AgentProfile


class AgentRegistry:
    """代理注册中心，保持插入顺序，构造完成后只读使用。"""
    def __init__(self, agents: Iterable[AgentProfile] | None = None) -> None:
        self._agents: dict[str, AgentProfile] = {}
        for agent in DEFAULT_AGENTS if agents is None else agents:
            self.register(agent)

    def register(self, agent: AgentProfile) -> None:
        """注册代理档案；同 ID 重复注册时覆盖原档案。"""
        self._agents[agent.id] = agent

    def get(self, agent_id: str) -> AgentProfile:
        """按代理 ID 获取档案。"""
        try:
            return self._agents[agent_id]
        except KeyError as exc:
            raise KeyError(f"unknown agent_id: {agent_id}") from exc

    def all(self) -> list[AgentProfile]:
        """按注册顺序返回全部代理。"""
        return list(self._agents.values())

    def list_descriptors(self) -> list[dict[str, object]]:
        return [agent.descriptor() for agent in self._agents.values()]

    def __len__(self) -> int:
        return len(self._agents)
