"""仓储测试：使用临时 SQLite 验证任务、事件、简报与计划的持久化。"""

import pytest

from mission_orchestrator.domain.agents.registry import AgentRegistry
from mission_orchestrator.domain.enums import BriefStatus, MissionStatus, StepKind
from mission_orchestrator.domain.models import OrchestrationPlan, WorkflowStep


def _create(repository, mission_id: str, tenant_id: str = "default"):
    return repository.create_mission(
        mission_id=mission_id,
        tenant_id=tenant_id,
        objective="Lancer une campagne",
        context=None,
        priority="medium",
        deadline=None,
        budget=1500.0,
        constraints=["pas de TV"],
        expected_outcome=None,
        created_by="tester",
    )


def _plan(mission_id: str, confidence: float) -> OrchestrationPlan:
    registry = AgentRegistry()
    karine = registry.get("KarineAI")
    elodie = registry.get("ElodieAI")
    return OrchestrationPlan(
        mission_id=mission_id,
        agents=[karine, elodie],
        workflow=[
            WorkflowStep(1, karine.id, StepKind.analysis, "Analyse", [], 45, True),
            WorkflowStep(2, elodie.id, StepKind.content, "Contenu", [1], 40, False),
        ],
        estimated_duration=85,
        confidence=confidence,
        efficiency=2.35,
        risks=[],
        alternatives=[[karine, elodie]],
    )


def test_create_mission_records_pending_and_event(repository) -> None:
    """创建任务后状态为 pending，并写入 mission.created 事件。"""
    mission = _create(repository, "m-1")

    assert mission.status == MissionStatus.pending.value
    stored = repository.get_mission("m-1")
    assert stored.objective == "Lancer une campagne"
    assert stored.constraints_json == ["pas de TV"]
    assert stored.budget == 1500.0
    events = repository.list_events("m-1")
    assert [event.event_type for event in events] == ["mission.created"]


def test_list_missions_filters_by_tenant_and_status(repository) -> None:
    _create(repository, "m-1")
    _create(repository, "m-2")
    _create(repository, "m-3", tenant_id="other")
    repository.set_status("m-2", MissionStatus.failed, error_message="boom")

    assert {item.id for item in repository.list_missions("default")} == {"m-1", "m-2"}
    failed = repository.list_missions("default", status=MissionStatus.failed)
    assert [item.id for item in failed] == ["m-2"]
    assert failed[0].error_message == "boom"
    assert len(repository.list_missions("default", limit=1)) == 1


def test_set_status_emits_event_unless_disabled(repository) -> None:
    _create(repository, "m-1")
    repository.set_status("m-1", MissionStatus.orchestrating, source="api")
    repository.set_status("m-1", MissionStatus.orchestrated, emit_event=False)

    assert repository.get_mission("m-1").status == MissionStatus.orchestrated.value
    events = repository.list_events("m-1")
    assert [(event.event_type, event.status) for event in events] == [
        ("mission.created", "pending"),
        ("mission.status.changed", "orchestrating"),
    ]
    assert [event.id for event in repository.list_events("m-1", after_id=events[0].id)] == [events[1].id]


def test_set_status_unknown_mission_raises(repository) -> None:
    with pytest.raises(KeyError):
        repository.set_status("missing", MissionStatus.failed)


def test_latest_plan_wins(repository) -> None:
    """同一任务多次保存计划时读取最新一条。"""
    _create(repository, "m-1")
    repository.save_plan(_plan("m-1", confidence=90))
    repository.save_plan(_plan("m-1", confidence=95))

    latest = repository.get_latest_plan("m-1")
    assert latest.confidence == 95
    assert latest.agents == ["KarineAI", "ElodieAI"]
    assert latest.alternatives == [["KarineAI", "ElodieAI"]]
    assert latest.workflow[1] == {
        "step": 2,
        "agent_id": "ElodieAI",
        "kind": "content",
        "action": "Contenu",
        "dependencies": [1],
        "estimated_time": 40,
        "critical": False,
    }
    assert repository.get_latest_plan("m-2") is None


def test_brief_lifecycle(repository) -> None:
    _create(repository, "m-1")
    brief = repository.create_brief("m-1", agent="KarineAI", content_json={"step": 1})
    assert brief.status == BriefStatus.queued.value

    repository.set_brief_status(brief.id, BriefStatus.done)
    assert [item.status for item in repository.list_briefs("m-1")] == [BriefStatus.done.value]

    with pytest.raises(KeyError):
        repository.set_brief_status(9999, BriefStatus.failed)


def test_delete_mission_removes_children(repository) -> None:
    """删除任务时一并删除简报、计划与事件。"""
    _create(repository, "m-1")
    repository.create_brief("m-1", agent="KarineAI", content_json={"step": 1})
    repository.save_plan(_plan("m-1", confidence=90))

    assert repository.delete_mission("m-1") is True
    assert repository.get_mission("m-1") is None
    assert repository.list_briefs("m-1") == []
    assert repository.get_latest_plan("m-1") is None
    assert repository.list_events("m-1") == []
    assert repository.delete_mission("m-1") is False
