"""仓储实现：封装任务生命周期、代理简报、编排计划与事件流的持久化操作。"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from mission_orchestrator.domain.enums import BriefStatus, MissionStatus
from mission_orchestrator.domain.models import OrchestrationPlan
from mission_orchestrator.infra.db.models import BriefORM, MissionEventORM, MissionORM, OrchestrationPlanORM


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MissionRepository:
    """任务仓储实现，封装数据库读写与状态流转。"""
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create_mission(
        self,
        *,
        mission_id: str,
        tenant_id: str,
        objective: str,
        context: str | None,
        priority: str,
        deadline: datetime | None,
        budget: float | None,
        constraints: list[str] | None,
        expected_outcome: str | None,
        created_by: str,
    ) -> MissionORM:
        """在一个事务内创建任务与首条事件。"""
        with self._session_factory.begin() as db:
            mission = MissionORM(
                id=mission_id,
                tenant_id=tenant_id,
                created_by=created_by,
                objective=objective,
                context=context,
                priority=priority,
                deadline=deadline,
                budget=budget,
                constraints_json=constraints,
                expected_outcome=expected_outcome,
                status=MissionStatus.pending.value,
            )
            db.add(mission)
            db.flush()
            db.add(
                MissionEventORM(
                    mission_id=mission.id,
                    status=MissionStatus.pending.value,
                    source="api",
                    event_type="mission.created",
                    message="mission created",
                    payload={"priority": priority},
                )
            )
            db.flush()
            return mission

    def get_mission(self, mission_id: str) -> MissionORM | None:
        """按主键查询任务。"""
        with self._session_factory() as db:
            return db.get(MissionORM, mission_id)

    def list_missions(
        self,
        tenant_id: str,
        *,
        status: MissionStatus | None = None,
        limit: int = 100,
    ) -> list[MissionORM]:
        """按租户查询任务列表，可按状态过滤，按创建时间倒序。"""
        with self._session_factory() as db:
            stmt = select(MissionORM).where(MissionORM.tenant_id == tenant_id)
            if status:
                stmt = stmt.where(MissionORM.status == status.value)
            stmt = stmt.order_by(MissionORM.created_at.desc()).limit(limit)
            return list(db.execute(stmt).scalars().all())

    def set_status(
        self,
        mission_id: str,
        status: MissionStatus,
        *,
        error_message: str | None = None,
        source: str = "worker",
        emit_event: bool = True,
    ) -> None:
        """更新任务状态，并按需写入状态变更事件。"""
        with self._session_factory.begin() as db:
            mission = db.get(MissionORM, mission_id)
            if mission is None:
                raise KeyError(f"mission not found: {mission_id}")
            mission.status = status.value
            mission.error_message = error_message
            mission.updated_at = utcnow()
            db.add(mission)
            if emit_event:
                db.add(
                    MissionEventORM(
                        mission_id=mission_id,
                        status=status.value,
                        source=source,
                        event_type="mission.status.changed",
                        message=status.value,
                    )
                )

    def delete_mission(self, mission_id: str) -> bool:
        """删除任务及其简报、计划与事件；任务不存在时返回 False。"""
        with self._session_factory.begin() as db:
            mission = db.get(MissionORM, mission_id)
            if mission is None:
                return False
            # SQLite 默认不启用外键级联，这里显式清理子表。
            for model in (BriefORM, OrchestrationPlanORM, MissionEventORM):
                db.execute(delete(model).where(model.mission_id == mission_id))
            db.delete(mission)
            return True

    def add_event(
        self,
        mission_id: str,
        *,
        source: str,
        event_type: str,
        status: str | None = None,
        message: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> MissionEventORM:
        """写入单条任务事件。"""
        with self._session_factory.begin() as db:
            event = MissionEventORM(
                mission_id=mission_id,
                status=status,
                source=source,
                event_type=event_type,
                message=message,
                payload=payload,
            )
            db.add(event)
            db.flush()
            db.refresh(event)
            return event

    def list_events(self, mission_id: str, after_id: int = 0, limit: int = 200) -> list[MissionEventORM]:
        """按游标分页查询事件流。"""
        with self._session_factory() as db:
            stmt = (
                select(MissionEventORM)
                .where(MissionEventORM.mission_id == mission_id, MissionEventORM.id > after_id)
                .order_by(MissionEventORM.id.asc())
                .limit(limit)
            )
            return list(db.execute(stmt).scalars().all())

    def create_brief(
        self,
        mission_id: str,
        *,
        agent: str,
        content_json: dict[str, Any],
        status: BriefStatus = BriefStatus.queued,
    ) -> BriefORM:
        """为某个代理写入一条待执行简报。"""
        with self._session_factory.begin() as db:
            brief = BriefORM(
                mission_id=mission_id,
                agent=agent,
                content_json=content_json,
                status=status.value,
            )
            db.add(brief)
            db.flush()
            db.refresh(brief)
            return brief

    def list_briefs(self, mission_id: str) -> list[BriefORM]:
        """按创建顺序列出任务的全部简报。"""
        with self._session_factory() as db:
            stmt = (
                select(BriefORM)
                .where(BriefORM.mission_id == mission_id)
                .order_by(BriefORM.created_at.asc(), BriefORM.id.asc())
            )
            return list(db.execute(stmt).scalars().all())

    def set_brief_status(self, brief_id: int, status: BriefStatus) -> None:
        with self._session_factory.begin() as db:
            brief = db.get(BriefORM, brief_id)
            if brief is None:
                raise KeyError(f"brief not found: {brief_id}")
            brief.status = status.value
            brief.updated_at = utcnow()
            db.add(brief)

    def save_plan(self, plan: OrchestrationPlan) -> OrchestrationPlanORM:
        """保存编排计划快照；同一任务可保存多次，读取时取最新一条。"""
        payload = plan.to_payload()
        with self._session_factory.begin() as db:
            row = OrchestrationPlanORM(
                mission_id=plan.mission_id,
                agents=payload["agents"],
                workflow=payload["workflow"],
                estimated_duration=payload["estimated_duration"],
                confidence=payload["confidence"],
                efficiency=payload["efficiency"],
                risks=payload["risks"],
                alternatives=payload["alternatives"],
            )
            db.add(row)
            db.flush()
            db.refresh(row)
            return row

    def get_latest_plan(self, mission_id: str) -> OrchestrationPlanORM | None:
        with self._session_factory() as db:
            stmt = (
                select(OrchestrationPlanORM)
                .where(OrchestrationPlanORM.mission_id == mission_id)
                .order_by(OrchestrationPlanORM.id.desc())
                .limit(1)
            )
            return db.execute(stmt).scalars().first()
