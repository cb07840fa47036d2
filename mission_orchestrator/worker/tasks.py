"""异步任务定义：后台编排任务，数据库连接类异常按退避策略重试。"""

from __future__ import annotations

import logging

from sqlalchemy.exc import OperationalError

from mission_orchestrator.application.container import get_mission_service
from mission_orchestrator.application.service import MissionService
from mission_orchestrator.infra.logging.context import bind_log_context
from mission_orchestrator.worker.celery_app import celery_app

MAX_RETRIES = 2

logger = logging.getLogger(__name__)


def _abandon(service: MissionService, mission_id: str, exc: BaseException) -> None:
    # 放弃后任务不能停留在 orchestrating，否则无法再次入队。
    try:
        service.mark_failed(mission_id, str(exc) or type(exc).__name__)
    except Exception as mark_exc:
        logger.exception(
            "worker task could not mark mission failed",
            extra={
                "event": "orchestration.task.mark_failed.failed",
                "external_service": "database",
                "error_type": type(mark_exc).__name__,
                "error": str(mark_exc),
            },
        )


@celery_app.task(bind=True, name="mission_orchestrator.worker.tasks.run_orchestration_task")
def run_orchestration_task(self, mission_id: str) -> dict[str, object]:
    """执行任务编排与简报落地，返回结果摘要；重试耗尽或其他异常时标记任务失败。"""
    with bind_log_context(mission_id=mission_id, task_id=self.request.id):
        logger.info(
            "worker task started",
            extra={"event": "orchestration.task.started", "retry": self.request.retries},
        )
        service = get_mission_service()
        try:
            result, executed = service.orchestrate_mission(mission_id)
        except OperationalError as exc:
            if self.request.retries >= MAX_RETRIES:
                logger.error(
                    "worker task retries exhausted",
                    extra={
                        "event": "orchestration.task.exhausted",
                        "retry": self.request.retries,
                        "external_service": "database",
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
                _abandon(service, mission_id, exc)
                raise
            countdown = 30 if self.request.retries == 0 else 120
            logger.warning(
                "worker task transient database error",
                extra={
                    "event": "orchestration.task.retrying",
                    "retry": self.request.retries,
                    "external_service": "database",
                    "payload_preview": {"countdown": countdown},
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise self.retry(exc=exc, max_retries=MAX_RETRIES, countdown=countdown)
        except Exception as exc:
            logger.exception(
                "worker task failed",
                extra={"event": "orchestration.task.failed", "error_type": type(exc).__name__, "error": str(exc)},
            )
            _abandon(service, mission_id, exc)
            raise
        logger.info(
            "worker task finished",
            extra={"event": "orchestration.task.succeeded", "payload_preview": {"success": result.success}},
        )
        return {"mission_id": mission_id, "success": result.success, "executed": executed, "error": result.error}
