"""日志组件测试：验证脱敏、预览截断、DEBUG 放行与上下文绑定。"""

import json
import logging

from mission_orchestrator.infra.logging.context import bind_log_context, get_log_context
from mission_orchestrator.infra.logging.setup import (
    DebugRoutingFilter,
    StructuredJsonFormatter,
    redact_text,
    render_payload_preview,
)


def _record(name: str, level: int, **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 1, "message", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_redact_text_masks_credentials() -> None:
    assert redact_text("password=hunter2 ok", "basic") == "password=*** ok"
    assert redact_text("password=hunter2", "off") == "password=hunter2"
    assert redact_text(None, "basic") is None


def test_payload_preview_is_truncated() -> None:
    preview = render_payload_preview({"objective": "x" * 50}, max_chars=20, redaction_mode="basic")
    assert preview.endswith("...(truncated)")
    assert len(preview) == 20 + len("...(truncated)")


def test_debug_routing_filter_allows_listed_modules_and_missions() -> None:
    """默认级别以下的 DEBUG 只对白名单模块或任务放行。"""
    routing = DebugRoutingFilter(
        min_level=logging.INFO,
        debug_modules={"mission_orchestrator.domain"},
        debug_mission_ids={"m-debug"},
    )
    assert routing.filter(_record("mission_orchestrator.api", logging.INFO))
    assert routing.filter(_record("mission_orchestrator.domain.planning", logging.DEBUG))
    assert routing.filter(_record("mission_orchestrator.api", logging.DEBUG, mission_id="m-debug"))
    assert not routing.filter(_record("mission_orchestrator.api", logging.DEBUG, mission_id="m-other"))


def test_bind_log_context_restores_previous_values() -> None:
    with bind_log_context(mission_id="m-1", task_id="t-1"):
        assert get_log_context()["mission_id"] == "m-1"
        with bind_log_context(mission_id="m-2"):
            assert get_log_context()["mission_id"] == "m-2"
            assert get_log_context()["task_id"] == "t-1"
        assert get_log_context()["mission_id"] == "m-1"
    assert get_log_context().get("mission_id") is None


def test_formatter_emits_json_line_with_context() -> None:
    formatter = StructuredJsonFormatter(
        service="mission-orchestrator",
        process_role="api",
        redaction_mode="basic",
        payload_preview_chars=100,
    )
    with bind_log_context(request_id="req-1"):
        line = formatter.format(_record("mission_orchestrator.api", logging.INFO, event="mission.created", duration_ms="12.5"))

    entry = json.loads(line)
    assert entry["service"] == "mission-orchestrator"
    assert entry["request_id"] == "req-1"
    assert entry["event"] == "mission.created"
    assert entry["duration_ms"] == 12.5
