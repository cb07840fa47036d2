"""日志上下文：基于 contextvars 透传 request/mission/task 标识。"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Iterator

_UNSET = object()

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": ContextVar("log_request_id", default=None),
    "mission_id": ContextVar("log_mission_id", default=None),
    "task_id": ContextVar("log_task_id", default=None),
}

CONTEXT_KEYS = tuple(_CONTEXT_VARS)


def get_log_context() -> dict[str, str | None]:
    """返回当前协程/线程下的日志上下文字段。"""
    return {key: var.get() for key, var in _CONTEXT_VARS.items()}


@contextmanager
def bind_log_context(
    *,
    request_id: str | None | object = _UNSET,
    mission_id: str | None | object = _UNSET,
    task_id: str | None | object = _UNSET,
) -> Iterator[None]:
    """在上下文范围内绑定日志字段，并在退出时自动恢复。"""
    values = {"request_id": request_id, "mission_id": mission_id, "task_id": task_id}
    tokens: list[tuple[ContextVar[Any], Token[Any]]] = []
    for key, value in values.items():
        if value is not _UNSET:
            var = _CONTEXT_VARS[key]
            tokens.append((var, var.set(value)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
