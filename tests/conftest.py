"""测试公共配置：隔离数据库与日志目录，并提供 SQLite 仓储与固定时钟。"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# 必须在导入 mission_orchestrator.config 之前设置，get_settings 有缓存。
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="mission-orchestrator-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'orchestrator.db'}"
os.environ["LOG_DIR"] = str(_TEST_ROOT / "logs")

from mission_orchestrator.infra.db.models import Base  # noqa: E402
from mission_orchestrator.infra.db.repository import MissionRepository  # noqa: E402

FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def session_factory(tmp_path: Path) -> sessionmaker[Session]:
    engine = create_engine(f"sqlite:///{tmp_path / 'repo.db'}", future=True)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, class_=Session)


@pytest.fixture()
def repository(session_factory: sessionmaker[Session]) -> MissionRepository:
    return MissionRepository(session_factory)


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW
