from __future__ import annotations

import pytest

from talenttrack.common.error_logger import ErrorLogger
from talenttrack.config import load_settings
from talenttrack.container import build_container
from talenttrack.database.connection import ConnectionConfig, ConnectionManager

from fakes import RecordingSink, RecordingSleep


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    return ConnectionConfig(database=":memory:", dialect="sqlite")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def db(sqlite_config, sink, sleep) -> ConnectionManager:
    manager = ConnectionManager(sqlite_config, error_logger=sink, sleep=sleep)
    yield manager
    manager.close()


@pytest.fixture
def synced_db(db) -> ConnectionManager:
    db.sync()
    return db


@pytest.fixture
def settings():
    return load_settings("talenttrack.config.testing")


@pytest.fixture
def container(settings, tmp_path, sleep):
    c = build_container(
        settings,
        sleep=sleep,
        error_logger=ErrorLogger(tmp_path / "logs"),
    )
    yield c
    c.db.close()
