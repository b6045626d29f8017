"""Shared pytest fixtures for Boostly tests."""

import os
import sys
import tempfile

# Headless Qt and a throwaway data dir, before anything imports boostly.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("BOOSTLY_HOME", tempfile.mkdtemp(prefix="boostly-tests-"))

import pytest

from PyQt6.QtGui import QGuiApplication

from boostly.database.db import configure_engine, init_db
from boostly.session.core import SessionCore
from boostly.session.effects import CompletionEffects
from boostly.session.engine import SessionEngine
from boostly.session.persistence import SessionPersistence

from helpers import EffectLog, FakeClock, MemoryStore


@pytest.fixture(scope="session")
def qapp():
    """A single Qt application instance shared across the entire test run."""
    app = QGuiApplication.instance() or QGuiApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def persistence(store):
    return SessionPersistence(store)


@pytest.fixture
def effect_log():
    return EffectLog()


@pytest.fixture
def effects(effect_log):
    return CompletionEffects(
        reward_calculator=effect_log.reward,
        notifier=effect_log.notify,
        remote_sync=effect_log.sync,
    )


@pytest.fixture
def core(persistence, effects, clock):
    """Fresh pausable SessionCore on an in-memory store and a fake clock."""
    return SessionCore(persistence, effects=effects, clock=clock)


@pytest.fixture
def engine(qapp, core):
    eng = SessionEngine(core)
    yield eng
    eng.shutdown()
