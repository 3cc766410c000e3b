"""Global test fixtures and utilities for daily-quests tests"""
import pytest
from datetime import date, timedelta

from daily_quests.memory.snapshot_store import SnapshotStore
from daily_quests.models.progression import ProgressionState, Snapshot
from daily_quests.models.quest import Quest, QuestFrequency, QuestKind
from daily_quests.services.session import QuestSession


# ============================================================================
# Date Fixtures
# ============================================================================

@pytest.fixture
def today():
    """Fixed 'today' so tests never depend on the wall clock"""
    return date(2026, 10, 19)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


# ============================================================================
# Quest Fixtures
# ============================================================================

@pytest.fixture
def make_quest():
    """Factory for Quest instances with sensible defaults"""
    def _make(name="Morning Workout", kind=QuestKind.MAIN, attribute=None,
              frequency=QuestFrequency.NORMAL, done=False):
        return Quest(name=name, kind=kind, attribute=attribute, frequency=frequency, done=done)
    return _make


@pytest.fixture
def sample_quests(make_quest):
    """A small mixed quest list"""
    return [
        make_quest("Morning Workout", QuestKind.MAIN, "physical", QuestFrequency.DAILY),
        make_quest("Meditate", QuestKind.MAIN, "mental", QuestFrequency.NORMAL),
        make_quest("Drink Water", QuestKind.SIDE, "physical", QuestFrequency.DAILY),
        make_quest("Read 20 Pages", QuestKind.SIDE, "studying", QuestFrequency.WEEKLY),
    ]


# ============================================================================
# Storage & Session Fixtures
# ============================================================================

@pytest.fixture
def snapshot_store(tmp_path):
    """SnapshotStore writing into a temporary directory"""
    return SnapshotStore(data_path=tmp_path, storage_key="testQuests")


@pytest.fixture
def seed_snapshot(snapshot_store):
    """Write a snapshot to the temporary store before a session loads it"""
    async def _seed(quests=None, **state):
        snapshot = Snapshot.capture(quests or [], ProgressionState(**state))
        await snapshot_store.save(snapshot)
        return snapshot
    return _seed


@pytest.fixture
def make_session(snapshot_store, today):
    """Factory for sessions with a fixed clock"""
    def _make(clock_date=None, gateway=None):
        return QuestSession(
            gateway=gateway or snapshot_store,
            clock=lambda: clock_date or today,
        )
    return _make


@pytest.fixture
async def loaded_session(make_session, seed_snapshot, today):
    """Empty session already loaded for today"""
    await seed_snapshot(last_active_date=today)
    session = make_session()
    await session.load()
    return session
