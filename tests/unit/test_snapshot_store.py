"""Unit tests for snapshot persistence (daily_quests/memory/snapshot_store.py)"""
import json
import pytest
from datetime import date
from uuid import UUID

from daily_quests.exceptions import PersistenceError, SnapshotDecodeError
from daily_quests.memory.snapshot_store import SnapshotStore
from daily_quests.models.progression import ProgressionState, Snapshot
from daily_quests.models.quest import QuestAttribute, QuestFrequency, QuestKind


# ============================================================================
# Round Trip Tests
# ============================================================================

@pytest.mark.asyncio
async def test_save_then_load_round_trip(snapshot_store, sample_quests, today):
    """Test a saved snapshot loads back equal"""
    sample_quests[0] = sample_quests[0].model_copy(update={"done": True})
    state = ProgressionState(
        xp=777, streak=5, combo=3,
        last_completed_date=today,
        daily_main_quest_completed=True,
        last_active_date=today,
    )
    snapshot = Snapshot.capture(sample_quests, state)

    await snapshot_store.save(snapshot)
    loaded = await snapshot_store.load()

    assert loaded == snapshot
    assert loaded.to_state() == state


@pytest.mark.asyncio
async def test_document_uses_camel_case_keys(snapshot_store, sample_quests, today):
    """Test the stored document layout"""
    state = ProgressionState(xp=10, last_active_date=today)
    await snapshot_store.save(Snapshot.capture(sample_quests[:1], state))

    document = json.loads(snapshot_store.snapshot_path.read_text())

    assert set(document) == {
        "quests", "xp", "streak", "combo",
        "lastCompletedDate", "dailyMainQuestCompleted", "lastActiveDate",
    }
    assert document["lastActiveDate"] == "2026-10-19"
    assert document["lastCompletedDate"] is None
    quest = document["quests"][0]
    assert quest["type"] == "main"
    assert quest["attribute"] == "physical"
    assert quest["frequency"] == "daily"
    assert quest["done"] is False


@pytest.mark.asyncio
async def test_save_creates_directory(tmp_path):
    """Test the data directory is created on first save"""
    store = SnapshotStore(data_path=tmp_path / "nested" / "dir", storage_key="quests")

    await store.save(Snapshot())

    assert store.snapshot_path.exists()
    assert not store.snapshot_path.with_suffix(".json.tmp").exists()


@pytest.mark.asyncio
async def test_clear_removes_snapshot(snapshot_store):
    """Test clearing storage removes the document"""
    await snapshot_store.save(Snapshot(xp=5))

    await snapshot_store.clear()

    assert await snapshot_store.load() is None


# ============================================================================
# Missing & Malformed Data Tests
# ============================================================================

@pytest.mark.asyncio
async def test_load_missing_returns_none(snapshot_store):
    """Test no stored document means no snapshot"""
    assert await snapshot_store.load() is None


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    "{not json",
    "[1, 2, 3]",
    '{"xp": "lots"}',
    '{"quests": [{"name": "Run"}]}',
    "",
])
async def test_load_malformed_returns_none(snapshot_store, payload):
    """Test corrupt documents fall back to defaults"""
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text(payload)

    assert await snapshot_store.load() is None


def test_read_snapshot_raises_decode_error(snapshot_store):
    """Test the strict reader reports malformed content"""
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text("{not json")

    with pytest.raises(SnapshotDecodeError):
        snapshot_store.read_snapshot()


@pytest.mark.asyncio
async def test_load_null_document(snapshot_store):
    """Test a stored null behaves like no snapshot"""
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text("null")

    assert await snapshot_store.load() is None


@pytest.mark.asyncio
async def test_load_fills_missing_fields(snapshot_store):
    """Test absent fields take their defaults"""
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text('{"xp": 42}')

    snapshot = await snapshot_store.load()

    assert snapshot.xp == 42
    assert snapshot.quests == []
    assert snapshot.streak == 0
    assert snapshot.combo == 1
    assert snapshot.last_completed_date is None
    assert snapshot.daily_main_quest_completed is False
    assert snapshot.last_active_date is None


@pytest.mark.asyncio
async def test_load_legacy_document(snapshot_store):
    """Test documents written by the browser version load"""
    legacy = {
        "quests": [
            {"name": "Test Quest 1", "type": "main", "attribute": "physical",
             "frequency": "daily", "done": False},
            {"name": "Test Quest 2", "type": "side", "attribute": "mental",
             "frequency": "weekly", "done": True},
        ],
        "xp": 100,
        "streak": 5,
        "combo": 3,
        "lastCompletedDate": "Mon Oct 19 2026",
        "dailyMainQuestCompleted": True,
        "lastActiveDate": "Sun Oct 18 2026",
    }
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text(json.dumps(legacy))

    snapshot = await snapshot_store.load()

    assert len(snapshot.quests) == 2
    assert isinstance(snapshot.quests[0].id, UUID)
    assert snapshot.quests[0].id != snapshot.quests[1].id
    assert snapshot.quests[0].kind == QuestKind.MAIN
    assert snapshot.quests[1].attribute == QuestAttribute.MENTAL
    assert snapshot.quests[1].frequency == QuestFrequency.WEEKLY
    assert snapshot.last_completed_date == date(2026, 10, 19)
    assert snapshot.last_active_date == date(2026, 10, 18)


@pytest.mark.asyncio
async def test_load_clamps_out_of_range_values(snapshot_store):
    """Test negative XP/streak and zero combo are clamped on load"""
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text('{"xp": -50, "streak": -1, "combo": 0}')

    snapshot = await snapshot_store.load()

    assert snapshot.xp == 0
    assert snapshot.streak == 0
    assert snapshot.combo == 1


@pytest.mark.asyncio
async def test_load_null_fields_take_defaults(snapshot_store):
    """Test a null field does not discard the rest of the snapshot"""
    document = {
        "quests": [{"name": "Run", "type": "main", "done": True}],
        "xp": 300,
        "streak": 4,
        "combo": None,
        "lastCompletedDate": "2026-10-18",
        "dailyMainQuestCompleted": None,
        "lastActiveDate": "2026-10-18",
    }
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text(json.dumps(document))

    snapshot = await snapshot_store.load()

    assert snapshot is not None
    assert [quest.name for quest in snapshot.quests] == ["Run"]
    assert snapshot.xp == 300
    assert snapshot.streak == 4
    assert snapshot.combo == 1
    assert snapshot.daily_main_quest_completed is False


@pytest.mark.asyncio
async def test_load_null_quests_and_counters(snapshot_store):
    """Test null quests, xp and streak read as empty and zero"""
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text(
        '{"quests": null, "xp": null, "streak": null, "lastActiveDate": "2026-10-18"}'
    )

    snapshot = await snapshot_store.load()

    assert snapshot.quests == []
    assert snapshot.xp == 0
    assert snapshot.streak == 0
    assert snapshot.last_active_date == date(2026, 10, 18)


@pytest.mark.asyncio
async def test_load_drops_duplicate_quest_names(snapshot_store):
    """Test later quests sharing a name (ignoring case) are dropped on load"""
    document = {
        "quests": [
            {"name": "Run", "type": "main"},
            {"name": "run", "type": "side"},
            {"name": "Read", "type": "side"},
        ],
    }
    snapshot_store.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_store.snapshot_path.write_text(json.dumps(document))

    snapshot = await snapshot_store.load()

    assert [quest.name for quest in snapshot.quests] == ["Run", "Read"]
    assert snapshot.quests[0].kind == QuestKind.MAIN


# ============================================================================
# Write Failure Tests
# ============================================================================

@pytest.mark.asyncio
async def test_save_failure_raises_persistence_error(tmp_path):
    """Test unwritable storage raises PersistenceError"""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = SnapshotStore(data_path=blocker, storage_key="quests")

    with pytest.raises(PersistenceError):
        await store.save(Snapshot())
