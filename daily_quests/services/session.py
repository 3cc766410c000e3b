"""
QuestSession - quest and progression orchestration

Owns the quest list and the progression state for one user and is the only
place where they change. Every user action:
1. refuses to run until the session is loaded
2. re-evaluates the day boundary (the process may stay open past midnight)
3. mutates the in-memory state
4. mirrors the new snapshot to storage (failures are logged, never raised)
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Union
from uuid import UUID

from daily_quests.exceptions import PersistenceError, SessionNotReadyError
from daily_quests.gamification import (
    DayRollover,
    apply_day_rollover,
    compare_rank_info,
    rank_info_for_xp,
    scaled_xp_amount,
)
from daily_quests.memory.snapshot_store import SnapshotStore
from daily_quests.models.progression import ProgressionState, RankLevel, Snapshot
from daily_quests.models.quest import Quest, QuestKind
from daily_quests.services.quest_store import QuestStore
from daily_quests.utils.datetime_helpers import today_in_timezone

logger = logging.getLogger(__name__)


class QuestSession:
    """
    Session controller for daily quests.

    Responsibilities:
    - Restore the snapshot and run the day rollover before accepting actions
    - Quest CRUD through the QuestStore
    - XP, combo and main-quest bookkeeping on toggle
    - Persisting after every mutation, only once loading has finished
    """

    def __init__(
        self,
        gateway: Optional[SnapshotStore] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize QuestSession.

        Args:
            gateway: Snapshot persistence (defaults to the configured JSON file)
            clock: Returns today's date (defaults to today in QUEST_TIMEZONE)
        """
        self.gateway = gateway or SnapshotStore()
        self.clock = clock or today_in_timezone
        self.store = QuestStore()
        self.state = ProgressionState()
        self._loaded = False
        logger.debug("QuestSession initialized")

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def quests(self) -> list[Quest]:
        return self.store.quests

    @property
    def rank_info(self) -> RankLevel:
        return rank_info_for_xp(self.state.xp)

    def snapshot(self) -> Snapshot:
        return Snapshot.capture(self.store.quests, self.state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> DayRollover:
        """
        Restore the stored snapshot and apply the day rollover.

        Persistence is armed only after this completes, so a save can never
        overwrite a stored snapshot with default state.

        Returns:
            The rollover evaluated against today
        """
        snapshot = await self.gateway.load()
        if snapshot is not None:
            self.store.replace_all(snapshot.quests)
            self.state = snapshot.to_state()
        else:
            self.store.replace_all([])
            self.state = ProgressionState()

        rollover = self._roll_day(self.clock())
        self._loaded = True

        logger.info(
            f"Session loaded: {len(self.store)} quests, {self.state.xp} XP "
            f"({self.rank_info.rank} {self.rank_info.level}), streak {self.state.streak}"
        )

        if rollover.new_day:
            await self.persist()
        return rollover

    async def check_day_rollover(self) -> DayRollover:
        """Re-evaluate the day boundary for a session left open"""
        self._require_loaded("check_day_rollover")
        rollover = self._roll_day(self.clock())
        if rollover.new_day:
            await self.persist()
        return rollover

    async def persist(self) -> bool:
        """
        Mirror the current state to storage.

        Returns:
            True if the snapshot was written
        """
        if not self._loaded:
            logger.debug("Skipping save: session not loaded yet")
            return False

        try:
            await self.gateway.save(self.snapshot())
        except PersistenceError as e:
            logger.warning(f"Save failed, keeping in-memory state: {e.message}")
            return False
        return True

    # ------------------------------------------------------------------
    # Quest CRUD
    # ------------------------------------------------------------------

    async def add_quest(self, name: str, kind, attribute=None, frequency=None) -> Quest:
        await self._begin("add_quest")
        quest = self.store.add(name, kind, attribute, frequency)
        await self.persist()
        return quest

    async def edit_quest(
        self,
        quest_id: Union[UUID, str],
        name: str,
        kind,
        attribute=None,
        frequency=None,
    ) -> Quest:
        await self._begin("edit_quest")
        quest = self.store.edit(quest_id, name, kind, attribute, frequency)
        await self.persist()
        return quest

    async def delete_quest(self, quest_id: Union[UUID, str]) -> Quest:
        await self._begin("delete_quest")
        quest = self.store.delete(quest_id)
        await self.persist()
        return quest

    async def toggle_quest(self, quest_id: Union[UUID, str]) -> Dict[str, Any]:
        """
        Complete or undo a quest and apply its XP effects

        Completing: +XP scaled to the current rank, combo +1; a main quest
        also marks today's main quest as done.
        Undoing: -XP scaled to the current rank (never below 0), combo -1
        (never below 1); the main quest flag clears once no main quest is done.

        Returns:
            {
                'quest': Quest,
                'completed': bool,
                'xp_delta': int,  # signed
                'old_total_xp': int,
                'new_total_xp': int,
                'combo': int,
                'streak': int,
                'rank_changed': bool,
                'leveled_up': bool,
                'old_rank': str,
                'new_rank': str,
                'old_level': int,
                'new_level': int,
                'message': str
            }
        """
        today = await self._begin("toggle_quest")

        old_xp = self.state.xp
        before = rank_info_for_xp(old_xp)
        quest = self.store.toggle(quest_id)

        if quest.done:
            gained = scaled_xp_amount(old_xp, quest.kind, is_gain=True)
            updates = {"xp": old_xp + gained, "combo": self.state.combo + 1}
            if quest.kind == QuestKind.MAIN:
                updates["daily_main_quest_completed"] = True
                updates["last_completed_date"] = today
        else:
            lost = scaled_xp_amount(old_xp, quest.kind, is_gain=False)
            updates = {"xp": max(0, old_xp - lost), "combo": max(1, self.state.combo - 1)}
            if quest.kind == QuestKind.MAIN and not self.store.main_quests_done():
                updates["daily_main_quest_completed"] = False

        self.state = self.state.model_copy(update=updates)
        after = rank_info_for_xp(self.state.xp)
        change = compare_rank_info(before, after)
        xp_delta = self.state.xp - old_xp

        result = {
            "quest": quest,
            "completed": quest.done,
            "xp_delta": xp_delta,
            "old_total_xp": old_xp,
            "new_total_xp": self.state.xp,
            "combo": self.state.combo,
            "streak": self.state.streak,
            **change,
            "message": self._toggle_message(quest, xp_delta, change),
        }

        logger.info(
            f"{'Completed' if quest.done else 'Undid'} {quest.kind.value} quest '{quest.name}': "
            f"{xp_delta:+d} XP, total {self.state.xp} XP, combo {self.state.combo}"
        )
        if change["rank_changed"]:
            logger.info(
                f"Rank changed from {change['old_rank']} {change['old_level']} "
                f"to {change['new_rank']} {change['new_level']}"
            )

        await self.persist()
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_loaded(self, operation: str) -> None:
        if not self._loaded:
            raise SessionNotReadyError(operation)

    async def _begin(self, operation: str) -> date:
        """Gate a user action and roll the day over if midnight has passed"""
        self._require_loaded(operation)
        rollover = await self.check_day_rollover()
        return rollover.state.last_active_date

    def _roll_day(self, today: date) -> DayRollover:
        rollover = apply_day_rollover(self.store.quests, self.state, today)
        if rollover.new_day:
            self.store.replace_all(rollover.quests)
            self.state = rollover.state
        return rollover

    @staticmethod
    def _toggle_message(quest: Quest, xp_delta: int, change: Dict[str, Any]) -> str:
        if quest.done:
            message = f"Quest complete: {quest.name} (+{xp_delta} XP) ⚡"
        else:
            message = f"Quest undone: {quest.name} ({xp_delta} XP)"
        if change["leveled_up"]:
            message += f"\n🎉 {change['new_rank']} {change['new_level']} reached!"
        elif change["leveled_down"]:
            message += f"\n⬇️ Dropped to {change['new_rank']} {change['new_level']}"
        return message
