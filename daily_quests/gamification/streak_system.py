"""
Day Cycle and Streak System

A day has two states relative to the stored last_active_date:
- same day: nothing to do
- new day (including first launch): roll over

Rollover:
- Any main quest done -> streak +1
- Otherwise -> streak reset to 0 and main-quest XP decayed
- Daily quests are reset to not done (weekly and normal quests are kept)
- Combo back to 1, daily main quest flag cleared
- last_active_date set to today
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from uuid import UUID
import logging

from daily_quests.gamification.xp_system import scaled_xp_amount
from daily_quests.models.progression import ProgressionState
from daily_quests.models.quest import Quest, QuestFrequency, QuestKind

logger = logging.getLogger(__name__)


@dataclass
class DayRollover:
    """Outcome of evaluating the day boundary"""
    quests: List[Quest]
    state: ProgressionState
    new_day: bool
    streak_before: int = 0
    streak_after: int = 0
    streak_continued: bool = False
    decay_xp: int = 0
    reset_quest_ids: List[UUID] = field(default_factory=list)
    message: str = ""


def is_new_day(last_active_date: Optional[date], today: date) -> bool:
    """True when the stored day differs from today (a missing date counts as new)"""
    return last_active_date != today


def any_main_quest_done(quests: List[Quest]) -> bool:
    return any(q.kind == QuestKind.MAIN and q.done for q in quests)


def apply_day_rollover(
    quests: List[Quest],
    state: ProgressionState,
    today: date,
) -> DayRollover:
    """
    Evaluate the day boundary and return the resulting quests and state

    Inputs are not modified; new model instances are returned.

    Args:
        quests: Current quest list
        state: Current progression state
        today: The date to evaluate against

    Returns:
        DayRollover with the (possibly unchanged) quests and state
    """
    if not is_new_day(state.last_active_date, today):
        return DayRollover(
            quests=list(quests),
            state=state,
            new_day=False,
            streak_before=state.streak,
            streak_after=state.streak,
        )

    streak_before = state.streak
    xp = state.xp
    decay_xp = 0

    if any_main_quest_done(quests):
        streak = state.streak + 1
        streak_continued = True
        message = f"Streak continues! Day {streak} 🔥"
    else:
        streak = 0
        streak_continued = False
        decay_xp = scaled_xp_amount(xp, QuestKind.MAIN, is_gain=False)
        xp = max(0, xp - decay_xp)
        decay_xp = state.xp - xp
        message = f"No main quest completed. Streak reset, -{decay_xp} XP decay 💀"

    new_quests = []
    reset_ids = []
    for quest in quests:
        if quest.frequency == QuestFrequency.DAILY and quest.done:
            new_quests.append(quest.model_copy(update={"done": False}))
            reset_ids.append(quest.id)
        else:
            new_quests.append(quest)

    new_state = state.model_copy(update={
        "xp": xp,
        "streak": streak,
        "combo": 1,
        "daily_main_quest_completed": False,
        "last_active_date": today,
    })

    logger.info(
        f"Day rollover {state.last_active_date} → {today}: "
        f"streak {streak_before} → {streak}, decay {decay_xp} XP, "
        f"{len(reset_ids)} daily quests reset"
    )

    return DayRollover(
        quests=new_quests,
        state=new_state,
        new_day=True,
        streak_before=streak_before,
        streak_after=streak,
        streak_continued=streak_continued,
        decay_xp=decay_xp,
        reset_quest_ids=reset_ids,
        message=message,
    )
