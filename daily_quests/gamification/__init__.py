"""
Progression rules for daily quests

- Rank table and XP curve
- XP sizing for quest completion, undo and decay
- Day rollover (streaks, decay, daily quest reset)
"""

from daily_quests.gamification.xp_system import rank_info_for_xp, scaled_xp_amount, compare_rank_info
from daily_quests.gamification.streak_system import apply_day_rollover, is_new_day, DayRollover

__all__ = [
    "rank_info_for_xp",
    "scaled_xp_amount",
    "compare_rank_info",
    "apply_day_rollover",
    "is_new_day",
    "DayRollover",
]
