"""
XP and Ranking System

Maps cumulative XP to rank/level and sizes every XP change.

Leveling Curve: see rank_table (Iron 50 XP/level up to Emerald 839 XP/level,
3 levels per rank, capped at Emerald level 3).

XP Change Rules:
- Completing a quest: +40% (main) or +16% (side) of the current rank's XP per level
- Undoing a quest: the same amount, computed at the XP held when undoing
- Daily decay (no main quest completed): the main-quest amount
- Minimums: 10 XP (main), 4 XP (side)
"""

from typing import Any, Dict, Union
import logging

from daily_quests.gamification.rank_table import (
    LEVELS_PER_RANK,
    MIN_QUEST_XP,
    QUEST_XP_FRACTION,
    RANKS,
    round_half_up,
    xp_per_level,
)
from daily_quests.models.progression import RankLevel
from daily_quests.models.quest import QuestKind

logger = logging.getLogger(__name__)


def rank_info_for_xp(xp: int) -> RankLevel:
    """
    Calculate rank and level from cumulative XP

    Walks the ranks from Iron, consuming each whole rank while the remaining
    XP covers it, then counts full levels inside the first rank it cannot
    finish. XP beyond the table stays at Emerald level 3.
    """
    remaining = max(0, int(xp))
    total_levels = 0

    for rank_index, rank in enumerate(RANKS):
        per_level = xp_per_level(rank_index)
        rank_xp = per_level * LEVELS_PER_RANK

        if remaining >= rank_xp:
            remaining -= rank_xp
            total_levels += LEVELS_PER_RANK
            continue

        levels_in_rank = remaining // per_level
        total_levels += levels_in_rank
        xp_into_level = remaining - levels_in_rank * per_level

        return RankLevel(
            rank=rank,
            rank_index=rank_index,
            level=levels_in_rank + 1,
            total_levels=total_levels,
            xp_into_level=xp_into_level,
            xp_for_level=per_level,
            xp_to_next_level=per_level - xp_into_level,
        )

    # Beyond the table: clamp to the final rank
    last_index = len(RANKS) - 1
    per_level = xp_per_level(last_index)
    return RankLevel(
        rank=RANKS[last_index],
        rank_index=last_index,
        level=LEVELS_PER_RANK,
        total_levels=total_levels,
        xp_into_level=per_level,
        xp_for_level=per_level,
        xp_to_next_level=0,
        is_max_rank=True,
    )


def scaled_xp_amount(
    current_xp: int,
    quest_kind: Union[QuestKind, str],
    is_gain: bool = True,
) -> int:
    """
    Calculate the XP a quest is worth at the current XP

    Gains, losses and decay all use this function so that undoing a quest
    at the same baseline removes exactly what completing it added.

    Args:
        current_xp: XP held before the change
        quest_kind: main or side
        is_gain: direction of the change (only used for logging)

    Returns:
        Positive XP amount
    """
    kind = QuestKind(quest_kind)
    rank_info = rank_info_for_xp(current_xp)
    base_xp = xp_per_level(rank_info.rank_index)

    amount = round_half_up(base_xp * QUEST_XP_FRACTION[kind])
    amount = max(amount, MIN_QUEST_XP[kind])

    logger.debug(
        f"{'Gain' if is_gain else 'Loss'} for {kind.value} quest at {current_xp} XP "
        f"({rank_info.rank} {rank_info.level}): {amount} XP"
    )
    return amount


def compare_rank_info(before: RankLevel, after: RankLevel) -> Dict[str, Any]:
    """
    Describe how rank/level moved between two RankLevel values

    Returns:
        {
            'rank_changed': bool,  # rank or level differs
            'leveled_up': bool,
            'leveled_down': bool,
            'ranked_up': bool,
            'old_rank': str,
            'new_rank': str,
            'old_level': int,
            'new_level': int
        }
    """
    return {
        "rank_changed": (before.rank, before.level) != (after.rank, after.level),
        "leveled_up": after.total_levels > before.total_levels,
        "leveled_down": after.total_levels < before.total_levels,
        "ranked_up": after.rank_index > before.rank_index,
        "old_rank": before.rank,
        "new_rank": after.rank,
        "old_level": before.level,
        "new_level": after.level,
    }
