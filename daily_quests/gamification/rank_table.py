"""
Rank Table

Seven ranks of three levels each. XP per level grows exponentially with
the rank position:

    xp_per_level(i) = round(50 * 1.6 ** i)

Iron=50, Bronze=80, Silver=128, Gold=205, Platinum=328, Diamond=524,
Emerald=839 XP per level. Finishing Emerald level 3 takes 6462 XP in total.

Quest rewards are a fixed fraction of the current rank's XP per level:
- Main quest: 40% (at least 10 XP)
- Side quest: 16% (at least 4 XP), so a side quest is worth 0.4 of a main one
"""

import math

from daily_quests.models.quest import QuestKind

RANKS = [
    "Iron",
    "Bronze",
    "Silver",
    "Gold",
    "Platinum",
    "Diamond",
    "Emerald",
]

LEVELS_PER_RANK = 3

BASE_XP_PER_LEVEL = 50
RANK_MULTIPLIER = 1.6

QUEST_XP_FRACTION = {
    QuestKind.MAIN: 0.40,
    QuestKind.SIDE: 0.16,
}

MIN_QUEST_XP = {
    QuestKind.MAIN: 10,
    QuestKind.SIDE: 4,
}

RANK_ICONS = {
    "Iron": "⚙️",
    "Bronze": "🥉",
    "Silver": "🥈",
    "Gold": "🥇",
    "Platinum": "💎",
    "Diamond": "💍",
    "Emerald": "👑",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up"""
    return int(math.floor(value + 0.5))


def xp_per_level(rank_index: int) -> int:
    """XP needed for one level inside the rank at rank_index"""
    if not 0 <= rank_index < len(RANKS):
        raise ValueError(f"Rank index {rank_index} outside 0..{len(RANKS) - 1}")
    return round_half_up(BASE_XP_PER_LEVEL * RANK_MULTIPLIER ** rank_index)


def xp_per_rank(rank_index: int) -> int:
    """XP needed to clear every level of a rank"""
    return xp_per_level(rank_index) * LEVELS_PER_RANK


def total_table_xp() -> int:
    """XP needed to reach the last level of the last rank and fill it"""
    return sum(xp_per_rank(i) for i in range(len(RANKS)))


def xp_to_reach(total_levels: int) -> int:
    """Cumulative XP at which the given number of completed levels is reached"""
    total_levels = max(0, min(total_levels, len(RANKS) * LEVELS_PER_RANK))
    full_ranks, extra_levels = divmod(total_levels, LEVELS_PER_RANK)
    xp = sum(xp_per_rank(i) for i in range(full_ranks))
    if extra_levels:
        xp += xp_per_level(full_ranks) * extra_levels
    return xp


def rank_icon(rank: str) -> str:
    return RANK_ICONS.get(rank, "🏅")
