"""Plain-text formatting for the command line"""
from typing import Dict, List

from daily_quests.gamification.rank_table import rank_icon
from daily_quests.gamification.streak_system import DayRollover
from daily_quests.models.progression import ProgressionState, RankLevel
from daily_quests.models.quest import Quest, QuestAttribute, QuestKind

ATTRIBUTE_EMOJI = {
    QuestAttribute.PHYSICAL: "🏃",
    QuestAttribute.MENTAL: "🧘",
    QuestAttribute.CAREER: "💼",
    QuestAttribute.STUDYING: "📚",
}


def progress_bar(current: int, total: int, width: int = 20) -> str:
    if total <= 0:
        return "[" + "█" * width + "]"
    filled = min(width, max(0, (current * width) // total))
    return "[" + "█" * filled + "░" * (width - filled) + "]"


def attribute_breakdown(quests: List[Quest]) -> Dict[str, int]:
    """
    Count completed quests per attribute

    Returns:
        {attribute value: completed count} for every attribute
    """
    counts = {attribute.value: 0 for attribute in QuestAttribute}
    for quest in quests:
        if quest.done and quest.attribute is not None:
            counts[quest.attribute.value] += 1
    return counts


def format_rank_card(state: ProgressionState, rank_info: RankLevel) -> str:
    """
    Format rank, XP progress, streak and combo

    Example:
        🥉 Bronze 2 (4 levels)
        [██████░░░░░░░░░░░░░░] 25/80 XP
        🔥 Streak: 3 days   ⚡ Combo: x2
    """
    icon = rank_icon(rank_info.rank)
    lines = [f"{icon} {rank_info.rank} {rank_info.level} ({rank_info.total_levels} levels)"]

    if rank_info.is_max_rank:
        lines.append(f"{progress_bar(1, 1)} MAX ({state.xp} XP total)")
    else:
        lines.append(
            f"{progress_bar(rank_info.xp_into_level, rank_info.xp_for_level)} "
            f"{rank_info.xp_into_level}/{rank_info.xp_for_level} XP"
        )

    lines.append(f"🔥 Streak: {state.streak} days   ⚡ Combo: x{state.combo}")
    if state.daily_main_quest_completed:
        lines.append("✅ Main quest done today")
    return "\n".join(lines)


def format_quest_list(quests: List[Quest]) -> str:
    if not quests:
        return "No quests yet. Add one with: daily-quests add \"Morning run\" --kind main"

    lines = []
    for title, kind in (("MAIN QUESTS", QuestKind.MAIN), ("SIDE QUESTS", QuestKind.SIDE)):
        section = [q for q in quests if q.kind == kind]
        if not section:
            continue
        lines.append(title)
        for quest in section:
            mark = "x" if quest.done else " "
            emoji = ATTRIBUTE_EMOJI.get(quest.attribute, "")
            line = f"  [{mark}] {quest.name}"
            if emoji:
                line += f" {emoji}"
            if quest.frequency.value != "normal":
                line += f" ({quest.frequency.value})"
            line += f"  {str(quest.id)[:8]}"
            lines.append(line)
    return "\n".join(lines)


def format_rollover(rollover: DayRollover) -> str:
    if not rollover.new_day:
        return ""
    lines = [rollover.message]
    if rollover.reset_quest_ids:
        lines.append(f"🔄 {len(rollover.reset_quest_ids)} daily quests reset")
    return "\n".join(lines)
