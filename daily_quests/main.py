"""Command-line entry point for daily quests"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from daily_quests.config import DATA_PATH, LOG_LEVEL, SNAPSHOT_KEY, validate_config
from daily_quests.exceptions import DailyQuestsError, QuestNotFoundError
from daily_quests.memory.snapshot_store import SnapshotStore
from daily_quests.models.quest import QuestAttribute, QuestFrequency, QuestKind
from daily_quests.services.session import QuestSession
from daily_quests.utils.display import (
    attribute_breakdown,
    format_quest_list,
    format_rank_card,
    format_rollover,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level.upper(), logging.INFO)
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="daily-quests",
        description="Track daily quests, XP, ranks and streaks.",
    )
    parser.add_argument("--data-path", type=Path, default=DATA_PATH, help="Directory holding the snapshot")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show rank, streak and quests")
    sub.add_parser("list", help="List quests")

    kinds = [k.value for k in QuestKind]
    attributes = [a.value for a in QuestAttribute]
    frequencies = [f.value for f in QuestFrequency]

    add = sub.add_parser("add", help="Add a quest")
    add.add_argument("name")
    add.add_argument("--kind", choices=kinds, default=QuestKind.SIDE.value)
    add.add_argument("--attribute", choices=attributes)
    add.add_argument("--frequency", choices=frequencies, default=QuestFrequency.NORMAL.value)

    edit = sub.add_parser("edit", help="Edit a quest")
    edit.add_argument("quest", help="Quest id, id prefix or name")
    edit.add_argument("--name")
    edit.add_argument("--kind", choices=kinds)
    edit.add_argument("--attribute", choices=attributes + ["none"])
    edit.add_argument("--frequency", choices=frequencies)

    delete = sub.add_parser("delete", help="Delete a quest")
    delete.add_argument("quest", help="Quest id, id prefix or name")

    toggle = sub.add_parser("toggle", help="Complete or undo a quest")
    toggle.add_argument("quest", help="Quest id, id prefix or name")

    sub.add_parser("reset", help="Delete all stored progress")
    return parser


def resolve_quest_id(session: QuestSession, ref: str):
    """Resolve a quest by full id, unique id prefix, or name (ignoring case)"""
    by_name = session.store.find_by_name(ref)
    if by_name is not None:
        return by_name.id

    matches = [q for q in session.quests if str(q.id).startswith(ref.lower())]
    if len(matches) == 1:
        return matches[0].id
    raise QuestNotFoundError(ref, operation="resolve_quest")


def print_status(session: QuestSession) -> None:
    print(format_rank_card(session.state, session.rank_info))
    print()
    print(format_quest_list(session.quests))
    breakdown = attribute_breakdown(session.quests)
    if any(breakdown.values()):
        print()
        print("  ".join(f"{name}: {count}" for name, count in breakdown.items()))


async def run(args: argparse.Namespace) -> int:
    gateway = SnapshotStore(data_path=args.data_path, storage_key=SNAPSHOT_KEY)

    if args.command == "reset":
        await gateway.clear()
        print("Progress cleared.")
        return 0

    session = QuestSession(gateway=gateway)
    rollover = await session.load()
    rollover_text = format_rollover(rollover)
    if rollover_text:
        print(rollover_text)

    command = args.command or "status"

    if command == "status":
        print_status(session)
    elif command == "list":
        print(format_quest_list(session.quests))
    elif command == "add":
        quest = await session.add_quest(args.name, args.kind, args.attribute, args.frequency)
        print(f"Added {quest.kind.value} quest: {quest.name}")
    elif command == "edit":
        current = session.store.get(resolve_quest_id(session, args.quest))
        attribute = current.attribute.value if current.attribute else None
        if args.attribute is not None:
            attribute = None if args.attribute == "none" else args.attribute
        quest = await session.edit_quest(
            current.id,
            name=args.name or current.name,
            kind=args.kind or current.kind.value,
            attribute=attribute,
            frequency=args.frequency or current.frequency.value,
        )
        print(f"Updated quest: {quest.name}")
    elif command == "delete":
        quest = await session.delete_quest(resolve_quest_id(session, args.quest))
        print(f"Deleted quest: {quest.name}")
    elif command == "toggle":
        result = await session.toggle_quest(resolve_quest_id(session, args.quest))
        print(result["message"])
        print()
        print(format_rank_card(session.state, session.rank_info))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        validate_config()
        return asyncio.run(run(args))
    except DailyQuestsError as e:
        print(e.user_message, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
