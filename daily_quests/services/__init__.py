"""
Service Layer Package

Business logic between the input/presentation layer (CLI) and the
snapshot storage.

Core Services:
- QuestStore: ordered quest collection with unique names
- QuestSession: loading, day rollover, toggle XP effects, persistence
"""

from daily_quests.services.quest_store import QuestStore
from daily_quests.services.session import QuestSession

__all__ = [
    "QuestStore",
    "QuestSession",
]
