"""Daily quests: quest tracking with XP, ranks, streaks and decay"""

__version__ = "0.1.0"
