"""Progression state and snapshot models"""
import logging
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from daily_quests.models.quest import Quest
from daily_quests.utils.datetime_helpers import parse_stored_date

logger = logging.getLogger(__name__)


class ProgressionState(BaseModel):
    """XP, streak and day bookkeeping owned by the session"""
    model_config = ConfigDict(populate_by_name=True)

    xp: int = 0
    streak: int = 0
    combo: int = 1
    last_completed_date: Optional[date] = Field(None, alias="lastCompletedDate")
    daily_main_quest_completed: bool = Field(False, alias="dailyMainQuestCompleted")
    last_active_date: Optional[date] = Field(None, alias="lastActiveDate")

    @field_validator("xp", "streak", "combo", "daily_main_quest_completed", mode="before")
    @classmethod
    def null_to_default(cls, v, info):
        """Stored nulls read as the field default"""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("xp", "streak", mode="after")
    @classmethod
    def clamp_non_negative(cls, v: int) -> int:
        return max(0, v)

    @field_validator("combo", mode="after")
    @classmethod
    def clamp_combo(cls, v: int) -> int:
        return max(1, v)

    @field_validator("last_completed_date", "last_active_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return parse_stored_date(v)


class RankLevel(BaseModel):
    """Rank and level derived from cumulative XP (never persisted)"""
    rank: str
    rank_index: int
    level: int
    total_levels: int
    xp_into_level: int
    xp_for_level: int
    xp_to_next_level: int
    is_max_rank: bool = False


class Snapshot(ProgressionState):
    """
    Serialized session: the quest list plus every progression field

    Dumped with by_alias=True this produces the stored document:
        {"quests": [...], "xp": 0, "streak": 0, "combo": 1,
         "lastCompletedDate": null, "dailyMainQuestCompleted": false,
         "lastActiveDate": null}
    """
    quests: list[Quest] = Field(default_factory=list)

    @field_validator("quests", mode="before")
    @classmethod
    def null_quests(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def drop_duplicate_names(self) -> "Snapshot":
        """Keep the first quest for each name, ignoring case"""
        seen = set()
        unique = []
        for quest in self.quests:
            key = quest.name_key()
            if key in seen:
                logger.warning(f"Dropping stored quest '{quest.name}': duplicate name")
                continue
            seen.add(key)
            unique.append(quest)
        if len(unique) != len(self.quests):
            self.quests = unique
        return self

    @classmethod
    def capture(cls, quests: list[Quest], state: ProgressionState) -> "Snapshot":
        """Build a snapshot from live session objects"""
        return cls(
            quests=[quest.model_copy() for quest in quests],
            **state.model_dump(),
        )

    def to_state(self) -> ProgressionState:
        """Extract the progression part of the snapshot"""
        return ProgressionState(**self.model_dump(exclude={"quests"}))

    def to_document(self) -> dict:
        """JSON-ready document with camelCase keys and ISO dates"""
        return self.model_dump(mode="json", by_alias=True)
