"""Quest models"""
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuestKind(str, Enum):
    """Quest priority tiers"""
    MAIN = "main"
    SIDE = "side"


class QuestAttribute(str, Enum):
    """Self-improvement area a quest trains"""
    PHYSICAL = "physical"
    MENTAL = "mental"
    CAREER = "career"
    STUDYING = "studying"


class QuestFrequency(str, Enum):
    """How often a quest recurs"""
    NORMAL = "normal"
    DAILY = "daily"
    WEEKLY = "weekly"  # no automatic reset


class Quest(BaseModel):
    """A user-defined quest"""
    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1)
    kind: QuestKind = Field(..., alias="type")
    attribute: Optional[QuestAttribute] = None
    frequency: QuestFrequency = QuestFrequency.NORMAL
    done: bool = False

    @field_validator("attribute", mode="before")
    @classmethod
    def empty_attribute_is_none(cls, v):
        """Treat an empty attribute from the input form as None"""
        if v == "":
            return None
        return v

    @property
    def is_main(self) -> bool:
        return self.kind == QuestKind.MAIN

    def name_key(self) -> str:
        """Key used for case-insensitive name comparison"""
        return self.name.lower()
