"""
Pydantic Input Validation Layer

Validates quest input coming from the input collaborator (CLI, forms)
before it reaches the quest store.

Constraints:
- Name: trimmed, 1-200 characters
- Kind: main or side
- Attribute: physical, mental, career, studying, or empty
- Frequency: normal, daily, weekly (default normal)
"""

import logging
from typing import Optional

import pydantic
from pydantic import BaseModel, Field, field_validator

from daily_quests.exceptions import ValidationError
from daily_quests.models.quest import QuestAttribute, QuestFrequency, QuestKind

logger = logging.getLogger(__name__)


class QuestInput(BaseModel):
    """Validated add/edit payload for a quest"""
    name: str = Field(..., max_length=200, description="Quest name")
    kind: QuestKind = Field(..., description="main or side")
    attribute: Optional[QuestAttribute] = Field(default=None, description="Attribute trained")
    frequency: QuestFrequency = Field(default=QuestFrequency.NORMAL, description="Recurrence")

    @field_validator('name', mode='before')
    @classmethod
    def trim_name(cls, v):
        """Trim whitespace and reject empty names"""
        if v is None:
            raise ValueError("Quest name is required")
        trimmed = str(v).strip()
        if not trimmed:
            raise ValueError("Quest name cannot be empty")
        return trimmed

    @field_validator('attribute', mode='before')
    @classmethod
    def empty_attribute(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator('kind', mode='before')
    @classmethod
    def normalize_kind(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator('frequency', mode='before')
    @classmethod
    def default_frequency(cls, v):
        """Unspecified frequency means normal"""
        if v is None or (isinstance(v, str) and not v.strip()):
            return QuestFrequency.NORMAL
        return v.strip().lower() if isinstance(v, str) else v


def parse_quest_input(
    name: Optional[str],
    kind,
    attribute=None,
    frequency=None,
) -> QuestInput:
    """
    Build a QuestInput, converting pydantic errors into our ValidationError

    Raises:
        ValidationError: first failing field with a readable message
    """
    try:
        return QuestInput(name=name, kind=kind, attribute=attribute, frequency=frequency)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        message = first["msg"].removeprefix("Value error, ")
        raise ValidationError(
            message=message,
            field=field,
            value=first.get("input"),
            operation="parse_quest_input",
            cause=e,
        )
