"""
QuestStore - ordered in-memory quest collection

Handles quest CRUD and the case-insensitive name uniqueness rule.
Toggling only flips the done flag; XP and streak effects belong to the
session controller.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Union
from uuid import UUID

from daily_quests.exceptions import DuplicateQuestNameError, QuestNotFoundError
from daily_quests.models.quest import Quest, QuestKind
from daily_quests.validators import parse_quest_input

logger = logging.getLogger(__name__)


class QuestStore:
    """
    Ordered quest collection.

    Responsibilities:
    - Add/edit/delete quests with validated input
    - Enforce unique names (ignoring case)
    - Flip done flags
    """

    def __init__(self, quests: Optional[Iterable[Quest]] = None):
        self._quests: List[Quest] = list(quests or [])

    def __iter__(self) -> Iterator[Quest]:
        return iter(self._quests)

    def __len__(self) -> int:
        return len(self._quests)

    @property
    def quests(self) -> List[Quest]:
        """Copy of the quest list in display order"""
        return list(self._quests)

    def replace_all(self, quests: Iterable[Quest]) -> None:
        self._quests = list(quests)

    def get(self, quest_id: Union[UUID, str]) -> Quest:
        """Get a quest by id, raising QuestNotFoundError if absent"""
        return self._quests[self._index_of(quest_id)]

    def find_by_name(self, name: str, exclude_id: Optional[UUID] = None) -> Optional[Quest]:
        """Find a quest whose name matches ignoring case"""
        key = name.strip().lower()
        for quest in self._quests:
            if quest.id != exclude_id and quest.name_key() == key:
                return quest
        return None

    def add(self, name: str, kind, attribute=None, frequency=None) -> Quest:
        """
        Add a new quest (not done)

        Raises:
            ValidationError: empty name or unknown kind/attribute/frequency
            DuplicateQuestNameError: another quest already uses the name
        """
        data = parse_quest_input(name, kind, attribute, frequency)

        conflict = self.find_by_name(data.name)
        if conflict is not None:
            raise DuplicateQuestNameError(data.name, conflict, operation="add_quest")

        quest = Quest(
            name=data.name,
            kind=data.kind,
            attribute=data.attribute,
            frequency=data.frequency,
        )
        self._quests.append(quest)
        logger.info(f"Added {quest.kind.value} quest '{quest.name}' ({quest.id})")
        return quest

    def edit(self, quest_id: Union[UUID, str], name: str, kind, attribute=None, frequency=None) -> Quest:
        """
        Replace a quest's name, kind, attribute and frequency, keeping done

        Raises:
            QuestNotFoundError: unknown id
            ValidationError / DuplicateQuestNameError: as for add()
        """
        index = self._index_of(quest_id)
        current = self._quests[index]
        data = parse_quest_input(name, kind, attribute, frequency)

        conflict = self.find_by_name(data.name, exclude_id=current.id)
        if conflict is not None:
            raise DuplicateQuestNameError(data.name, conflict, operation="edit_quest")

        updated = current.model_copy(update={
            "name": data.name,
            "kind": data.kind,
            "attribute": data.attribute,
            "frequency": data.frequency,
        })
        self._quests[index] = updated
        logger.info(f"Edited quest {updated.id}: '{current.name}' → '{updated.name}'")
        return updated

    def delete(self, quest_id: Union[UUID, str]) -> Quest:
        """Remove a quest and return it"""
        removed = self._quests.pop(self._index_of(quest_id))
        logger.info(f"Deleted quest '{removed.name}' ({removed.id})")
        return removed

    def toggle(self, quest_id: Union[UUID, str]) -> Quest:
        """Flip a quest's done flag and return the updated quest"""
        index = self._index_of(quest_id)
        current = self._quests[index]
        updated = current.model_copy(update={"done": not current.done})
        self._quests[index] = updated
        return updated

    def main_quests_done(self, exclude_id: Optional[UUID] = None) -> List[Quest]:
        return [
            q for q in self._quests
            if q.kind == QuestKind.MAIN and q.done and q.id != exclude_id
        ]

    def _index_of(self, quest_id: Union[UUID, str]) -> int:
        try:
            wanted = quest_id if isinstance(quest_id, UUID) else UUID(str(quest_id))
        except ValueError:
            raise QuestNotFoundError(quest_id)

        for index, quest in enumerate(self._quests):
            if quest.id == wanted:
                return index
        raise QuestNotFoundError(quest_id)
