"""Snapshot persistence for the quest session

STORAGE:
- One JSON document per storage key: DATA_PATH / "<SNAPSHOT_KEY>.json"
- Written atomically (temp file, then os.replace)
- Missing, unreadable or malformed documents load as "no snapshot"
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional

import pydantic

from daily_quests.config import DATA_PATH, SNAPSHOT_KEY
from daily_quests.exceptions import PersistenceError, SnapshotDecodeError, wrap_storage_exception
from daily_quests.models.progression import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Load and save the session snapshot under a single storage key"""

    def __init__(self, data_path: Path = DATA_PATH, storage_key: str = SNAPSHOT_KEY):
        self.data_path = Path(data_path)
        self.storage_key = storage_key

    @property
    def snapshot_path(self) -> Path:
        return self.data_path / f"{self.storage_key}.json"

    async def load(self) -> Optional[Snapshot]:
        """Load the stored snapshot

        Returns None when nothing is stored or the stored document cannot be
        used; the caller then starts from defaults.
        """
        try:
            return self.read_snapshot()
        except SnapshotDecodeError:
            logger.warning(f"Ignoring malformed snapshot at {self.snapshot_path}, using defaults")
            return None
        except PersistenceError:
            logger.warning(f"Snapshot storage unavailable at {self.snapshot_path}, using defaults")
            return None

    def read_snapshot(self) -> Optional[Snapshot]:
        """Read and decode the snapshot, raising PersistenceError subclasses on failure"""
        path = self.snapshot_path
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"No snapshot at {path}, starting fresh")
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise wrap_storage_exception(e, operation="load_snapshot", path=str(path))

        try:
            document = json.loads(raw)
            if document is None:
                return None
            if not isinstance(document, dict):
                raise SnapshotDecodeError(
                    message=f"Snapshot root must be an object, got {type(document).__name__}",
                    path=str(path),
                    operation="load_snapshot",
                )
            snapshot = Snapshot.model_validate(document)
        except (json.JSONDecodeError, pydantic.ValidationError) as e:
            raise wrap_storage_exception(e, operation="load_snapshot", path=str(path))

        logger.info(
            f"Loaded snapshot from {path}: {len(snapshot.quests)} quests, "
            f"{snapshot.xp} XP, streak {snapshot.streak}"
        )
        return snapshot

    async def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot atomically

        Raises:
            PersistenceError: directory or file could not be written
        """
        path = self.snapshot_path
        tmp_path = path.with_suffix(".json.tmp")
        payload = json.dumps(snapshot.to_document(), indent=2, ensure_ascii=False)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise wrap_storage_exception(e, operation="save_snapshot", path=str(path))

        logger.debug(f"Saved snapshot to {path}")

    async def clear(self) -> None:
        """Delete the stored snapshot if present"""
        try:
            self.snapshot_path.unlink(missing_ok=True)
        except OSError as e:
            raise wrap_storage_exception(e, operation="clear_snapshot", path=str(self.snapshot_path))
        logger.info(f"Cleared snapshot at {self.snapshot_path}")
