"""
Bingo Kernel: persistence

Two layers:
  KeyValuePersistence  raw text slots (memory for tests, files on disk)
  SheetStore           the sheet collection on top of two slots:
                         current  the live collection
                         backup   the collection as it was before the
                                  last destructive replace

Reading never raises: missing, unparsable or schema-invalid content loads
as an empty collection. Nothing here locks; two processes sharing a
storage directory are last-writer-wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from bingo.config import settings
from bingo.kernel.schema import validate_collection_json
from bingo.kernel.types import Collection, collection_from_dict, collection_to_dict

logger = logging.getLogger(__name__)

EMPTY_COLLECTION = "{}"


# ---------------------------------------------------------------------------
# Key-value protocol
# ---------------------------------------------------------------------------

class KeyValuePersistence:
    """
    Abstract text slot storage.
    Implement with files for real use, or in-memory for tests.
    """

    def get(self, key: str) -> str | None:
        """Slot contents, or None if the slot was never written."""
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryPersistence(KeyValuePersistence):
    """In-memory storage for testing."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value


class FilePersistence(KeyValuePersistence):
    """
    One UTF-8 file per slot inside a directory.
    Writes go to a temp file first and are moved into place.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory or settings.STORAGE_DIR).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read storage slot %s", key, exc_info=True)
            return None

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


# ---------------------------------------------------------------------------
# Collection store
# ---------------------------------------------------------------------------

def parse_collection(text: str | None) -> Collection | None:
    """Stored text -> collection, or None when absent or invalid."""
    if text is None:
        return None
    try:
        return collection_from_dict(validate_collection_json(text))
    except (ValidationError, ValueError) as e:
        logger.warning("Ignoring invalid stored collection: %s", e)
        return None


def serialize_collection(collection: Collection) -> str:
    return json.dumps(collection_to_dict(collection), ensure_ascii=False)


class SheetStore:
    """CRUD over the sheet collection plus a single-generation backup slot."""

    def __init__(
        self,
        persistence: KeyValuePersistence,
        *,
        current_key: str | None = None,
        backup_key: str | None = None,
    ):
        self._persistence = persistence
        self.current_key = current_key or settings.CURRENT_SLOT
        self.backup_key = backup_key or settings.BACKUP_SLOT

    def load_collection(self) -> Collection:
        """The live collection; empty if absent or unreadable. Never raises."""
        return parse_collection(self._persistence.get(self.current_key)) or {}

    def load_backup(self) -> Collection:
        return parse_collection(self._persistence.get(self.backup_key)) or {}

    def has_backup(self) -> bool:
        return self._persistence.get(self.backup_key) is not None

    def save_collection(self, collection: Collection) -> None:
        """Write the live collection. Does not touch the backup."""
        self._persistence.set(self.current_key, serialize_collection(collection))
        logger.debug("Saved %d sheets", len(collection))

    def replace_collection(self, collection: Collection) -> None:
        """
        Destructive replace: back up the current slot verbatim, then write.
        The only operation that writes the backup slot.
        """
        previous = self._persistence.get(self.current_key)
        self._persistence.set(self.backup_key, previous if previous is not None else EMPTY_COLLECTION)
        self._persistence.set(self.current_key, serialize_collection(collection))
        logger.info("Replaced collection with %d sheets (previous kept as backup)", len(collection))

    def restore_backup(self) -> bool:
        """
        Swap the backup and current slots.
        Restoring twice returns to where you started. No-op without a backup.
        """
        backup = self._persistence.get(self.backup_key)
        if backup is None:
            logger.info("No backup to restore")
            return False

        current = self._persistence.get(self.current_key)
        self._persistence.set(self.current_key, backup)
        self._persistence.set(self.backup_key, current if current is not None else EMPTY_COLLECTION)
        logger.info("Restored collection from backup")
        return True
