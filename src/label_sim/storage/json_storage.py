"""Persistent game storage as a single JSON file."""

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from label_sim.storage.exceptions import StorageError, TransientStorageError
from label_sim.storage.memory import TABLES, InMemoryStorage

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(os.environ.get("LABEL_SIM_DATA_DIR", "data"))


class JsonFileStorage(InMemoryStorage):
    """Game storage persisted as JSON.

    Loads lazily on first access and writes the whole file atomically on every
    commit, so a turn that fails never leaves a partially written file.
    """

    def __init__(self, storage_dir: Path | None = None) -> None:
        """Initialize JSON storage.

        Args:
            storage_dir: Directory for the storage file. Defaults to
                        LABEL_SIM_DATA_DIR env var or 'data' in current directory.
        """
        super().__init__()
        self.storage_dir = storage_dir or DEFAULT_DATA_DIR
        self.storage_file = self.storage_dir / "games.json"
        self._loaded = False

    def _ensure_loaded(self) -> None:
        """Ensure tables are loaded into memory."""
        if not self._loaded:
            self._load()

    def _load(self) -> None:
        """Load all tables from the JSON file."""
        self._loaded = True
        if not self.storage_file.exists():
            return

        try:
            with open(self.storage_file, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            self._loaded = False
            logger.exception("Failed to read storage file")
            raise TransientStorageError(f"Cannot read {self.storage_file}: {e}") from e
        except json.JSONDecodeError as e:
            self._loaded = False
            logger.exception("Failed to parse storage file")
            raise StorageError(f"Corrupt storage file: {self.storage_file}") from e

        try:
            for name, model_cls in TABLES.items():
                self._tables[name] = {
                    key: model_cls.model_validate(value)
                    for key, value in data.get(name, {}).items()
                }
        except ValidationError as e:
            self._loaded = False
            raise StorageError(f"Invalid entity in {self.storage_file}") from e

        logger.info(
            "Loaded %d games from storage", len(self._tables["games"])
        )

    def _commit(self) -> None:
        """Save all tables to the JSON file atomically.

        Uses temp file + rename for atomic write on POSIX systems.
        """
        data = {
            name: {key: model.model_dump(mode="json") for key, model in table.items()}
            for name, table in self._tables.items()
        }

        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)

            # Write to temp file first
            temp_path = self.storage_file.with_suffix(".tmp")
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)

            # Atomic rename
            temp_path.rename(self.storage_file)
        except OSError as e:
            logger.exception("Failed to write storage file")
            raise TransientStorageError(f"Cannot write {self.storage_file}: {e}") from e

        logger.info("Saved %d games to storage", len(self._tables["games"]))


# Shared instance
_storage: JsonFileStorage | None = None


def get_storage() -> JsonFileStorage:
    """Get or create the shared JSON storage."""
    global _storage
    if _storage is None:
        _storage = JsonFileStorage()
    return _storage
