"""Storage layer for game entities."""

from label_sim.storage.base import Storage
from label_sim.storage.exceptions import (
    EntityNotFoundError,
    StorageError,
    TransientStorageError,
)
from label_sim.storage.json_storage import JsonFileStorage, get_storage
from label_sim.storage.memory import InMemoryStorage
from label_sim.storage.validation import validate_project, validate_release

__all__ = [
    "EntityNotFoundError",
    "InMemoryStorage",
    "JsonFileStorage",
    "Storage",
    "StorageError",
    "TransientStorageError",
    "get_storage",
    "validate_project",
    "validate_release",
]
