"""Custom exceptions for the storage layer."""


class StorageError(Exception):
    """Base exception for storage failures."""

    pass


class TransientStorageError(StorageError):
    """Storage collaborator unavailable; the whole turn may be retried."""

    pass


class EntityNotFoundError(StorageError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(f"{entity_type} '{entity_id}' not found")
        self.entity_type = entity_type
        self.entity_id = entity_id
