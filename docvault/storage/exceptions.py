class StorageError(Exception):
    """Base exception for object storage failures."""


class ObjectNotFoundError(StorageError):
    """Raised when a key does not exist in the bucket."""


class InvalidUrlFormatError(StorageError):
    """Raised when a stored URL cannot be turned back into a storage key."""
