"""
Exceptions raised by the storage ports.

Callers in the data and services layers catch these and degrade (baseline-only
catalog, default streak, empty favorites, failed operation result). They are
never meant to reach the HTTP layer.
"""


class StorageError(Exception):
    """An I/O operation on the key-value store or the pack directory failed."""


class InvalidFilenameError(StorageError):
    """A pack filename would escape the sandboxed directory or is otherwise unusable."""


class PackNotFoundError(StorageError):
    """The named pack file does not exist."""
