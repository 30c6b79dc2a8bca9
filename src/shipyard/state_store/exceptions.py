"""Custom exceptions for State Store."""


class StateStoreError(Exception):
    """Base exception for State Store errors."""


class SnapshotWriteError(StateStoreError):
    """The snapshot file could not be written."""
