from __future__ import annotations


class PersistenceError(Exception):
    """A save, load or high-score write could not be completed."""


class SnapshotError(PersistenceError, ValueError):
    """Snapshot data is malformed or describes an impossible session."""
