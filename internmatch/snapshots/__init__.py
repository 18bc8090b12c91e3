"""Immutable match snapshots taken at application time."""

from .builder import SnapshotBuilder, build_snapshot, reproduce_snapshot, snapshot_from_result
from .models import ApplicationMatchSnapshot

__all__ = [
    "ApplicationMatchSnapshot",
    "SnapshotBuilder",
    "build_snapshot",
    "reproduce_snapshot",
    "snapshot_from_result",
]
