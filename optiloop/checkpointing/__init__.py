"""Checkpointing layer for resumable optimization runs."""

from .base import (
    CheckpointStore,
    Checkpointing,
    CheckpointingFrequency,
    FrequencyKind,
    validate_key,
)
from .file_storage import CheckpointInfo, FileCheckpointStore, MemoryCheckpointStore

__all__ = [
    "CheckpointStore",
    "Checkpointing",
    "CheckpointingFrequency",
    "FrequencyKind",
    "validate_key",
    "CheckpointInfo",
    "FileCheckpointStore",
    "MemoryCheckpointStore",
]
