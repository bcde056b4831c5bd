"""
Observers: named, independently triggered sinks for progress records.
"""

from .base import ModeKind, Observer, ObserverMode, Observers
from .capture import RecordCapture
from .console import ConsoleObserver, LoggingObserver
from .file_logger import JsonLinesObserver, load_records

__all__ = [
    # Core
    "ModeKind",
    "Observer",
    "ObserverMode",
    "Observers",
    # Implementations
    "ConsoleObserver",
    "LoggingObserver",
    "JsonLinesObserver",
    "RecordCapture",
    "load_records",
]
