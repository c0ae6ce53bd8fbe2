"""
Persistence adapters for node status snapshots and execution traces.
"""

from modelwalker.infrastructure.persistence.execution_events import (
    FilesystemExecutionEventStore,
    InMemoryExecutionEventStore,
)
from modelwalker.infrastructure.persistence.filesystem import FilesystemNodeStatusStore
from modelwalker.infrastructure.persistence.memory import InMemoryNodeStatusStore

__all__ = [
    "InMemoryNodeStatusStore",
    "FilesystemNodeStatusStore",
    "InMemoryExecutionEventStore",
    "FilesystemExecutionEventStore",
]
