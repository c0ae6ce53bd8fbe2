"""
Infrastructure layer for the model-based test engine.

Contains adapters for external concerns (persistence, path generation,
action execution, strategy registry, session assembly).
"""

from modelwalker.infrastructure.actions import (
    MethodActionExecutor,
    NullActionExecutor,
)
from modelwalker.infrastructure.generators import (
    RandomPathGenerator,
    ScriptedPathGenerator,
)
from modelwalker.infrastructure.persistence import (
    FilesystemExecutionEventStore,
    FilesystemNodeStatusStore,
    InMemoryExecutionEventStore,
    InMemoryNodeStatusStore,
)
from modelwalker.infrastructure.registry import StrategyRegistry
from modelwalker.infrastructure.session import (
    create_machine,
    load_config,
    restore_statuses,
    save_statuses,
)

__all__ = [
    # Persistence
    "InMemoryNodeStatusStore",
    "FilesystemNodeStatusStore",
    "InMemoryExecutionEventStore",
    "FilesystemExecutionEventStore",
    # Path generation
    "RandomPathGenerator",
    "ScriptedPathGenerator",
    # Actions
    "MethodActionExecutor",
    "NullActionExecutor",
    # Registry
    "StrategyRegistry",
    # Session assembly
    "create_machine",
    "load_config",
    "save_statuses",
    "restore_statuses",
]
