"""
Domain layer for the model-based test engine.

Contains the graph model, session state and reachability logic with no
external dependencies.
"""

from modelwalker.domain.context import Context
from modelwalker.domain.exceptions import (
    MachineException,
    ModelError,
    NoPathFoundError,
)
from modelwalker.domain.execution_event import ExecutionEvent, ExecutionEventType
from modelwalker.domain.graph import (
    CachedBuilder,
    Edge,
    Model,
    RuntimeEdge,
    RuntimeModel,
    RuntimeVertex,
    Vertex,
)
from modelwalker.domain.interfaces import (
    ActionExecutorInterface,
    ExceptionStrategy,
    ExecutionEventStoreInterface,
    MachineInterface,
    NodeStatusStoreInterface,
    PathGeneratorInterface,
)
from modelwalker.domain.models import (
    Action,
    CoverageSummary,
    ExecutionResult,
    ExecutionStatus,
    Guard,
    MachineConfig,
    NodeStatus,
    Requirement,
)
from modelwalker.domain.reachability import ReachabilityAnalysis, compute_reachability
from modelwalker.domain.status import NodeStatusTable

__all__ = [
    # Graph
    "CachedBuilder",
    "Vertex",
    "Edge",
    "Model",
    "RuntimeVertex",
    "RuntimeEdge",
    "RuntimeModel",
    # Models
    "Action",
    "Guard",
    "Requirement",
    "NodeStatus",
    "ExecutionStatus",
    "CoverageSummary",
    "ExecutionResult",
    "MachineConfig",
    "ExecutionEvent",
    "ExecutionEventType",
    # Session state
    "Context",
    "NodeStatusTable",
    "ReachabilityAnalysis",
    "compute_reachability",
    # Interfaces
    "MachineInterface",
    "ExceptionStrategy",
    "PathGeneratorInterface",
    "ActionExecutorInterface",
    "NodeStatusStoreInterface",
    "ExecutionEventStoreInterface",
    # Exceptions
    "MachineException",
    "ModelError",
    "NoPathFoundError",
]
