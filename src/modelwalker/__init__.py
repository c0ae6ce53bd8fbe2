"""
ModelWalker: model-based test execution over directed graph models.

A model of the system under test is authored as vertices (states) and edges
(transitions). A Machine walks the model one step at a time, running the test
code attached to each element, and hands step failures to an exception
strategy that decides whether the session stops or recovers.

Example:
    from modelwalker import BlackListStrategy, Edge, Model, Vertex
    from modelwalker.infrastructure import create_machine

    start, home, cart = Vertex(name="v_Start"), Vertex(name="v_Home"), Vertex(name="v_Cart")
    model = (
        Model()
        .add_edge(Edge(name="e_Open", target_vertex=start))
        .add_edge(Edge(name="e_GoHome", source_vertex=start, target_vertex=home))
        .add_edge(Edge(name="e_AddItem", source_vertex=home, target_vertex=cart))
    )

    machine = create_machine(model, implementation=ShopTest())
    machine.exception_strategy = BlackListStrategy()
    result = machine.run()
    print(result.status, result.coverage.reachable_coverage)
"""

# Application layer (orchestration)
from modelwalker.application.machine import Machine
from modelwalker.application.strategies import (
    BlackListStrategy,
    FailFastStrategy,
    TryAgainStrategy,
)

# Session state
from modelwalker.domain.context import Context

# Domain exceptions
from modelwalker.domain.exceptions import (
    MachineException,
    ModelError,
    NoPathFoundError,
)

# Graph (builders and runtime twins)
from modelwalker.domain.graph import (
    Edge,
    Model,
    RuntimeEdge,
    RuntimeModel,
    RuntimeVertex,
    Vertex,
)

# Domain interfaces (for type hints and custom implementations)
from modelwalker.domain.interfaces import (
    ActionExecutorInterface,
    ExceptionStrategy,
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

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Graph
    "Vertex",
    "Edge",
    "Model",
    "RuntimeVertex",
    "RuntimeEdge",
    "RuntimeModel",
    "Action",
    "Guard",
    "Requirement",
    # Session
    "Context",
    "NodeStatus",
    "ExecutionStatus",
    "CoverageSummary",
    "ExecutionResult",
    "MachineConfig",
    # Application
    "Machine",
    "FailFastStrategy",
    "TryAgainStrategy",
    "BlackListStrategy",
    # Interfaces
    "ExceptionStrategy",
    "PathGeneratorInterface",
    "ActionExecutorInterface",
    # Exceptions
    "MachineException",
    "ModelError",
    "NoPathFoundError",
]
