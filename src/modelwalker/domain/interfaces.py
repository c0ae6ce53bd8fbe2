"""
Domain interfaces (Ports) for the model-based test engine.

These abstract base classes define the contracts between the execution core
and its collaborators: the machine driver, recovery strategies, path
generation, action execution and persistence.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modelwalker.domain.context import Context
    from modelwalker.domain.exceptions import MachineException
    from modelwalker.domain.execution_event import (
        ExecutionEvent,
        ExecutionEventType,
    )
    from modelwalker.domain.graph import RuntimeEdge, RuntimeVertex
    from modelwalker.domain.models import NodeStatus


class MachineInterface(ABC):
    """
    Port for the driver that steps contexts forward.

    Strategies only need access to the context currently being driven.
    """

    @property
    @abstractmethod
    def current_context(self) -> "Context":
        """The context the next step will be taken in."""
        pass

    @abstractmethod
    def has_next_step(self) -> bool:
        pass

    @abstractmethod
    def get_next_step(self) -> "Context":
        """Take one step and return the context it was taken in."""
        pass


class ExceptionStrategy(ABC):
    """
    Port for step-failure recovery.

    Invoked synchronously by the machine with the failure of a single step.
    An implementation may change node statuses, reposition the machine's
    current context and set its execution status. Re-raising the exception
    ends the session.
    """

    @abstractmethod
    def handle(self, machine: MachineInterface, exception: "MachineException") -> None:
        """
        Decide how the session continues after a failed step.

        Args:
            machine: The machine whose step failed
            exception: The failure, carrying the context and failed element

        Raises:
            MachineException: When no further recovery is possible
        """
        pass


class PathGeneratorInterface(ABC):
    """
    Port for choosing the next edge to traverse.

    The machine consults the generator only while the current element is a
    vertex; a staged "try again" edge bypasses it for one step.
    """

    @abstractmethod
    def has_next_step(self, context: "Context") -> bool:
        """Whether the generator wants to continue the session."""
        pass

    @abstractmethod
    def get_next_step(self, context: "Context") -> "RuntimeEdge":
        """
        Choose an outgoing edge of the current vertex.

        Raises:
            NoPathFoundError: If no edge can be chosen
        """
        pass


class ActionExecutorInterface(ABC):
    """
    Port for running the behaviour attached to vertices and edges.

    Any exception raised from execute() is reported as a step failure.
    """

    @abstractmethod
    def execute(
        self, context: "Context", element: "RuntimeVertex | RuntimeEdge"
    ) -> None:
        pass


class NodeStatusStoreInterface(ABC):
    """Port for saving and restoring per-session node status snapshots."""

    @abstractmethod
    def save(self, session_id: str, snapshot: dict[str, "NodeStatus"]) -> None:
        """
        Persist a snapshot, replacing any previous one for the session.

        Args:
            session_id: Identifier of the session
            snapshot: Vertex id -> status
        """
        pass

    @abstractmethod
    def load(self, session_id: str) -> dict[str, "NodeStatus"]:
        """
        Raises:
            KeyError: If nothing was saved for the session
        """
        pass


class ExecutionEventStoreInterface(ABC):
    """Port for the execution trace of a session."""

    @abstractmethod
    def store_event(self, event: "ExecutionEvent") -> str:
        """Append an event and return its id."""
        pass

    @abstractmethod
    def get_events(
        self,
        session_id: str,
        event_type: "ExecutionEventType | None" = None,
        element_id: str | None = None,
    ) -> list["ExecutionEvent"]:
        """
        Events of a session in emission order.

        Args:
            session_id: The session whose trace to read
            event_type: Only events of this type (all types if None)
            element_id: Only events about this vertex or edge (all if None)
        """
        pass

    @abstractmethod
    def get_failure_chain(self, session_id: str) -> list["ExecutionEvent"]:
        """Failure-related events of a session, up to the one that ended it."""
        pass
