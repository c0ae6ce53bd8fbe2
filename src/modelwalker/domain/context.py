"""
Execution context: the traversal position and status of one session.

Mutated only by the Machine and by exception strategies, through
set_current_element, set_next_edge_try_again and set_execution_status.
"""

from collections import Counter
from typing import TYPE_CHECKING

from modelwalker.domain.exceptions import ModelError
from modelwalker.domain.graph import RuntimeEdge, RuntimeModel, RuntimeVertex
from modelwalker.domain.models import CoverageSummary, ExecutionStatus
from modelwalker.domain.status import NodeStatusTable

if TYPE_CHECKING:
    from modelwalker.domain.interfaces import PathGeneratorInterface

Element = RuntimeVertex | RuntimeEdge


class Context:
    """
    Per-session mutable state over an immutable RuntimeModel.

    Holds the current and last element, a one-shot "try again" edge slot, the
    execution status, and the session's NodeStatusTable.
    """

    def __init__(
        self,
        model: RuntimeModel,
        path_generator: "PathGeneratorInterface | None" = None,
        start_element: Element | None = None,
    ) -> None:
        """
        Args:
            model: The runtime graph traversed by this session
            path_generator: Chooses the next edge from a vertex
            start_element: Where traversal begins (defaults to the single
                start edge of the model)
        """
        self._model = model
        if start_element is not None:
            self._require_in_model(start_element)
        self._path_generator = path_generator
        self._start_element = start_element
        self._current_element: Element | None = None
        self._last_element: Element | None = None
        self._next_edge_try_again: RuntimeEdge | None = None
        self._execution_status = ExecutionStatus.NOT_EXECUTED
        self._node_status = NodeStatusTable(model)
        self._visits: Counter[str] = Counter()

    @property
    def model(self) -> RuntimeModel:
        return self._model

    @property
    def path_generator(self) -> "PathGeneratorInterface | None":
        return self._path_generator

    @path_generator.setter
    def path_generator(self, path_generator: "PathGeneratorInterface") -> None:
        self._path_generator = path_generator

    @property
    def start_element(self) -> Element | None:
        return self._start_element

    @property
    def current_element(self) -> Element | None:
        return self._current_element

    @property
    def last_element(self) -> Element | None:
        return self._last_element

    @property
    def next_edge_try_again(self) -> RuntimeEdge | None:
        return self._next_edge_try_again

    @property
    def execution_status(self) -> ExecutionStatus:
        return self._execution_status

    @property
    def node_status(self) -> NodeStatusTable:
        return self._node_status

    @property
    def step_count(self) -> int:
        return sum(self._visits.values())

    def visit_count(self, element: Element) -> int:
        return self._visits[element.id]

    def set_current_element(self, element: Element | None) -> None:
        """Move to an element; the previous current element becomes the last."""
        if element is not None:
            self._require_in_model(element)
        self._last_element = self._current_element
        self._current_element = element

    def set_next_edge_try_again(self, edge: RuntimeEdge) -> None:
        """Stage an edge to be taken as the very next step, exactly once."""
        self._require_in_model(edge)
        self._next_edge_try_again = edge

    def take_next_edge_try_again(self) -> RuntimeEdge | None:
        """Return the staged edge and clear the slot."""
        edge, self._next_edge_try_again = self._next_edge_try_again, None
        return edge

    def set_execution_status(self, status: ExecutionStatus) -> None:
        self._execution_status = status

    def record_visit(self, element: Element) -> None:
        self._visits[element.id] += 1

    def coverage(self) -> CoverageSummary:
        return CoverageSummary.from_statuses(self._node_status)

    def _require_in_model(self, element: Element) -> None:
        if not self._model.has_element(element):
            raise ModelError(f"Element '{element.id}' is not part of the model")
