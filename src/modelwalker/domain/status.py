"""
Per-session node status side-table.

Runtime vertices are immutable and may be shared between sessions, so their
coverage/failure status is kept here, keyed by vertex, one table per context.
"""

from modelwalker.domain.exceptions import ModelError
from modelwalker.domain.graph import RuntimeModel, RuntimeVertex
from modelwalker.domain.models import NodeStatus


class NodeStatusTable:
    """Mutable NodeStatus per vertex. Unknown vertices read as NOT_COVERED."""

    def __init__(self, model: RuntimeModel) -> None:
        self._model = model
        self._statuses: dict[RuntimeVertex, NodeStatus] = {}

    def get(self, vertex: RuntimeVertex) -> NodeStatus:
        return self._statuses.get(vertex, NodeStatus.NOT_COVERED)

    def set(self, vertex: RuntimeVertex, status: NodeStatus) -> None:
        self._statuses[vertex] = status

    def vertices_with(self, status: NodeStatus) -> list[RuntimeVertex]:
        return [v for v in self._model.vertices if self.get(v) is status]

    def reset(self) -> None:
        self._statuses.clear()

    def snapshot(self) -> dict[str, NodeStatus]:
        """Status of every vertex in the model, keyed by vertex id."""
        return {v.id: self.get(v) for v in self._model.vertices}

    def restore(self, snapshot: dict[str, NodeStatus]) -> None:
        """
        Replace all statuses with those of a snapshot.

        Vertices missing from the snapshot become NOT_COVERED.

        Raises:
            ModelError: If the snapshot names a vertex this model does not have.
        """
        restored: dict[RuntimeVertex, NodeStatus] = {}
        for vertex_id, status in snapshot.items():
            try:
                element = self._model.get_element(vertex_id)
            except KeyError:
                raise ModelError(
                    f"Snapshot refers to unknown vertex: {vertex_id}"
                ) from None
            if not isinstance(element, RuntimeVertex):
                raise ModelError(f"Snapshot refers to a non-vertex element: {vertex_id}")
            restored[element] = status
        self._statuses = restored
