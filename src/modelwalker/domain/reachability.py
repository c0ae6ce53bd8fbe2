"""
Reachability of uncovered vertices after a failure.

A NOT_COVERED vertex is reachable when some COVERED vertex, or transitively
some reachable NOT_COVERED vertex, has an edge into it. FAILED vertices block
propagation. Vertices with no covered ancestor, including vertices without
incoming edges, are therefore unreachable.
"""

from modelwalker.domain.graph import RuntimeModel, RuntimeVertex
from modelwalker.domain.models import NodeStatus
from modelwalker.domain.status import NodeStatusTable


class ReachabilityAnalysis:
    """
    One reachability pass over a model and a status table.

    Adjacency and memo tables belong to the instance, so each failure gets a
    fresh analysis and concurrent sessions never share results.
    """

    def __init__(self, model: RuntimeModel, statuses: NodeStatusTable) -> None:
        self._statuses = statuses
        self._targets: dict[RuntimeVertex, set[RuntimeVertex]] = {
            v: set() for v in model.vertices
        }
        self._sources: dict[RuntimeVertex, set[RuntimeVertex]] = {
            v: set() for v in model.vertices
        }
        for edge in model.edges:
            if edge.source_vertex is None or edge.target_vertex is None:
                continue
            self._targets[edge.source_vertex].add(edge.target_vertex)
            self._sources[edge.target_vertex].add(edge.source_vertex)
        self._memo: dict[RuntimeVertex, bool] = {}

    def targets(self, vertex: RuntimeVertex) -> frozenset[RuntimeVertex]:
        return frozenset(self._targets.get(vertex, ()))

    def sources(self, vertex: RuntimeVertex) -> frozenset[RuntimeVertex]:
        return frozenset(self._sources.get(vertex, ()))

    def is_reachable(self, vertex: RuntimeVertex) -> bool:
        """Depth-first search backwards from vertex for a covered ancestor."""
        if vertex in self._memo:
            return self._memo[vertex]
        if self._statuses.get(vertex) is NodeStatus.FAILED:
            self._memo[vertex] = False
            return False

        visited = {vertex}
        stack = [vertex]
        while stack:
            current = stack.pop()
            for source in self._sources.get(current, ()):
                status = self._statuses.get(source)
                if status is NodeStatus.COVERED or self._memo.get(source) is True:
                    self._memo[vertex] = True
                    return True
                if (
                    status is NodeStatus.NOT_COVERED
                    and source not in visited
                    and source not in self._memo
                ):
                    visited.add(source)
                    stack.append(source)

        # Nothing explored has a covered ancestor, so none of it is reachable.
        for explored in visited:
            self._memo[explored] = False
        return False


def compute_reachability(
    model: RuntimeModel,
    statuses: NodeStatusTable,
    failed_vertex: RuntimeVertex,
) -> list[RuntimeVertex]:
    """
    Mark every NOT_COVERED vertex cut off by a failed vertex as NOT_REACHABLE.

    COVERED and FAILED vertices are never changed. The failed vertex is marked
    FAILED if it is not already.

    Args:
        model: The runtime graph of the session
        statuses: The session's status table (mutated)
        failed_vertex: The vertex whose step just failed

    Returns:
        The vertices newly marked NOT_REACHABLE, in model order
    """
    statuses.set(failed_vertex, NodeStatus.FAILED)
    analysis = ReachabilityAnalysis(model, statuses)
    unreachable = [
        vertex
        for vertex in model.vertices
        if statuses.get(vertex) is NodeStatus.NOT_COVERED
        and not analysis.is_reachable(vertex)
    ]
    for vertex in unreachable:
        statuses.set(vertex, NodeStatus.NOT_REACHABLE)
    return unreachable
