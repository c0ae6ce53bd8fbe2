"""
Random walk path generator.

Picks uniformly among the outgoing edges of the current vertex whose target
has neither failed nor been cut off. The walk stops once no uncovered vertex
is reachable from where it stands, so vertices the walk can never get to
(isolated ones, or those behind a failure) do not keep it going forever.
"""

import random
from collections import deque

from modelwalker.domain.context import Context
from modelwalker.domain.exceptions import NoPathFoundError
from modelwalker.domain.graph import RuntimeEdge, RuntimeVertex
from modelwalker.domain.interfaces import PathGeneratorInterface
from modelwalker.domain.models import NodeStatus

BLOCKED = (NodeStatus.FAILED, NodeStatus.NOT_REACHABLE)


class RandomPathGenerator(PathGeneratorInterface):
    """Seeded random walk that stops at full reachable vertex coverage."""

    def __init__(self, seed: int | None = None, max_steps: int | None = None):
        """
        Args:
            seed: Seed for reproducible walks
            max_steps: Stop after this many steps in the context (no limit if None)
        """
        self._random = random.Random(seed)
        self._max_steps = max_steps

    def has_next_step(self, context: Context) -> bool:
        if self._max_steps is not None and context.step_count >= self._max_steps:
            return False
        if not self._candidates(context):
            return False
        return self._uncovered_ahead(context)

    def get_next_step(self, context: Context) -> RuntimeEdge:
        candidates = self._candidates(context)
        if not candidates:
            raise NoPathFoundError("No healthy edge leaves the current vertex")
        return self._random.choice(candidates)

    @staticmethod
    def _candidates(context: Context) -> list[RuntimeEdge]:
        current = context.current_element
        if not isinstance(current, RuntimeVertex):
            return []
        return [
            edge
            for edge in context.model.get_out_edges(current)
            if edge.target_vertex is not None
            and context.node_status.get(edge.target_vertex) not in BLOCKED
        ]

    @staticmethod
    def _uncovered_ahead(context: Context) -> bool:
        """Whether an uncovered vertex can be reached along healthy edges."""
        current = context.current_element
        if not isinstance(current, RuntimeVertex):
            return True
        status = context.node_status
        seen = {current}
        queue = deque([current])
        while queue:
            vertex = queue.popleft()
            for edge in context.model.get_out_edges(vertex):
                target = edge.target_vertex
                if target is None or target in seen or status.get(target) in BLOCKED:
                    continue
                if status.get(target) is NodeStatus.NOT_COVERED:
                    return True
                seen.add(target)
                queue.append(target)
        return False
