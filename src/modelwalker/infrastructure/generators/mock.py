"""
Scripted path generator for testing without a real path algorithm.

Returns predefined edges in sequence.
"""

from modelwalker.domain.context import Context
from modelwalker.domain.exceptions import NoPathFoundError
from modelwalker.domain.graph import RuntimeEdge
from modelwalker.domain.interfaces import PathGeneratorInterface


class ScriptedPathGenerator(PathGeneratorInterface):
    """Takes a fixed sequence of edges, given by id or name."""

    def __init__(self, edges: list[str]):
        """
        Args:
            edges: Edge ids or names to take in order
        """
        self._edges = edges
        self._call_count = 0

    def has_next_step(self, context: Context) -> bool:
        return self._call_count < len(self._edges)

    def get_next_step(self, context: Context) -> RuntimeEdge:
        """Return the next scripted edge leaving the current vertex."""
        if self._call_count >= len(self._edges):
            raise NoPathFoundError("ScriptedPathGenerator exhausted its edges")

        key = self._edges[self._call_count]
        self._call_count += 1
        for edge in context.model.edges:
            if key in (edge.id, edge.name) and (
                edge.source_vertex == context.current_element
            ):
                return edge
        raise NoPathFoundError(f"No edge '{key}' leaves the current vertex")

    @property
    def call_count(self) -> int:
        """Number of times get_next_step() has been called."""
        return self._call_count

    def reset(self) -> None:
        """Reset the call counter to replay the script."""
        self._call_count = 0
