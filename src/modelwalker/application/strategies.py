"""
Exception strategies: how a session reacts to a failed step.

The default way of handling a failure is to stop the run and bail out
(FailFastStrategy). TryAgainStrategy walks back one step and retries the
failing transition once. BlackListStrategy walks back and keeps going while
avoiding the failed vertex for the rest of the session.
"""

import logging

from modelwalker.domain.context import Context
from modelwalker.domain.exceptions import MachineException
from modelwalker.domain.graph import RuntimeEdge, RuntimeVertex
from modelwalker.domain.interfaces import ExceptionStrategy, MachineInterface
from modelwalker.domain.models import ExecutionStatus, NodeStatus
from modelwalker.domain.reachability import compute_reachability

logger = logging.getLogger(__name__)


class FailFastStrategy(ExceptionStrategy):
    """Ends the session on the first failure."""

    def handle(self, machine: MachineInterface, exception: MachineException) -> None:
        exception.context.set_execution_status(ExecutionStatus.FAILED)
        raise exception


class TryAgainStrategy(ExceptionStrategy):
    """
    Retries the transition into a failed vertex exactly once.

    On the first failure of a vertex the session is moved back to the source
    vertex of the edge that led in, and that edge is staged as the next step.
    A second consecutive failure of the same vertex ends the session.
    """

    def handle(self, machine: MachineInterface, exception: MachineException) -> None:
        context = exception.context
        failed = exception.element

        if isinstance(failed, RuntimeEdge):
            # Edge failures are transient; only resume explicitly when the
            # target vertex is the one already known to fail.
            target = failed.target_vertex
            if (
                target is not None
                and context.node_status.get(target) is NodeStatus.FAILED
            ):
                context.set_execution_status(ExecutionStatus.EXECUTING)
            logger.warning("Ignoring failure on edge '%s'", failed.name or failed.id)
            return

        if context.node_status.get(failed) is NodeStatus.FAILED:
            logger.error(
                "Vertex '%s' failed again, giving up", failed.name or failed.id
            )
            context.set_execution_status(ExecutionStatus.FAILED)
            raise exception

        context.node_status.set(failed, NodeStatus.FAILED)
        edge = context.last_element
        if not isinstance(edge, RuntimeEdge) or edge.target_vertex != failed:
            logger.error(
                "Cannot retry vertex '%s': it was not entered through an edge",
                failed.name or failed.id,
            )
            context.set_execution_status(ExecutionStatus.FAILED)
            raise exception

        context.set_execution_status(ExecutionStatus.EXECUTING)
        current = machine.current_context
        # A start edge has no source; rewinding to "nothing" re-runs it.
        current.set_current_element(edge.source_vertex)
        current.set_next_edge_try_again(edge)
        logger.warning(
            "Retrying vertex '%s' through edge '%s'",
            failed.name or failed.id,
            edge.name or edge.id,
        )


class BlackListStrategy(ExceptionStrategy):
    """
    Avoids a failed vertex for the rest of the session.

    The failed vertex is marked FAILED, every uncovered vertex that can no
    longer be reached without it is marked NOT_REACHABLE, and the session
    continues from the vertex before the failure.
    """

    def __init__(self) -> None:
        self.last_unreachable: list[RuntimeVertex] = []

    def handle(self, machine: MachineInterface, exception: MachineException) -> None:
        context = exception.context
        failed = exception.element
        if not isinstance(failed, RuntimeVertex):
            return

        self.last_unreachable = compute_reachability(
            context.model, context.node_status, failed
        )
        if self.last_unreachable:
            logger.warning(
                "Vertex '%s' failed; %d vertices are no longer reachable",
                failed.name or failed.id,
                len(self.last_unreachable),
            )
        context.set_execution_status(ExecutionStatus.EXECUTING)

        last = context.last_element
        new_start = last.source_vertex if isinstance(last, RuntimeEdge) else None
        if new_start is None:
            logger.error(
                "Cannot rewind from vertex '%s': no vertex precedes it",
                failed.name or failed.id,
            )
            context.set_execution_status(ExecutionStatus.FAILED)
            raise exception

        back_edge = self._find_back_edge(context, failed, new_start)
        current = machine.current_context
        current.set_current_element(new_start)
        if back_edge is not None:
            current.set_next_edge_try_again(back_edge)
        elif not self._has_healthy_exit(context, new_start):
            logger.error(
                "Vertex '%s' has no way forward after blacklisting '%s'",
                new_start.name or new_start.id,
                failed.name or failed.id,
            )
            context.set_execution_status(ExecutionStatus.FAILED)
            raise exception

        logger.warning(
            "Blacklisted vertex '%s', resuming from '%s'",
            failed.name or failed.id,
            new_start.name or new_start.id,
        )

    @staticmethod
    def _find_back_edge(
        context: Context, failed: RuntimeVertex, new_start: RuntimeVertex
    ) -> RuntimeEdge | None:
        for edge in context.model.edges:
            if edge.source_vertex == failed and edge.target_vertex == new_start:
                return edge
        return None

    @staticmethod
    def _has_healthy_exit(context: Context, vertex: RuntimeVertex) -> bool:
        return any(
            edge.target_vertex is not None
            and context.node_status.get(edge.target_vertex) is not NodeStatus.FAILED
            for edge in context.model.get_out_edges(vertex)
        )
