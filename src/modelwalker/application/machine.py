"""
Machine: steps execution contexts through their models.

Owns no session state of its own beyond which context is current. Step
failures are wrapped in a MachineException and handed to the configured
exception strategy; whatever the strategy re-raises ends the session.
"""

import logging
from collections.abc import Iterable

from modelwalker.application.execution_event_emitter import ExecutionEventEmitter
from modelwalker.application.strategies import FailFastStrategy
from modelwalker.domain.context import Context, Element
from modelwalker.domain.exceptions import MachineException, ModelError, NoPathFoundError
from modelwalker.domain.graph import RuntimeEdge, RuntimeVertex
from modelwalker.domain.interfaces import (
    ActionExecutorInterface,
    ExceptionStrategy,
    MachineInterface,
)
from modelwalker.domain.models import ExecutionResult, ExecutionStatus, NodeStatus

logger = logging.getLogger(__name__)


class Machine(MachineInterface):
    """
    Drives one or more contexts one step at a time.

    Contexts are driven in order; the first one that can still make progress
    is the current context.
    """

    def __init__(
        self,
        contexts: Context | Iterable[Context],
        exception_strategy: ExceptionStrategy | None = None,
        action_executor: ActionExecutorInterface | None = None,
        event_emitter: ExecutionEventEmitter | None = None,
    ):
        """
        Args:
            contexts: The session(s) to drive
            exception_strategy: Recovery policy for failed steps
                (FailFastStrategy if None)
            action_executor: Runs the behaviour of each element (none if None)
            event_emitter: Records the execution trace (no trace if None)

        Raises:
            ModelError: If there is no context, or a context has no way to start
        """
        if isinstance(contexts, Context):
            contexts = [contexts]
        self._contexts = list(contexts)
        if not self._contexts:
            raise ModelError("A machine needs at least one context")
        for context in self._contexts:
            if context.current_element is None:
                self._resolve_start(context)

        self._current_context = self._contexts[0]
        self._exception_strategy = exception_strategy or FailFastStrategy()
        self._action_executor = action_executor
        self._emitter = event_emitter

    @property
    def contexts(self) -> tuple[Context, ...]:
        return tuple(self._contexts)

    @property
    def current_context(self) -> Context:
        return self._current_context

    @property
    def exception_strategy(self) -> ExceptionStrategy:
        return self._exception_strategy

    @exception_strategy.setter
    def exception_strategy(self, strategy: ExceptionStrategy) -> None:
        self._exception_strategy = strategy

    def has_next_step(self) -> bool:
        """
        Whether any context can take another step.

        Contexts that are executing but have nothing left to do are marked
        COMPLETED.
        """
        return any(self._context_has_next_step(c) for c in self._contexts)

    def get_next_step(self) -> Context:
        """
        Take exactly one step in the current context.

        Returns:
            The context the step was taken in

        Raises:
            MachineException: If the step failed and the strategy gave up
            NoPathFoundError: If no context can take a step
        """
        context = self._select_context()
        if context.execution_status is ExecutionStatus.NOT_EXECUTED:
            context.set_execution_status(ExecutionStatus.EXECUTING)

        element = self._take_next_step(context)
        self._execute(context, element)
        return context

    def run(self, max_steps: int | None = None) -> ExecutionResult:
        """
        Step until nothing is left to do, a step budget is spent, or a failure
        ends the session.

        Step failures are reported in the result rather than raised.
        """
        taken = 0
        try:
            while self.has_next_step():
                if max_steps is not None and taken >= max_steps:
                    break
                self.get_next_step()
                taken += 1
        except MachineException as e:
            return self._result(e.context, e)
        return self._result(self._current_context)

    # -------------------------------------------------------------------------
    # Step selection
    # -------------------------------------------------------------------------

    def _context_has_next_step(self, context: Context) -> bool:
        if context.execution_status.is_terminal:
            return False
        current = context.current_element
        if (
            context.next_edge_try_again is not None
            or current is None
            or isinstance(current, RuntimeEdge)
        ):
            return True

        generator = context.path_generator
        if generator is not None and generator.has_next_step(context):
            return True

        if context.execution_status is ExecutionStatus.EXECUTING:
            context.set_execution_status(ExecutionStatus.COMPLETED)
            logger.info("Session completed: %s", context.coverage())
            if self._emitter is not None:
                self._emitter.completed(context)
        return False

    def _select_context(self) -> Context:
        for context in self._contexts:
            if self._context_has_next_step(context):
                self._current_context = context
                return context
        raise NoPathFoundError("No context can take another step")

    def _take_next_step(self, context: Context) -> Element:
        current = context.current_element
        staged = context.take_next_edge_try_again()

        element: Element | None
        if staged is not None:
            element = staged
        elif current is None:
            element = self._resolve_start(context)
        elif isinstance(current, RuntimeEdge):
            element = current.target_vertex
        else:
            generator = context.path_generator
            if generator is None:
                raise NoPathFoundError(
                    f"No path generator to leave vertex '{current.name or current.id}'"
                )
            element = generator.get_next_step(context)
            if element.source_vertex != current:
                raise ModelError(
                    f"Edge '{element.id}' does not leave the current vertex "
                    f"'{current.id}'"
                )

        if element is None:
            raise ModelError("Edge without a target vertex")
        context.set_current_element(element)
        return element

    @staticmethod
    def _resolve_start(context: Context) -> Element:
        if context.start_element is not None:
            return context.start_element
        start_edges = context.model.start_edges
        if len(start_edges) != 1:
            raise ModelError(
                f"Cannot choose a start element: model has {len(start_edges)} "
                "start edges and no start element was given"
            )
        return start_edges[0]

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _execute(self, context: Context, element: Element) -> None:
        context.record_visit(element)
        logger.debug("Executing '%s'", element.name or element.id)
        try:
            if self._action_executor is not None:
                self._action_executor.execute(context, element)
        except ModelError:
            raise
        except MachineException as e:
            self._handle_failure(e)
            return
        except Exception as e:
            self._handle_failure(MachineException(context, element, e))
            return

        if (
            isinstance(element, RuntimeVertex)
            and context.node_status.get(element) is not NodeStatus.FAILED
        ):
            context.node_status.set(element, NodeStatus.COVERED)
        if self._emitter is not None:
            self._emitter.step_pass(context, element)

    def _handle_failure(self, exception: MachineException) -> None:
        context = exception.context
        logger.warning("%s", exception)
        if self._emitter is not None:
            self._emitter.step_fail(exception)

        unreachable_before = set(
            context.node_status.vertices_with(NodeStatus.NOT_REACHABLE)
        )
        try:
            self._exception_strategy.handle(self, exception)
        except MachineException:
            context.set_execution_status(ExecutionStatus.FAILED)
            logger.error("Session terminated: %s", exception)
            if self._emitter is not None:
                self._emitter.terminated(exception)
            raise

        if self._emitter is not None:
            newly_unreachable = [
                v
                for v in context.node_status.vertices_with(NodeStatus.NOT_REACHABLE)
                if v not in unreachable_before
            ]
            self._emitter.not_reachable(context, newly_unreachable)
            self._emitter.recovered(context, type(self._exception_strategy).__name__)

    def _result(
        self, context: Context, failure: MachineException | None = None
    ) -> ExecutionResult:
        current = context.current_element
        last = context.last_element
        return ExecutionResult(
            status=context.execution_status,
            coverage=context.coverage(),
            steps=context.step_count,
            current_element_id=current.id if current is not None else None,
            last_element_id=last.id if last is not None else None,
            failed_element_id=failure.element.id if failure is not None else None,
            failure=str(failure) if failure is not None else "",
        )
