"""Execution event emission service."""

import itertools
import uuid
from datetime import datetime, timezone

from modelwalker.domain.context import Context, Element
from modelwalker.domain.exceptions import MachineException
from modelwalker.domain.execution_event import ExecutionEvent, ExecutionEventType
from modelwalker.domain.graph import RuntimeVertex
from modelwalker.domain.interfaces import ExecutionEventStoreInterface


class ExecutionEventEmitter:
    """Emits execution events to a store.

    Provides convenience methods for the events of a session, handling IDs,
    sequence numbers and timestamps.
    """

    def __init__(
        self, event_store: ExecutionEventStoreInterface, session_id: str
    ) -> None:
        self._store = event_store
        self._session_id = session_id
        self._sequence = itertools.count(1)

    @property
    def session_id(self) -> str:
        return self._session_id

    def _emit(
        self,
        event_type: ExecutionEventType,
        context: Context,
        element: Element | None = None,
        summary: str = "",
    ) -> str:
        event = ExecutionEvent(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            session_id=self._session_id,
            sequence=next(self._sequence),
            element_id=element.id if element is not None else None,
            element_name=element.name if element is not None else None,
            last_element_id=(
                context.last_element.id if context.last_element is not None else None
            ),
            execution_status=context.execution_status.value,
            summary=summary[:500],
            created_at=self._now(),
        )
        return self._store.store_event(event)

    def _now(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def step_pass(self, context: Context, element: Element) -> None:
        """Emit STEP_PASS when an element was executed successfully."""
        self._emit(ExecutionEventType.STEP_PASS, context, element)

    def step_fail(self, exception: MachineException) -> None:
        """Emit STEP_FAIL before the failure is handed to the strategy."""
        self._emit(
            ExecutionEventType.STEP_FAIL,
            exception.context,
            exception.element,
            summary=str(exception),
        )

    def recovered(self, context: Context, strategy_name: str) -> None:
        """Emit RECOVERED when a strategy let the session continue."""
        self._emit(
            ExecutionEventType.RECOVERED,
            context,
            context.current_element,
            summary=f"Recovered by {strategy_name}",
        )

    def not_reachable(self, context: Context, vertices: list[RuntimeVertex]) -> None:
        """Emit one NOT_REACHABLE event per vertex cut off by a failure."""
        for vertex in vertices:
            self._emit(ExecutionEventType.NOT_REACHABLE, context, vertex)

    def terminated(self, exception: MachineException) -> None:
        """Emit TERMINATED when a failure ended the session."""
        self._emit(
            ExecutionEventType.TERMINATED,
            exception.context,
            exception.element,
            summary=str(exception),
        )

    def completed(self, context: Context) -> None:
        """Emit COMPLETED when the path generator has nothing left to do."""
        self._emit(ExecutionEventType.COMPLETED, context, context.current_element)
