"""Execution trace models."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class ExecutionEventType(str, Enum):
    """Types of execution events."""

    STEP_PASS = "STEP_PASS"
    STEP_FAIL = "STEP_FAIL"
    RECOVERED = "RECOVERED"
    NOT_REACHABLE = "NOT_REACHABLE"
    TERMINATED = "TERMINATED"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class ExecutionEvent:
    """Single state transition of a session.

    Captures enough of the context to tell which vertex/edge chain led to a
    failure without keeping the context alive.
    """

    event_id: str
    event_type: ExecutionEventType
    session_id: str
    sequence: int  # Emission order within the session
    element_id: str | None = None
    element_name: str | None = None
    last_element_id: str | None = None
    execution_status: str | None = None
    summary: str = ""
    created_at: str = ""  # ISO 8601


FAILURE_EVENT_TYPES = frozenset(
    {
        ExecutionEventType.STEP_FAIL,
        ExecutionEventType.RECOVERED,
        ExecutionEventType.NOT_REACHABLE,
        ExecutionEventType.TERMINATED,
    }
)


def select_events(
    events: Iterable[ExecutionEvent],
    session_id: str,
    event_type: ExecutionEventType | None = None,
    element_id: str | None = None,
) -> list[ExecutionEvent]:
    """Events of one session matching the filters, in emission order."""
    return sorted(
        (
            e
            for e in events
            if e.session_id == session_id
            and (event_type is None or e.event_type == event_type)
            and (element_id is None or e.element_id == element_id)
        ),
        key=lambda e: e.sequence,
    )


def failure_chain(events: Iterable[ExecutionEvent]) -> list[ExecutionEvent]:
    """
    Failure-related events of a session, in emission order.

    Collects every STEP_FAIL, RECOVERED and NOT_REACHABLE event and stops at
    the TERMINATED event, if any. For a session that recovered from all of its
    failures this is the list of what went wrong along the way; for a session
    that was terminated it ends with the step that ended it.
    """
    chain: list[ExecutionEvent] = []
    for event in sorted(events, key=lambda e: e.sequence):
        if event.event_type not in FAILURE_EVENT_TYPES:
            continue
        chain.append(event)
        if event.event_type is ExecutionEventType.TERMINATED:
            break
    return chain
