"""Execution trace stores: in memory, and one JSONL file per session."""

import json
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import asdict
from pathlib import Path
from typing import Any

from modelwalker.domain.execution_event import (
    ExecutionEvent,
    ExecutionEventType,
    failure_chain,
    select_events,
)
from modelwalker.domain.interfaces import ExecutionEventStoreInterface


class InMemoryExecutionEventStore(ExecutionEventStoreInterface):
    """In-memory implementation for testing."""

    def __init__(self) -> None:
        self._traces: dict[str, list[ExecutionEvent]] = defaultdict(list)

    def store_event(self, event: ExecutionEvent) -> str:
        self._traces[event.session_id].append(event)
        return event.event_id

    def get_events(
        self,
        session_id: str,
        event_type: ExecutionEventType | None = None,
        element_id: str | None = None,
    ) -> list[ExecutionEvent]:
        return select_events(
            self._traces.get(session_id, ()), session_id, event_type, element_id
        )

    def get_failure_chain(self, session_id: str) -> list[ExecutionEvent]:
        return failure_chain(self._traces.get(session_id, ()))


class FilesystemExecutionEventStore(ExecutionEventStoreInterface):
    """
    Append-only trace files under ``<base>/events/<session_id>.jsonl``.

    Each step is written as soon as it is emitted, so a trace can be followed
    while the session is still walking and survives a crash mid-walk.
    """

    def __init__(self, base_path: str | Path) -> None:
        self.events_dir = Path(base_path) / "events"
        self.events_dir.mkdir(parents=True, exist_ok=True)

    def trace_path(self, session_id: str) -> Path:
        return self.events_dir / f"{session_id}.jsonl"

    def store_event(self, event: ExecutionEvent) -> str:
        with self.trace_path(event.session_id).open("a", encoding="utf-8") as f:
            f.write(json.dumps(_to_record(event)) + "\n")
        return event.event_id

    def get_events(
        self,
        session_id: str,
        event_type: ExecutionEventType | None = None,
        element_id: str | None = None,
    ) -> list[ExecutionEvent]:
        return select_events(self._read(session_id), session_id, event_type, element_id)

    def get_failure_chain(self, session_id: str) -> list[ExecutionEvent]:
        return failure_chain(self._read(session_id))

    def _read(self, session_id: str) -> Iterator[ExecutionEvent]:
        path = self.trace_path(session_id)
        if not path.exists():
            return
        with path.open(encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    yield _from_record(json.loads(line))


def _to_record(event: ExecutionEvent) -> dict[str, Any]:
    record = asdict(event)
    record["event_type"] = event.event_type.value
    return record


def _from_record(record: dict[str, Any]) -> ExecutionEvent:
    return ExecutionEvent(
        **{**record, "event_type": ExecutionEventType(record["event_type"])}
    )
