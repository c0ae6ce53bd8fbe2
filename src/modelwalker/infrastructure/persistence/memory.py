"""
In-memory implementation of the node status store.

Useful for testing and ephemeral sessions.
"""

from modelwalker.domain.interfaces import NodeStatusStoreInterface
from modelwalker.domain.models import NodeStatus


class InMemoryNodeStatusStore(NodeStatusStoreInterface):
    """Simple in-memory snapshot store for testing."""

    def __init__(self) -> None:
        self._snapshots: dict[str, dict[str, NodeStatus]] = {}

    def save(self, session_id: str, snapshot: dict[str, NodeStatus]) -> None:
        self._snapshots[session_id] = dict(snapshot)

    def load(self, session_id: str) -> dict[str, NodeStatus]:
        if session_id not in self._snapshots:
            raise KeyError(f"No status snapshot for session: {session_id}")
        return dict(self._snapshots[session_id])

    def sessions(self) -> list[str]:
        return list(self._snapshots)
