"""
Filesystem implementation of the node status store.

Each session's snapshot is a JSON file under the base directory, replaced
atomically on every save.
"""

import json
from pathlib import Path
from typing import Any

from modelwalker.domain.interfaces import NodeStatusStoreInterface
from modelwalker.domain.models import NodeStatus


class FilesystemNodeStatusStore(NodeStatusStoreInterface):
    """
    Persistent node status snapshots.

    Layout: {base_dir}/status/{session_id}.json holding
    {"version": "1.0", "session_id": ..., "statuses": {vertex_id: value}}.
    """

    def __init__(self, base_dir: str | Path):
        self._base_dir = Path(base_dir)
        self._status_dir = self._base_dir / "status"
        self._status_dir.mkdir(parents=True, exist_ok=True)

    def _get_session_path(self, session_id: str) -> Path:
        return self._status_dir / f"{session_id}.json"

    def save(self, session_id: str, snapshot: dict[str, NodeStatus]) -> None:
        """Write the snapshot using write-to-temp + rename."""
        data: dict[str, Any] = {
            "version": "1.0",
            "session_id": session_id,
            "statuses": {
                vertex_id: status.value for vertex_id, status in snapshot.items()
            },
        }
        path = self._get_session_path(session_id)
        temp_path = path.with_suffix(".tmp")
        with open(temp_path, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        temp_path.rename(path)  # Atomic on POSIX

    def load(self, session_id: str) -> dict[str, NodeStatus]:
        path = self._get_session_path(session_id)
        if not path.exists():
            raise KeyError(f"No status snapshot for session: {session_id}")
        with open(path) as f:
            data = json.load(f)
        return {
            vertex_id: NodeStatus(value)
            for vertex_id, value in data["statuses"].items()
        }

    def sessions(self) -> list[str]:
        return sorted(p.stem for p in self._status_dir.glob("*.json"))
