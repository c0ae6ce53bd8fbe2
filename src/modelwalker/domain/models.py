"""
Domain models for the model-based test engine.

Pure data structures shared by the graph, the execution context and the
recovery strategies. Value objects are frozen dataclasses; status values are
enums so they serialize by value.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modelwalker.domain.status import NodeStatusTable


# =============================================================================
# STATUS ENUMS
# =============================================================================


class NodeStatus(Enum):
    """Coverage/failure marker attached to a vertex for one session."""

    NOT_COVERED = "not_covered"  # Default
    COVERED = "covered"  # Entered successfully at least once
    FAILED = "failed"  # A step on this vertex raised
    NOT_REACHABLE = "not_reachable"  # Cut off by a failed vertex


class ExecutionStatus(Enum):
    """Overall status of an execution context."""

    NOT_EXECUTED = "not_executed"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"  # Terminal

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)


# =============================================================================
# ELEMENT VALUE OBJECTS
# =============================================================================


@dataclass(frozen=True)
class Action:
    """A piece of code run when an element is traversed."""

    script: str


@dataclass(frozen=True)
class Guard:
    """Condition that must hold before an edge may be taken."""

    script: str


@dataclass(frozen=True)
class Requirement:
    """Requirement verified by visiting an element."""

    key: str


# =============================================================================
# COVERAGE AND RESULTS
# =============================================================================


@dataclass(frozen=True)
class CoverageSummary:
    """Point-in-time vertex coverage of one session."""

    total: int
    covered: int
    not_covered: int
    failed: int
    not_reachable: int

    @property
    def raw_coverage(self) -> float:
        """Covered vertices over all vertices."""
        if self.total == 0:
            return 1.0
        return self.covered / self.total

    @property
    def reachable_coverage(self) -> float:
        """Covered vertices over vertices that can still be reached."""
        reachable = self.total - self.not_reachable
        if reachable == 0:
            return 1.0
        return self.covered / reachable

    @classmethod
    def from_statuses(cls, table: "NodeStatusTable") -> "CoverageSummary":
        return cls.from_snapshot(table.snapshot())

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, NodeStatus]) -> "CoverageSummary":
        """Summarize a saved snapshot (vertex id -> status)."""
        counts = dict.fromkeys(NodeStatus, 0)
        for status in snapshot.values():
            counts[status] += 1
        return cls(
            total=len(snapshot),
            covered=counts[NodeStatus.COVERED],
            not_covered=counts[NodeStatus.NOT_COVERED],
            failed=counts[NodeStatus.FAILED],
            not_reachable=counts[NodeStatus.NOT_REACHABLE],
        )


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running a machine until it stops."""

    status: ExecutionStatus
    coverage: CoverageSummary
    steps: int
    current_element_id: str | None = None
    last_element_id: str | None = None
    failed_element_id: str | None = None
    failure: str = ""  # Cause of termination (empty on success)


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class MachineConfig:
    """Session configuration selected before traversal starts."""

    strategy: str = "FailFastStrategy"
    max_steps: int | None = None
    seed: int | None = None
    session_id: str = "default"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MachineConfig":
        """Build a config from a plain mapping (e.g. parsed JSON).

        Raises:
            ValueError: If the mapping holds keys this config does not know.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown machine config keys: {', '.join(unknown)}")
        return cls(**data)
