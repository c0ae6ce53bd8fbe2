"""Tests for NodeStatusTable."""

import pytest

from modelwalker.domain.exceptions import ModelError
from modelwalker.domain.graph import RuntimeModel
from modelwalker.domain.models import NodeStatus
from modelwalker.domain.status import NodeStatusTable


class TestNodeStatusTable:
    """Tests for per-session node status."""

    def test_default_is_not_covered(self, linear_model: RuntimeModel) -> None:
        table = NodeStatusTable(linear_model)

        assert all(
            table.get(v) is NodeStatus.NOT_COVERED for v in linear_model.vertices
        )

    def test_tables_are_independent(self, linear_model: RuntimeModel) -> None:
        """Two sessions over one model do not share status."""
        first, second = NodeStatusTable(linear_model), NodeStatusTable(linear_model)
        a = linear_model.vertices[0]

        first.set(a, NodeStatus.FAILED)

        assert second.get(a) is NodeStatus.NOT_COVERED

    def test_vertices_with(self, linear_model: RuntimeModel) -> None:
        table = NodeStatusTable(linear_model)
        a, _, c, _ = linear_model.vertices
        table.set(c, NodeStatus.COVERED)
        table.set(a, NodeStatus.COVERED)

        assert table.vertices_with(NodeStatus.COVERED) == [a, c]

    def test_snapshot_and_restore(self, linear_model: RuntimeModel) -> None:
        """A restored snapshot reproduces the saved statuses."""
        table = NodeStatusTable(linear_model)
        a, b, _, _ = linear_model.vertices
        table.set(a, NodeStatus.COVERED)
        table.set(b, NodeStatus.FAILED)
        snapshot = table.snapshot()

        restored = NodeStatusTable(linear_model)
        restored.restore(snapshot)

        assert restored.snapshot() == snapshot
        assert snapshot["vC"] is NodeStatus.NOT_COVERED

    def test_restore_resets_missing_vertices(self, linear_model: RuntimeModel) -> None:
        table = NodeStatusTable(linear_model)
        table.set(linear_model.vertices[3], NodeStatus.COVERED)

        table.restore({"vA": NodeStatus.COVERED})

        assert table.vertices_with(NodeStatus.COVERED) == [linear_model.vertices[0]]

    def test_restore_rejects_unknown_vertex(self, linear_model: RuntimeModel) -> None:
        table = NodeStatusTable(linear_model)

        with pytest.raises(ModelError, match="unknown vertex"):
            table.restore({"ghost": NodeStatus.COVERED})

    def test_restore_rejects_edge_id(self, linear_model: RuntimeModel) -> None:
        table = NodeStatusTable(linear_model)

        with pytest.raises(ModelError, match="non-vertex"):
            table.restore({"eAB": NodeStatus.COVERED})
