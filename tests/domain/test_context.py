"""Tests for Context - per-session traversal state."""

import pytest

from modelwalker.domain.context import Context
from modelwalker.domain.exceptions import ModelError
from modelwalker.domain.graph import RuntimeEdge, RuntimeModel, Vertex
from modelwalker.domain.models import ExecutionStatus, NodeStatus


class TestContextInit:
    """Tests for Context initialization."""

    def test_initial_state(self, linear_model: RuntimeModel) -> None:
        """A new context has not started."""
        context = Context(linear_model)

        assert context.current_element is None
        assert context.last_element is None
        assert context.next_edge_try_again is None
        assert context.execution_status is ExecutionStatus.NOT_EXECUTED
        assert context.step_count == 0

    def test_start_element_must_be_in_model(self, linear_model: RuntimeModel) -> None:
        with pytest.raises(ModelError):
            Context(linear_model, start_element=Vertex(id="elsewhere").build())


class TestContextMutation:
    """Tests for the mutation entry points used by the machine and strategies."""

    def test_set_current_element_tracks_last(self, linear_model: RuntimeModel) -> None:
        context = Context(linear_model)
        a, b = linear_model.vertices[0], linear_model.vertices[1]

        context.set_current_element(a)
        context.set_current_element(b)

        assert context.current_element is b
        assert context.last_element is a

    def test_set_current_element_rejects_foreign_element(
        self, linear_model: RuntimeModel
    ) -> None:
        context = Context(linear_model)

        with pytest.raises(ModelError, match="not part of the model"):
            context.set_current_element(Vertex(id="ghost").build())

    def test_try_again_edge_is_taken_once(self, linear_model: RuntimeModel) -> None:
        """The staged edge is cleared when taken."""
        context = Context(linear_model)
        edge = linear_model.get_element("eAB")
        assert isinstance(edge, RuntimeEdge)

        context.set_next_edge_try_again(edge)

        assert context.take_next_edge_try_again() is edge
        assert context.take_next_edge_try_again() is None

    def test_strategies_cannot_change_model(self, linear_model: RuntimeModel) -> None:
        """Context mutations leave the model's collections untouched."""
        context = Context(linear_model)
        before = (linear_model.vertices, linear_model.edges)

        context.set_current_element(linear_model.vertices[2])
        context.set_execution_status(ExecutionStatus.EXECUTING)
        context.node_status.set(linear_model.vertices[2], NodeStatus.FAILED)

        assert (linear_model.vertices, linear_model.edges) == before

    def test_visits_and_coverage(self, linear_model: RuntimeModel) -> None:
        context = Context(linear_model)
        a = linear_model.vertices[0]

        context.record_visit(a)
        context.record_visit(a)
        context.node_status.set(a, NodeStatus.COVERED)

        assert context.visit_count(a) == 2
        assert context.step_count == 2
        assert context.coverage().covered == 1
        assert context.coverage().total == 4
