"""Tests for reachability of uncovered vertices after a failure."""

from modelwalker.domain.graph import Edge, Model, RuntimeModel, RuntimeVertex, Vertex
from modelwalker.domain.models import NodeStatus
from modelwalker.domain.reachability import ReachabilityAnalysis, compute_reachability
from modelwalker.domain.status import NodeStatusTable


def build_model(*pairs: str, isolated: tuple[str, ...] = ()) -> RuntimeModel:
    """Build a model from "XY" pairs meaning an edge from X to Y."""
    vertices: dict[str, Vertex] = {}

    def vertex(name: str) -> Vertex:
        return vertices.setdefault(name, Vertex(id=name, name=name))

    model = Model()
    for pair in pairs:
        source, target = pair
        model.add_edge(
            Edge(id=pair, source_vertex=vertex(source), target_vertex=vertex(target))
        )
    for name in isolated:
        model.add_vertex(vertex(name))
    return model.build()


def vertex(model: RuntimeModel, vertex_id: str) -> RuntimeVertex:
    element = model.get_element(vertex_id)
    assert isinstance(element, RuntimeVertex)
    return element


def statuses(model: RuntimeModel, **marks: NodeStatus) -> NodeStatusTable:
    table = NodeStatusTable(model)
    for vertex_id, status in marks.items():
        table.set(vertex(model, vertex_id), status)
    return table


class TestComputeReachability:
    """Tests for compute_reachability()."""

    def test_chain_behind_failure_is_unreachable(self) -> None:
        """Everything downstream of the only path through a failure is cut off."""
        model = build_model("AB", "BC", "CD")
        table = statuses(model, A=NodeStatus.COVERED)

        unreachable = compute_reachability(model, table, vertex(model, "B"))

        assert [v.id for v in unreachable] == ["C", "D"]
        assert table.snapshot() == {
            "A": NodeStatus.COVERED,
            "B": NodeStatus.FAILED,
            "C": NodeStatus.NOT_REACHABLE,
            "D": NodeStatus.NOT_REACHABLE,
        }

    def test_alternative_path_keeps_vertex_reachable(self) -> None:
        """A vertex with another uncovered route from a covered vertex survives."""
        model = build_model("AB", "AC", "BD", "CD")
        table = statuses(model, A=NodeStatus.COVERED)

        unreachable = compute_reachability(model, table, vertex(model, "B"))

        assert unreachable == []
        assert table.get(vertex(model, "C")) is NodeStatus.NOT_COVERED
        assert table.get(vertex(model, "D")) is NodeStatus.NOT_COVERED

    def test_vertex_without_incoming_edges_is_unreachable(self) -> None:
        """An uncovered vertex with no ancestor at all cannot be reached."""
        model = build_model("AB", isolated=("Z",))
        table = statuses(model, A=NodeStatus.COVERED)

        unreachable = compute_reachability(model, table, vertex(model, "B"))

        assert [v.id for v in unreachable] == ["Z"]

    def test_uncovered_cycle_behind_failure(self) -> None:
        """A cycle of uncovered vertices fed only by the failure is unreachable."""
        model = build_model("AB", "BC", "CD", "DC")
        table = statuses(model, A=NodeStatus.COVERED)

        unreachable = compute_reachability(model, table, vertex(model, "B"))

        assert {v.id for v in unreachable} == {"C", "D"}

    def test_uncovered_cycle_fed_by_covered_vertex(self) -> None:
        """A cycle entered from a covered vertex stays reachable."""
        model = build_model("AB", "AC", "CD", "DC", "BD")
        table = statuses(model, A=NodeStatus.COVERED)

        unreachable = compute_reachability(model, table, vertex(model, "B"))

        assert unreachable == []

    def test_covered_and_failed_never_change(self) -> None:
        """Only NOT_COVERED vertices are ever marked NOT_REACHABLE."""
        model = build_model("AB", "BC", "CD")
        table = statuses(
            model,
            A=NodeStatus.COVERED,
            C=NodeStatus.FAILED,
            D=NodeStatus.COVERED,
        )

        compute_reachability(model, table, vertex(model, "B"))

        assert table.get(vertex(model, "C")) is NodeStatus.FAILED
        assert table.get(vertex(model, "D")) is NodeStatus.COVERED

    def test_second_failure_only_adds_unreachable(self) -> None:
        """Reachability shrinks monotonically over successive failures."""
        model = build_model("AB", "AC", "BD", "CD", "DE")
        table = statuses(model, A=NodeStatus.COVERED)

        first = compute_reachability(model, table, vertex(model, "B"))
        second = compute_reachability(model, table, vertex(model, "C"))

        assert first == []
        assert [v.id for v in second] == ["D", "E"]
        assert table.get(vertex(model, "B")) is NodeStatus.FAILED


class TestReachabilityAnalysis:
    """Tests for ReachabilityAnalysis."""

    def test_adjacency(self) -> None:
        model = build_model("AB", "AC", "CB")
        analysis = ReachabilityAnalysis(model, NodeStatusTable(model))

        assert {v.id for v in analysis.targets(vertex(model, "A"))} == {"B", "C"}
        assert {v.id for v in analysis.sources(vertex(model, "B"))} == {"A", "C"}

    def test_failed_vertex_is_not_reachable(self) -> None:
        model = build_model("AB")
        table = statuses(model, A=NodeStatus.COVERED, B=NodeStatus.FAILED)

        assert not ReachabilityAnalysis(model, table).is_reachable(vertex(model, "B"))

    def test_reachable_through_uncovered_chain(self) -> None:
        model = build_model("AB", "BC", "CD")
        table = statuses(model, A=NodeStatus.COVERED)

        assert ReachabilityAnalysis(model, table).is_reachable(vertex(model, "D"))
