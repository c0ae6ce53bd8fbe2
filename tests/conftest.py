"""Shared pytest fixtures for modelwalker tests."""

import pytest

from modelwalker.domain.context import Context
from modelwalker.domain.graph import Edge, Model, RuntimeModel, Vertex
from modelwalker.infrastructure.generators.mock import ScriptedPathGenerator
from modelwalker.infrastructure.persistence.execution_events import (
    InMemoryExecutionEventStore,
)
from modelwalker.infrastructure.persistence.memory import InMemoryNodeStatusStore


class RecordingImplementation:
    """
    Test object whose methods are named after model elements.

    Every call is recorded. Names listed in ``failures`` raise RuntimeError
    for as many calls as their count.
    """

    def __init__(self, failures: dict[str, int] | None = None) -> None:
        self.calls: list[str] = []
        self._failures = dict(failures or {})

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        def step() -> None:
            self.calls.append(name)
            if self._failures.get(name, 0) > 0:
                self._failures[name] -= 1
                raise RuntimeError(f"{name} broke")

        return step


def build_linear_model() -> Model:
    """e_Start -> v_A -e_AB-> v_B -e_BC-> v_C -e_CD-> v_D."""
    a, b, c, d = (Vertex(id=f"v{n}", name=f"v_{n}") for n in "ABCD")
    return (
        Model(id="linear", name="Linear")
        .add_edge(Edge(id="e0", name="e_Start", target_vertex=a))
        .add_edge(Edge(id="eAB", name="e_AB", source_vertex=a, target_vertex=b))
        .add_edge(Edge(id="eBC", name="e_BC", source_vertex=b, target_vertex=c))
        .add_edge(Edge(id="eCD", name="e_CD", source_vertex=c, target_vertex=d))
    )


@pytest.fixture
def linear_builder() -> Model:
    """Mutable linear model builder."""
    return build_linear_model()


@pytest.fixture
def linear_model(linear_builder: Model) -> RuntimeModel:
    """Runtime twin of the linear model."""
    return linear_builder.build()


@pytest.fixture
def linear_context(linear_model: RuntimeModel) -> Context:
    """Context walking the linear model straight through."""
    return Context(linear_model, ScriptedPathGenerator(["e_AB", "e_BC", "e_CD"]))


@pytest.fixture
def status_store() -> InMemoryNodeStatusStore:
    """In-memory node status store."""
    return InMemoryNodeStatusStore()


@pytest.fixture
def event_store() -> InMemoryExecutionEventStore:
    """In-memory execution event store."""
    return InMemoryExecutionEventStore()


@pytest.fixture
def make_implementation():
    """Factory for RecordingImplementation test objects."""
    return RecordingImplementation
