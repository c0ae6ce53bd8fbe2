"""
Graph elements: mutable builders and their immutable runtime twins.

A builder (Vertex, Edge, Model) is edited while a model is authored. Calling
build() returns an immutable runtime twin (RuntimeVertex, RuntimeEdge,
RuntimeModel). The twin is cached: repeated build() calls return the same
instance until the builder, or a builder it depends on, is mutated.
"""

import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from modelwalker.domain.exceptions import ModelError
from modelwalker.domain.models import Action, Guard, Requirement

T = TypeVar("T")


# =============================================================================
# CACHED BUILDER
# =============================================================================


class CachedBuilder(ABC, Generic[T]):
    """
    Builder that lazily creates and caches an immutable twin.

    Subclasses call invalidate_cache() from every mutator and may override
    _is_stale() when the twin also depends on other builders.
    """

    def __init__(self) -> None:
        self._cache: T | None = None

    def build(self) -> T:
        """Return the runtime twin, creating it if the cache is empty or stale."""
        if self._cache is None or self._is_stale(self._cache):
            self._cache = self._create_cache()
        return self._cache

    def invalidate_cache(self) -> None:
        self._cache = None

    def _is_stale(self, cache: T) -> bool:
        return False

    @abstractmethod
    def _create_cache(self) -> T:
        pass


class ElementBuilder(CachedBuilder[T]):
    """Attributes shared by every graph element builder."""

    def __init__(self, id: str | None = None, name: str | None = None) -> None:
        super().__init__()
        self._id = id or str(uuid.uuid4())
        self._name = name
        self._actions: list[Action] = []
        self._requirements: set[Requirement] = set()
        self._properties: dict[str, Any] = {}

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def actions(self) -> tuple[Action, ...]:
        return tuple(self._actions)

    @property
    def requirements(self) -> frozenset[Requirement]:
        return frozenset(self._requirements)

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self._properties)

    def set_id(self, id: str):
        self._id = id
        self.invalidate_cache()
        return self

    def set_name(self, name: str | None):
        self._name = name
        self.invalidate_cache()
        return self

    def add_action(self, action: Action):
        """Append an action run each time the element is traversed."""
        self._actions.append(action)
        self.invalidate_cache()
        return self

    def add_actions(self, actions: Iterable[Action]):
        self._actions.extend(actions)
        self.invalidate_cache()
        return self

    def set_actions(self, actions: Iterable[Action]):
        self._actions = list(actions)
        self.invalidate_cache()
        return self

    def add_requirement(self, requirement: Requirement):
        self._requirements.add(requirement)
        self.invalidate_cache()
        return self

    def set_requirements(self, requirements: Iterable[Requirement]):
        self._requirements = set(requirements)
        self.invalidate_cache()
        return self

    def set_property(self, key: str, value: Any):
        """Set a property. Values may be any object, hashable or not."""
        self._properties[key] = value
        self.invalidate_cache()
        return self

    def set_properties(self, properties: dict[str, Any]):
        self._properties = dict(properties)
        self.invalidate_cache()
        return self

    def _frozen_properties(self) -> tuple[tuple[str, Any], ...]:
        return tuple(sorted(self._properties.items()))


# =============================================================================
# RUNTIME TWINS
# =============================================================================


@dataclass(frozen=True)
class RuntimeElement:
    """
    Immutable fields shared by runtime vertices and edges.

    Actions, requirements and properties take part in equality but not in the
    hash, so property values need not be hashable.
    """

    id: str
    name: str | None = None
    actions: tuple[Action, ...] = field(default=(), hash=False)
    requirements: frozenset[Requirement] = field(default=frozenset(), hash=False)
    properties: tuple[tuple[str, Any], ...] = field(default=(), hash=False)

    def has_name(self) -> bool:
        return bool(self.name)

    def has_property(self, key: str) -> bool:
        return any(k == key for k, _ in self.properties)

    def get_property(self, key: str, default: Any = None) -> Any:
        for k, value in self.properties:
            if k == key:
                return value
        return default


@dataclass(frozen=True)
class RuntimeVertex(RuntimeElement):
    """
    Immutable snapshot of a Vertex.

    Session status (NodeStatus) is not part of the snapshot; it lives in the
    NodeStatusTable of the context driving the session.
    """

    shared_state: str | None = None

    def has_shared_state(self) -> bool:
        """True if the vertex is a junction point to other models."""
        return bool(self.shared_state)


@dataclass(frozen=True)
class RuntimeEdge(RuntimeElement):
    """Immutable snapshot of an Edge. A missing source marks a start edge."""

    source_vertex: RuntimeVertex | None = None
    target_vertex: RuntimeVertex | None = None
    guard: Guard | None = None
    weight: float = 0.0

    def is_start_edge(self) -> bool:
        return self.source_vertex is None


# =============================================================================
# BUILDERS
# =============================================================================


class Vertex(ElementBuilder[RuntimeVertex]):
    """
    A state of the system under test.

    The vertex is where a test verifies that the system is in the expected
    state. It is uniquely identified by its id within a model.
    """

    def __init__(
        self,
        id: str | None = None,
        name: str | None = None,
        shared_state: str | None = None,
    ) -> None:
        super().__init__(id, name)
        self._shared_state = shared_state

    @property
    def shared_state(self) -> str | None:
        return self._shared_state

    def set_shared_state(self, shared_state: str | None) -> "Vertex":
        """
        Name the shared state this vertex joins.

        Vertices sharing a non-empty name in different models are linked by
        virtual edges, allowing traversal to pass between the models.
        """
        self._shared_state = shared_state
        self.invalidate_cache()
        return self

    def _create_cache(self) -> RuntimeVertex:
        return RuntimeVertex(
            id=self._id,
            name=self._name,
            actions=tuple(self._actions),
            requirements=frozenset(self._requirements),
            properties=self._frozen_properties(),
            shared_state=self._shared_state,
        )


class Edge(ElementBuilder[RuntimeEdge]):
    """A transition between two vertices."""

    def __init__(
        self,
        id: str | None = None,
        name: str | None = None,
        source_vertex: Vertex | None = None,
        target_vertex: Vertex | None = None,
    ) -> None:
        super().__init__(id, name)
        self._source_vertex = source_vertex
        self._target_vertex = target_vertex
        self._guard: Guard | None = None
        self._weight = 0.0

    @property
    def source_vertex(self) -> Vertex | None:
        return self._source_vertex

    @property
    def target_vertex(self) -> Vertex | None:
        return self._target_vertex

    @property
    def guard(self) -> Guard | None:
        return self._guard

    @property
    def weight(self) -> float:
        return self._weight

    def set_source_vertex(self, vertex: Vertex | None) -> "Edge":
        self._source_vertex = vertex
        self.invalidate_cache()
        return self

    def set_target_vertex(self, vertex: Vertex | None) -> "Edge":
        self._target_vertex = vertex
        self.invalidate_cache()
        return self

    def set_guard(self, guard: Guard | None) -> "Edge":
        self._guard = guard
        self.invalidate_cache()
        return self

    def set_weight(self, weight: float) -> "Edge":
        self._weight = weight
        self.invalidate_cache()
        return self

    def _is_stale(self, cache: RuntimeEdge) -> bool:
        # Endpoints are builders too; a rebuilt endpoint means a stale edge.
        return cache.source_vertex is not _build_or_none(
            self._source_vertex
        ) or cache.target_vertex is not _build_or_none(self._target_vertex)

    def _create_cache(self) -> RuntimeEdge:
        return RuntimeEdge(
            id=self._id,
            name=self._name,
            actions=tuple(self._actions),
            requirements=frozenset(self._requirements),
            properties=self._frozen_properties(),
            source_vertex=_build_or_none(self._source_vertex),
            target_vertex=_build_or_none(self._target_vertex),
            guard=self._guard,
            weight=self._weight,
        )


def _build_or_none(vertex: Vertex | None) -> RuntimeVertex | None:
    return vertex.build() if vertex is not None else None


class Model(CachedBuilder["RuntimeModel"]):
    """Mutable collection of vertices and edges."""

    def __init__(self, id: str | None = None, name: str | None = None) -> None:
        super().__init__()
        self._id = id or str(uuid.uuid4())
        self._name = name
        self._vertices: list[Vertex] = []
        self._edges: list[Edge] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self._vertices)

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    def set_name(self, name: str | None) -> "Model":
        self._name = name
        self.invalidate_cache()
        return self

    def add_vertex(self, vertex: Vertex) -> "Model":
        if vertex not in self._vertices:
            self._vertices.append(vertex)
            self.invalidate_cache()
        return self

    def add_edge(self, edge: Edge) -> "Model":
        """Add an edge, adding its endpoints to the model when missing."""
        self._edges.append(edge)
        for vertex in (edge.source_vertex, edge.target_vertex):
            if vertex is not None and vertex not in self._vertices:
                self._vertices.append(vertex)
        self.invalidate_cache()
        return self

    def delete_edge(self, edge: Edge) -> "Model":
        self._edges.remove(edge)
        self.invalidate_cache()
        return self

    def delete_vertex(self, vertex: Vertex) -> "Model":
        """Remove a vertex and every edge touching it."""
        self._edges = [
            e
            for e in self._edges
            if e.source_vertex is not vertex and e.target_vertex is not vertex
        ]
        self._vertices.remove(vertex)
        self.invalidate_cache()
        return self

    def _is_stale(self, cache: "RuntimeModel") -> bool:
        if len(cache.vertices) != len(self._vertices) or len(cache.edges) != len(
            self._edges
        ):
            return True
        vertices_changed = any(
            built is not vertex.build()
            for built, vertex in zip(cache.vertices, self._vertices, strict=True)
        )
        edges_changed = any(
            built is not edge.build()
            for built, edge in zip(cache.edges, self._edges, strict=True)
        )
        return vertices_changed or edges_changed

    def _create_cache(self) -> "RuntimeModel":
        return RuntimeModel(
            id=self._id,
            name=self._name,
            vertices=[v.build() for v in self._vertices],
            edges=[e.build() for e in self._edges],
        )


# =============================================================================
# RUNTIME MODEL
# =============================================================================


class RuntimeModel:
    """
    Immutable directed graph for one execution session.

    Validates structure on construction and indexes edges by endpoint.

    Raises:
        ModelError: On duplicate element ids, an edge without a target, or an
            edge endpoint that is not a vertex of this model.
    """

    def __init__(
        self,
        id: str,
        name: str | None,
        vertices: Iterable[RuntimeVertex],
        edges: Iterable[RuntimeEdge],
    ) -> None:
        self._id = id
        self._name = name
        self._vertices = tuple(vertices)
        self._edges = tuple(edges)
        self._elements: dict[str, RuntimeVertex | RuntimeEdge] = {}
        self._out_edges: dict[RuntimeVertex, list[RuntimeEdge]] = {
            v: [] for v in self._vertices
        }
        self._in_edges: dict[RuntimeVertex, list[RuntimeEdge]] = {
            v: [] for v in self._vertices
        }

        for element in (*self._vertices, *self._edges):
            if element.id in self._elements:
                raise ModelError(f"Duplicate element id in model: {element.id}")
            self._elements[element.id] = element

        for edge in self._edges:
            if edge.target_vertex is None:
                raise ModelError(f"Edge '{edge.id}' has no target vertex")
            if edge.target_vertex not in self._in_edges:
                raise ModelError(
                    f"Edge '{edge.id}' targets vertex '{edge.target_vertex.id}' "
                    "which is not part of the model"
                )
            self._in_edges[edge.target_vertex].append(edge)
            if edge.source_vertex is not None:
                if edge.source_vertex not in self._out_edges:
                    raise ModelError(
                        f"Edge '{edge.id}' leaves vertex '{edge.source_vertex.id}' "
                        "which is not part of the model"
                    )
                self._out_edges[edge.source_vertex].append(edge)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def vertices(self) -> tuple[RuntimeVertex, ...]:
        return self._vertices

    @property
    def edges(self) -> tuple[RuntimeEdge, ...]:
        return self._edges

    @property
    def start_edges(self) -> tuple[RuntimeEdge, ...]:
        return tuple(e for e in self._edges if e.is_start_edge())

    def has_element(self, element: RuntimeVertex | RuntimeEdge) -> bool:
        return self._elements.get(element.id) == element

    def get_element(self, element_id: str) -> RuntimeVertex | RuntimeEdge:
        """
        Raises:
            KeyError: If no element has this id
        """
        if element_id not in self._elements:
            raise KeyError(f"Element not found: {element_id}")
        return self._elements[element_id]

    def find_vertices(self, name: str) -> list[RuntimeVertex]:
        return [v for v in self._vertices if v.name == name]

    def find_edges(self, name: str) -> list[RuntimeEdge]:
        return [e for e in self._edges if e.name == name]

    def get_out_edges(self, vertex: RuntimeVertex) -> tuple[RuntimeEdge, ...]:
        return tuple(self._out_edges.get(vertex, ()))

    def get_in_edges(self, vertex: RuntimeVertex) -> tuple[RuntimeEdge, ...]:
        return tuple(self._in_edges.get(vertex, ()))

    def get_shared_states(self) -> dict[str, list[RuntimeVertex]]:
        """Group shared-state vertices by their shared state name."""
        shared: dict[str, list[RuntimeVertex]] = {}
        for vertex in self._vertices:
            if vertex.shared_state:
                shared.setdefault(vertex.shared_state, []).append(vertex)
        return shared
