"""
Session assembly: wires a model, a configuration and the adapters into a
ready-to-run Machine.
"""

import json
from pathlib import Path
from typing import Any

from modelwalker.application.execution_event_emitter import ExecutionEventEmitter
from modelwalker.application.machine import Machine
from modelwalker.domain.context import Context, Element
from modelwalker.domain.graph import Model, RuntimeModel
from modelwalker.domain.interfaces import (
    ExecutionEventStoreInterface,
    NodeStatusStoreInterface,
    PathGeneratorInterface,
)
from modelwalker.domain.models import MachineConfig
from modelwalker.infrastructure.actions import MethodActionExecutor, NullActionExecutor
from modelwalker.infrastructure.generators import RandomPathGenerator
from modelwalker.infrastructure.registry import StrategyRegistry


def load_config(path: str | Path) -> MachineConfig:
    """Read a MachineConfig from a JSON file."""
    with open(path) as f:
        data: dict[str, Any] = json.load(f)
    return MachineConfig.from_dict(data)


def create_machine(
    model: Model | RuntimeModel,
    config: MachineConfig | None = None,
    implementation: Any = None,
    path_generator: PathGeneratorInterface | None = None,
    start_element: Element | None = None,
    event_store: ExecutionEventStoreInterface | None = None,
) -> Machine:
    """
    Build a single-context machine for a model.

    Args:
        model: The model to traverse (built if a builder is given)
        config: Session configuration (defaults if None)
        implementation: Test object whose methods implement the elements
        path_generator: Overrides the configured random walk
        start_element: Where traversal begins
        event_store: Where the execution trace goes (no trace if None)

    Raises:
        KeyError: If the configured strategy is not registered
        ModelError: If the model is malformed or has no way to start
    """
    config = config or MachineConfig()
    runtime = model.build() if isinstance(model, Model) else model
    generator = path_generator or RandomPathGenerator(
        seed=config.seed, max_steps=config.max_steps
    )
    context = Context(runtime, generator, start_element)
    emitter = (
        ExecutionEventEmitter(event_store, config.session_id)
        if event_store is not None
        else None
    )
    return Machine(
        context,
        exception_strategy=StrategyRegistry.create(config.strategy),
        action_executor=(
            MethodActionExecutor(implementation)
            if implementation is not None
            else NullActionExecutor()
        ),
        event_emitter=emitter,
    )


def save_statuses(
    context: Context, store: NodeStatusStoreInterface, session_id: str
) -> None:
    """Persist the node status of every vertex in the context's model."""
    store.save(session_id, context.node_status.snapshot())


def restore_statuses(
    context: Context, store: NodeStatusStoreInterface, session_id: str
) -> None:
    """
    Replace the context's node statuses with a saved snapshot.

    Raises:
        KeyError: If nothing was saved for the session
        ModelError: If the snapshot does not fit the context's model
    """
    context.node_status.restore(store.load(session_id))
