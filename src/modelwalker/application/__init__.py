"""
Application layer for the model-based test engine.

Contains the machine that drives execution contexts and the exception
strategies it delegates step failures to.
"""

from modelwalker.application.execution_event_emitter import ExecutionEventEmitter
from modelwalker.application.machine import Machine
from modelwalker.application.strategies import (
    BlackListStrategy,
    FailFastStrategy,
    TryAgainStrategy,
)

__all__ = [
    "BlackListStrategy",
    "ExecutionEventEmitter",
    "FailFastStrategy",
    "Machine",
    "TryAgainStrategy",
]
