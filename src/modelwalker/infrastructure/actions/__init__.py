"""
Action executor adapters.
"""

from modelwalker.infrastructure.actions.method import (
    MethodActionExecutor,
    NullActionExecutor,
)

__all__ = [
    "MethodActionExecutor",
    "NullActionExecutor",
]
