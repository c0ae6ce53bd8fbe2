"""
Domain exceptions for the model-based test engine.

Step failures are recoverable and handled by an exception strategy.
Structural errors indicate a malformed model or driver misuse and are never
recovered.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modelwalker.domain.context import Context
    from modelwalker.domain.graph import RuntimeEdge, RuntimeVertex


class MachineException(Exception):
    """
    Raised when the behaviour attached to a vertex or edge fails at runtime.

    Constructed once per failure and consumed by exactly one exception
    strategy invocation.
    """

    def __init__(
        self,
        context: "Context",
        element: "RuntimeVertex | RuntimeEdge",
        cause: BaseException | None = None,
    ):
        """
        Args:
            context: The context active at the moment of failure
            element: The vertex or edge whose step failed
            cause: The underlying error raised by the action executor
        """
        name = element.name or element.id
        message = f"Step failed on '{name}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.context = context
        self.element = element
        self.cause = cause


class ModelError(Exception):
    """
    Raised when the model or the session is structurally invalid.

    Examples: duplicate element ids, an edge pointing outside the model, or a
    session asked to advance with nothing to start from.
    """

    pass


class NoPathFoundError(ModelError):
    """Raised when the path generator is asked for a step it cannot supply."""

    pass
