"""
Action executor that dispatches to methods named after model elements.

A test implementation is a plain object: entering vertex "v_LoggedIn" calls
its v_LoggedIn() method, traversing edge "e_Login" calls e_Login().
"""

import logging
from typing import Any

from modelwalker.domain.context import Context
from modelwalker.domain.exceptions import ModelError
from modelwalker.domain.graph import RuntimeEdge, RuntimeVertex
from modelwalker.domain.interfaces import ActionExecutorInterface

logger = logging.getLogger(__name__)


class MethodActionExecutor(ActionExecutorInterface):
    """Calls the method of a test object that matches the element name."""

    def __init__(self, implementation: Any, strict: bool = False):
        """
        Args:
            implementation: Object whose methods implement the model elements
            strict: Treat a named element without a method as a model error
        """
        self._implementation = implementation
        self._strict = strict

    def execute(self, context: Context, element: RuntimeVertex | RuntimeEdge) -> None:
        if not element.name:
            return
        method = getattr(self._implementation, element.name, None)
        if not callable(method):
            if self._strict:
                raise ModelError(
                    f"{type(self._implementation).__name__} does not implement "
                    f"'{element.name}'"
                )
            logger.debug("No implementation for '%s', skipping", element.name)
            return
        method()


class NullActionExecutor(ActionExecutorInterface):
    """Executes nothing; every step succeeds."""

    def execute(self, context: Context, element: RuntimeVertex | RuntimeEdge) -> None:
        pass
