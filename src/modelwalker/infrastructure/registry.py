"""
Exception Strategy Registry with Entry Points Discovery.

Provides strategy lookup by name via Python entry points (modelwalker.strategies
group). External packages can register strategies in their pyproject.toml:

    [project.entry-points."modelwalker.strategies"]
    MyStrategy = "mypackage.strategies:MyStrategy"
"""

import warnings
from importlib.metadata import entry_points
from typing import Any

from modelwalker.application.strategies import (
    BlackListStrategy,
    FailFastStrategy,
    TryAgainStrategy,
)
from modelwalker.domain.interfaces import ExceptionStrategy


class StrategyRegistry:
    """
    Registry for ExceptionStrategy implementations.

    Discovers strategies via the 'modelwalker.strategies' entry point group.
    Uses lazy loading - entry points are only loaded on first access.

    Example usage:
        strategy = StrategyRegistry.create("BlackListStrategy")
    """

    _strategies: dict[str, type[ExceptionStrategy]] = {}
    _loaded: bool = False

    @classmethod
    def _load_entry_points(cls) -> None:
        """Load strategies from entry points (lazy, called once)."""
        if cls._loaded:
            return

        for ep in entry_points(group="modelwalker.strategies"):
            try:
                cls._strategies.setdefault(ep.name, ep.load())
            except Exception as e:
                warnings.warn(
                    f"Failed to load strategy '{ep.name}' from entry point: {e}",
                    stacklevel=2,
                )

        # Built-ins stay available when the package metadata is not installed
        for strategy_class in (FailFastStrategy, TryAgainStrategy, BlackListStrategy):
            cls._strategies.setdefault(strategy_class.__name__, strategy_class)

        cls._loaded = True

    @classmethod
    def register(cls, name: str, strategy_class: type[ExceptionStrategy]) -> None:
        """
        Manually register a strategy class.

        Args:
            name: Strategy identifier (e.g., "BlackListStrategy")
            strategy_class: Class implementing ExceptionStrategy
        """
        cls._strategies[name] = strategy_class

    @classmethod
    def get(cls, name: str) -> type[ExceptionStrategy]:
        """
        Raises:
            KeyError: If no strategy has this name
        """
        cls._load_entry_points()
        if name not in cls._strategies:
            available = ", ".join(sorted(cls._strategies)) or "(none)"
            raise KeyError(
                f"Strategy '{name}' not found. Available strategies: {available}"
            )
        return cls._strategies[name]

    @classmethod
    def create(cls, name: str, **config: Any) -> ExceptionStrategy:
        """
        Create a strategy instance by name.

        Raises:
            KeyError: If strategy not found
            TypeError: If config doesn't match constructor signature
        """
        return cls.get(name)(**config)

    @classmethod
    def available(cls) -> list[str]:
        cls._load_entry_points()
        return sorted(cls._strategies)

    @classmethod
    def clear(cls) -> None:
        """
        Clear all registered strategies (useful for testing).

        Also resets the loaded flag so entry points can be reloaded.
        """
        cls._strategies.clear()
        cls._loaded = False
