"""
Path generator adapters.
"""

from modelwalker.infrastructure.generators.mock import ScriptedPathGenerator
from modelwalker.infrastructure.generators.random_walk import RandomPathGenerator

__all__ = [
    "RandomPathGenerator",
    "ScriptedPathGenerator",
]
