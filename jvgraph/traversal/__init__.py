"""
Traversal module - Traversal modes, fetch keys and the controller
"""

from .state import (
    TraversalMode,
    TraversalState,
    FetchKey,
    FetchDirective,
    Transition,
    MIN_DEPTH,
    MAX_DEPTH,
)
from .controller import TraversalController

__all__ = [
    "TraversalMode",
    "TraversalState",
    "FetchKey",
    "FetchDirective",
    "Transition",
    "MIN_DEPTH",
    "MAX_DEPTH",
    "TraversalController",
]
