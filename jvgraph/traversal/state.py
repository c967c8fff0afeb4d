"""
Traversal State Machine

The traversal is one of three modes. Every user event that can move the
traversal is a pure function here:

    change_mode, double_click_node, change_depth, reset_graph, refresh

Each takes the current TraversalState and returns a Transition: the next
state plus an optional FetchDirective telling the controller what to do
with the store and which fragment to request.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

MIN_DEPTH = 1
MAX_DEPTH = 10


class TraversalMode(str, Enum):
    FULL = "Full"       # whole graph reachable from root, one call
    STEP = "Step"       # neighborhood of focus, discoveries accumulate
    FOCUS = "Focus"     # neighborhood of focus, everything else pruned

    @property
    def is_incremental(self) -> bool:
        return self != TraversalMode.FULL


@dataclass(frozen=True)
class FetchKey:
    """
    What a fetch retrieves. Equal keys mean the same fragment.

    Full keys carry only the root; Step/Focus keys carry focus and depth.
    """
    mode: TraversalMode
    root_id: str
    focus_id: Optional[str] = None
    depth: Optional[int] = None

    def __str__(self) -> str:
        if self.mode == TraversalMode.FULL:
            return f"{self.mode.value}({self.root_id})"
        return f"{self.mode.value}({self.root_id}, focus={self.focus_id}, depth={self.depth})"


@dataclass(frozen=True)
class TraversalState:
    mode: TraversalMode
    root_id: str
    focus_id: str
    depth: int = MIN_DEPTH

    def __post_init__(self):
        check_depth(self.depth)

    @classmethod
    def initial(cls, root_id: str, mode: Union[str, TraversalMode] = TraversalMode.STEP) -> "TraversalState":
        return cls(mode=TraversalMode(mode), root_id=root_id, focus_id=root_id, depth=MIN_DEPTH)

    def fetch_key(self) -> FetchKey:
        if self.mode == TraversalMode.FULL:
            return FetchKey(self.mode, self.root_id)
        return FetchKey(self.mode, self.root_id, self.focus_id, self.depth)


@dataclass(frozen=True)
class FetchDirective:
    """
    Store effects applied before fetching, then the fetch itself.

    clear_store: empty the store first
    prune_to:    keep only this node (and drop edges touching the rest)
    refresh:     drop any cached result so the key is fetched again
    """
    key: FetchKey
    clear_store: bool = False
    prune_to: Optional[str] = None
    refresh: bool = False


@dataclass(frozen=True)
class Transition:
    state: TraversalState
    directive: Optional[FetchDirective] = None

    @property
    def fetches(self) -> bool:
        return self.directive is not None


def check_depth(depth: int) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ValueError(f"Depth must be an integer, got {depth!r}")
    if not MIN_DEPTH <= depth <= MAX_DEPTH:
        raise ValueError(f"Depth must be between {MIN_DEPTH} and {MAX_DEPTH}, got {depth}")
    return depth


# ==========================================
# TRANSITIONS
# ==========================================

def start(state: TraversalState) -> Transition:
    """First fetch of a session"""
    return Transition(state, FetchDirective(state.fetch_key()))


def change_mode(state: TraversalState, mode: Union[str, TraversalMode]) -> Transition:
    """
    Switch traversal mode.

    Always starts over: empty store, focus back on root, depth 1, and a
    fresh fetch even if the same key was fetched before.
    """
    next_state = TraversalState(
        mode=TraversalMode(mode),
        root_id=state.root_id,
        focus_id=state.root_id,
        depth=MIN_DEPTH,
    )
    return Transition(next_state, FetchDirective(next_state.fetch_key(), clear_store=True, refresh=True))


def double_click_node(state: TraversalState, node_id: str) -> Transition:
    """
    Move the focus to node_id.

    Full mode already holds the whole graph, so only the focus changes.
    Focus mode drops everything but the new focus before fetching its
    neighborhood.
    """
    next_state = replace(state, focus_id=node_id)
    if not state.mode.is_incremental:
        return Transition(next_state)
    prune_to = node_id if state.mode == TraversalMode.FOCUS else None
    return Transition(next_state, FetchDirective(next_state.fetch_key(), prune_to=prune_to))


def change_depth(state: TraversalState, depth: int) -> Transition:
    """New neighborhood radius. Existing store contents are kept."""
    check_depth(depth)
    if not state.mode.is_incremental:
        return Transition(state)
    next_state = replace(state, depth=depth)
    return Transition(next_state, FetchDirective(next_state.fetch_key()))


def reset_graph(state: TraversalState, node_count: int) -> Transition:
    """
    "Reset Graph": back to root at depth 1 with an empty store.

    Only offered in Step/Focus. Nothing happens when the store holds a
    single node, since there is nothing to reset.
    """
    if not state.mode.is_incremental or node_count == 1:
        return Transition(state)
    next_state = replace(state, focus_id=state.root_id, depth=MIN_DEPTH)
    return Transition(next_state, FetchDirective(next_state.fetch_key(), clear_store=True, refresh=True))


def refresh(state: TraversalState) -> Transition:
    """Refetch the current key without touching the store"""
    return Transition(state, FetchDirective(state.fetch_key(), refresh=True))
