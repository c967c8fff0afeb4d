"""
Tests for the traversal state machine
"""

import pytest

from jvgraph.traversal import state as transitions
from jvgraph.traversal.state import (
    TraversalMode, TraversalState, FetchKey, MIN_DEPTH, MAX_DEPTH,
)


class TestFetchKey:
    """Key derivation"""

    def test_full_key_ignores_focus_and_depth(self):
        a = TraversalState(TraversalMode.FULL, "n1", "n1", 1)
        b = TraversalState(TraversalMode.FULL, "n1", "n5", 3)

        assert a.fetch_key() == b.fetch_key() == FetchKey(TraversalMode.FULL, "n1")

    def test_step_key_tracks_focus_and_depth(self):
        state = TraversalState(TraversalMode.STEP, "n1", "n2", 2)

        assert state.fetch_key() == FetchKey(TraversalMode.STEP, "n1", "n2", 2)
        assert state.fetch_key() != TraversalState(TraversalMode.FOCUS, "n1", "n2", 2).fetch_key()

    def test_keys_are_hashable(self):
        state = TraversalState.initial("n1")
        assert len({state.fetch_key(), TraversalState.initial("n1").fetch_key()}) == 1


class TestTransitions:
    """One transition function per event"""

    def setup_method(self):
        self.step = TraversalState(TraversalMode.STEP, "n1", "n2", 3)

    def test_change_mode_starts_over(self):
        """New mode: focus back on root, depth 1, store cleared, forced refetch"""
        result = transitions.change_mode(self.step, "Focus")

        assert result.state == TraversalState(TraversalMode.FOCUS, "n1", "n1", 1)
        assert result.directive.clear_store
        assert result.directive.refresh
        assert result.directive.key == FetchKey(TraversalMode.FOCUS, "n1", "n1", 1)

    def test_double_click_in_step(self):
        result = transitions.double_click_node(self.step, "n3")

        assert result.state.focus_id == "n3"
        assert result.directive.key == FetchKey(TraversalMode.STEP, "n1", "n3", 3)
        assert result.directive.prune_to is None
        assert not result.directive.clear_store

    def test_double_click_in_focus_prunes(self):
        focus = TraversalState(TraversalMode.FOCUS, "n1", "n1", 1)

        result = transitions.double_click_node(focus, "n2")

        assert result.directive.prune_to == "n2"

    def test_double_click_in_full_only_moves_focus(self):
        full = TraversalState(TraversalMode.FULL, "n1", "n1", 1)

        result = transitions.double_click_node(full, "n2")

        assert result.state.focus_id == "n2"
        assert not result.fetches

    def test_change_depth(self):
        result = transitions.change_depth(self.step, 5)

        assert result.state.depth == 5
        assert result.directive.key.depth == 5
        assert not result.directive.clear_store

    def test_change_depth_out_of_range(self):
        with pytest.raises(ValueError):
            transitions.change_depth(self.step, MAX_DEPTH + 1)
        with pytest.raises(ValueError):
            transitions.change_depth(self.step, MIN_DEPTH - 1)

    def test_change_depth_ignored_in_full(self):
        full = TraversalState(TraversalMode.FULL, "n1", "n1", 1)

        result = transitions.change_depth(full, 4)

        assert result.state == full
        assert not result.fetches

    def test_reset(self):
        result = transitions.reset_graph(self.step, node_count=5)

        assert result.state == TraversalState(TraversalMode.STEP, "n1", "n1", 1)
        assert result.directive.clear_store
        assert result.directive.refresh

    def test_reset_single_node_is_noop(self):
        result = transitions.reset_graph(self.step, node_count=1)

        assert result.state == self.step
        assert not result.fetches

    def test_reset_in_full_is_noop(self):
        full = TraversalState(TraversalMode.FULL, "n1", "n1", 1)
        assert not transitions.reset_graph(full, node_count=5).fetches

    def test_refresh_keeps_store(self):
        result = transitions.refresh(self.step)

        assert result.state == self.step
        assert result.directive.refresh
        assert not result.directive.clear_store

    def test_invalid_state_depth(self):
        with pytest.raises(ValueError):
            TraversalState(TraversalMode.STEP, "n1", "n1", 0)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            transitions.change_mode(self.step, "Sideways")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
