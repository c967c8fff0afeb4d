"""
Tests for fetch coalescing and supersession
"""

import asyncio

import pytest

from jvgraph.fetch.coordinator import FetchCoordinator
from jvgraph.fetch.errors import FetchFailure
from jvgraph.graph.schema import GraphFragment
from jvgraph.traversal.state import FetchKey, TraversalMode

from conftest import GatedSource, node, settle


K1 = FetchKey(TraversalMode.STEP, "n1", "n1", 1)
K2 = FetchKey(TraversalMode.STEP, "n1", "n2", 1)
FULL = FetchKey(TraversalMode.FULL, "n1")

CALL1 = ("neighborhood", "n1", 1)
CALL2 = ("neighborhood", "n2", 1)

FRAGMENT1 = GraphFragment(nodes=[node("n1")])
FRAGMENT2 = GraphFragment(nodes=[node("n2")])


def gated():
    return GatedSource({
        CALL1: FRAGMENT1,
        CALL2: FRAGMENT2,
        ("full", "n1"): GraphFragment(nodes=[node("n1"), node("n2")]),
    })


class TestCoalescing:
    """Same key, one remote call"""

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_fetch(self):
        source = gated()
        coordinator = FetchCoordinator(source)

        first = asyncio.create_task(coordinator.get_or_fetch(K1))
        second = asyncio.create_task(coordinator.get_or_fetch(K1))
        await settle()
        source.release(CALL1)

        assert await first == FRAGMENT1
        assert await second == FRAGMENT1
        assert source.calls == [CALL1]

    @pytest.mark.asyncio
    async def test_completed_fetch_is_reused(self):
        source = gated()
        source.release(CALL1)
        coordinator = FetchCoordinator(source)

        await coordinator.get_or_fetch(K1)
        await coordinator.get_or_fetch(K1)

        assert source.calls == [CALL1]
        assert coordinator.fetch_count == 1

    @pytest.mark.asyncio
    async def test_refresh_refetches(self):
        source = gated()
        source.release(CALL1)
        coordinator = FetchCoordinator(source)

        await coordinator.get_or_fetch(K1)
        await coordinator.get_or_fetch(K1, refresh=True)

        assert source.calls == [CALL1, CALL1]

    @pytest.mark.asyncio
    async def test_full_key_uses_full_graph_call(self):
        source = gated()
        source.release(("full", "n1"))
        coordinator = FetchCoordinator(source)

        fragment = await coordinator.get_or_fetch(FULL)

        assert source.calls == [("full", "n1")]
        assert len(fragment.nodes) == 2


class TestSupersession:
    """Last intent wins"""

    @pytest.mark.asyncio
    async def test_superseded_result_is_dropped(self):
        """K1 resolves after the key moved to K2: its result is never returned"""
        source = gated()
        coordinator = FetchCoordinator(source)

        old = asyncio.create_task(coordinator.get_or_fetch(K1))
        await settle()
        new = asyncio.create_task(coordinator.get_or_fetch(K2))
        await settle()

        source.release(CALL2)
        assert await new == FRAGMENT2

        source.release(CALL1)
        assert await old is None
        assert coordinator.current_key == K2

    @pytest.mark.asyncio
    async def test_invalidate_makes_in_flight_fetch_stale(self):
        source = gated()
        coordinator = FetchCoordinator(source)

        pending = asyncio.create_task(coordinator.get_or_fetch(K1))
        await settle()
        coordinator.invalidate()
        source.release(CALL1)

        assert await pending is None

    @pytest.mark.asyncio
    async def test_superseded_failure_is_dropped(self):
        source = GatedSource({CALL1: FetchFailure("boom"), CALL2: FRAGMENT2})
        coordinator = FetchCoordinator(source)

        old = asyncio.create_task(coordinator.get_or_fetch(K1))
        await settle()
        new = asyncio.create_task(coordinator.get_or_fetch(K2))
        await settle()
        source.release(CALL1, CALL2)

        assert await old is None
        assert await new == FRAGMENT2


class TestFailures:
    """Failures surface and are not cached"""

    @pytest.mark.asyncio
    async def test_failure_is_raised_and_not_cached(self):
        source = GatedSource({CALL1: FetchFailure("server down")})
        source.release(CALL1)
        coordinator = FetchCoordinator(source)

        with pytest.raises(FetchFailure):
            await coordinator.get_or_fetch(K1)

        source.responses[CALL1] = FRAGMENT1
        assert await coordinator.get_or_fetch(K1) == FRAGMENT1
        assert source.calls == [CALL1, CALL1]

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_fetch_failure(self):
        source = GatedSource({CALL1: KeyError("reports")})
        source.release(CALL1)
        coordinator = FetchCoordinator(source)

        with pytest.raises(FetchFailure):
            await coordinator.get_or_fetch(K1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
