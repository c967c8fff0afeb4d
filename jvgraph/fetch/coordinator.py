"""
Fetch Coordinator

Owns the single "current" fetch of a viewer session.

- Same key as the current one: reuse the in-flight or completed fetch
- Different key: start a new fetch; the old one becomes stale
- Stale results are dropped when they arrive (last intent wins)
- Failed fetches are never cached
"""

import asyncio
import logging
from typing import Optional

from ..graph.schema import GraphFragment
from ..traversal.state import FetchKey, TraversalMode
from .errors import FetchFailure
from .source import GraphSource

logger = logging.getLogger(__name__)


class FetchCoordinator:
    """
    Coalesces and supersedes subgraph fetches.

    Usage:
        coordinator = FetchCoordinator(JivasClient())
        fragment = await coordinator.get_or_fetch(state.fetch_key())
        if fragment is None:
            ...  # superseded while in flight, nothing to merge
    """

    def __init__(self, source: GraphSource):
        self.source = source
        self._key: Optional[FetchKey] = None
        self._task: Optional[asyncio.Task] = None
        self.fetch_count = 0

    @property
    def current_key(self) -> Optional[FetchKey]:
        return self._key

    def invalidate(self):
        """Forget the current fetch; anything still in flight becomes stale"""
        if self._key is not None:
            logger.debug(f"Invalidating cached fetch {self._key}")
        self._key = None
        self._task = None

    async def get_or_fetch(self, key: FetchKey, refresh: bool = False) -> Optional[GraphFragment]:
        """
        Fragment for key, or None if key was superseded before it resolved.

        Args:
            key: What to fetch
            refresh: Drop any cached result for the current key first

        Raises:
            FetchFailure: the fetch for the current key failed
        """
        if refresh:
            self.invalidate()

        if self._task is not None and key == self._key:
            logger.debug(f"Reusing fetch {key}")
            task = self._task
        else:
            if self._key is not None:
                logger.debug(f"Superseding fetch {self._key} with {key}")
            task = asyncio.ensure_future(self._fetch(key))
            self._key = key
            self._task = task
            self.fetch_count += 1

        try:
            fragment = await asyncio.shield(task)
        except FetchFailure:
            if self._task is not task:
                logger.debug(f"Dropping failure of superseded fetch {key}")
                return None
            self.invalidate()
            raise

        if self._task is not task:
            logger.debug(f"Dropping stale result for {key}")
            return None
        return fragment

    async def _fetch(self, key: FetchKey) -> GraphFragment:
        logger.info(f"Fetching {key}")
        try:
            if key.mode == TraversalMode.FULL:
                return await self.source.fetch_full_graph(key.root_id)
            return await self.source.fetch_neighborhood(key.focus_id, key.depth)
        except FetchFailure:
            raise
        except Exception as e:
            raise FetchFailure(f"Fetch {key} failed: {e}") from e
