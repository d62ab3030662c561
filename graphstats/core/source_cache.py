"""Per-source memoization of source-anchored link measures."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Hashable, Optional

from ..analysis.monitoring import increment

logger = logging.getLogger(__name__)

TargetMap = Dict[Hashable, float]


class SourceCache:
    """Map ``source -> {target: measure}`` valid for one graph generation.

    Link metrics are cheapest computed once per source for every target, so
    the first request for a source computes the full map and every later
    request in the same generation reuses it. Concurrent requests for a
    source that is still being computed await the same in-flight task; the
    map is published only once complete.
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, TargetMap] = {}
        self._pending: Dict[Hashable, asyncio.Future] = {}
        self.generation: Optional[int] = None

    def __contains__(self, source: Hashable) -> bool:
        return source in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, source: Hashable) -> Optional[TargetMap]:
        return self._entries.get(source)

    def set(self, source: Hashable, targets: TargetMap) -> None:
        self._entries[source] = dict(targets)

    def clear(self) -> None:
        self._entries.clear()
        self._pending.clear()

    def ensure_generation(self, generation: int) -> None:
        """Drop every entry computed for another graph generation."""
        if self.generation != generation:
            if self._entries:
                logger.debug(
                    "clearing %d cached sources (generation %s -> %s)",
                    len(self._entries),
                    self.generation,
                    generation,
                )
            self.clear()
            self.generation = generation

    async def get_or_compute(
        self,
        source: Hashable,
        compute: Callable[[], Awaitable[TargetMap]],
    ) -> TargetMap:
        """Return the cached map for ``source``, computing it at most once."""

        cached = self._entries.get(source)
        if cached is not None:
            increment("source_cache_hits_total")
            return cached

        pending = self._pending.get(source)
        if pending is not None:
            increment("source_cache_hits_total")
            return await asyncio.shield(pending)

        increment("source_cache_misses_total")
        generation = self.generation
        future: asyncio.Future = asyncio.ensure_future(compute())
        self._pending[source] = future
        try:
            targets = await future
        finally:
            if self._pending.get(source) is future:
                del self._pending[source]
        # a clear() during the computation means the map belongs to an old graph
        if self.generation == generation:
            self._entries[source] = targets
        return targets
