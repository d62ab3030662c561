"""Drive the four active calculators in response to graph changes.

The orchestrator owns one calculator per entity kind and purpose. A
recompute request starts a pass in the running event loop; requests that
arrive while a pass is running collapse into a single follow-up pass. A pass
registers a one-shot change listener before reading its snapshot so a
mutation during the pass always schedules exactly one more pass, and stale
results are discarded by the calculators themselves.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from ..analysis.gradients import evaluate_gradient
from ..config_models import StatsSettings
from ..models import ComputedStat, EntityKind, StatPurpose
from .calculators import StatCalculator
from .factory import LinkStatCalculatorFactory, NodeStatCalculatorFactory
from .normalization import GradientEvaluator
from .snapshot import GraphSnapshotProvider

logger = logging.getLogger(__name__)

SlotKey = Tuple[EntityKind, StatPurpose]


class OrchestratorState(str, Enum):
    IDLE = "idle"
    COMPUTING = "computing"
    READY = "ready"


class RecomputeOrchestrator:
    """Keep node and link statistics in sync with the graph."""

    def __init__(
        self,
        graph_provider: GraphSnapshotProvider,
        settings: Optional[StatsSettings] = None,
        *,
        algorithms: Any = None,
        documents: Any = None,
        evaluator: GradientEvaluator = evaluate_gradient,
    ) -> None:
        self.graph_provider = graph_provider
        self.algorithms = algorithms
        self.documents = documents
        self.evaluator = evaluator
        self.settings = settings or StatsSettings()
        self.state = OrchestratorState.IDLE
        self.passes = 0
        self.calculators: Dict[SlotKey, Optional[StatCalculator]] = {}
        self.dirty = True
        self._pending = False
        self._task: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.configure(self.settings, recompute=False)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def configure(self, settings: StatsSettings, *, recompute: bool = True) -> None:
        """Rebuild the calculators for ``settings`` and request a pass."""

        self.settings = settings
        gp = self.graph_provider

        def node(function: str, purpose: StatPurpose) -> Optional[StatCalculator]:
            return NodeStatCalculatorFactory.get_calculator(
                function,
                purpose,
                gp,
                documents=self.documents,
                gradient=settings.nodes_color_colormap,
                evaluator=self.evaluator,
                eigenvector_max_iter=settings.eigenvector_max_iter,
                hits_max_iter=settings.hits_max_iter,
            )

        def link(function: str, purpose: StatPurpose) -> Optional[StatCalculator]:
            return LinkStatCalculatorFactory.get_calculator(
                function,
                purpose,
                gp,
                self.algorithms,
                gradient=settings.links_color_colormap,
                evaluator=self.evaluator,
            )

        self.calculators = {
            (EntityKind.NODE, StatPurpose.SIZE): node(settings.nodes_size_function, StatPurpose.SIZE),
            (EntityKind.NODE, StatPurpose.COLOR): node(settings.nodes_color_function, StatPurpose.COLOR),
            (EntityKind.LINK, StatPurpose.SIZE): link(settings.links_size_function, StatPurpose.SIZE),
            (EntityKind.LINK, StatPurpose.COLOR): link(settings.links_color_function, StatPurpose.COLOR),
        }
        for (kind, purpose), calc in self.calculators.items():
            if calc is None:
                logger.warning("No %s %s calculator available, slot left empty", kind.value, purpose.value)

        if settings.recompute_stats_on_graph_change and self._unsubscribe is None:
            self._unsubscribe = gp.on_change(self._on_graph_change)
        elif not settings.recompute_stats_on_graph_change and self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        if recompute:
            self.request_recompute()

    async def close(self) -> None:
        """Stop listening to the graph and cancel a pass still in flight."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                logger.debug("cancelled in-flight stats pass")
        self._pending = False
        self.state = OrchestratorState.IDLE

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def _on_graph_change(self, generation: int) -> None:
        logger.debug("graph changed to generation %d", generation)
        self.request_recompute()

    def _mark_pending(self, generation: int) -> None:
        self._pending = True

    def request_recompute(self) -> Optional[asyncio.Task]:
        """Start a pass, or coalesce into the pending one if a pass is running.

        Outside a running event loop the request is remembered in
        :attr:`dirty` and served by the next :meth:`recompute`.
        """

        if self._task is not None and not self._task.done():
            self._pending = True
            return self._task
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.dirty = True
            return None
        self.dirty = False
        self.state = OrchestratorState.COMPUTING
        self._task = loop.create_task(self._run())
        return self._task

    async def recompute(self) -> None:
        """Recompute and wait until the results match the latest graph."""

        task = self.request_recompute()
        if task is not None:
            await task

    async def _run(self) -> None:
        self.state = OrchestratorState.COMPUTING
        self._pending = True
        while self._pending:
            self._pending = False
            unsubscribe = self.graph_provider.on_change(self._mark_pending, once=True)
            try:
                await self._compute_pass()
            finally:
                unsubscribe()
        self.state = OrchestratorState.READY

    async def _compute_pass(self) -> None:
        snapshot = self.graph_provider.snapshot()
        self.passes += 1
        jobs = [(key, calc) for key, calc in self.calculators.items() if calc is not None]
        results = await asyncio.gather(
            *(calc.compute_stats(self._invert(kind), snapshot) for (kind, _), calc in jobs),
            return_exceptions=True,
        )
        for (_, calc), result in zip(jobs, results):
            if isinstance(result, Exception):
                logger.error("%r failed", calc, exc_info=result)
        logger.info("stats pass %d done for generation %d", self.passes, snapshot.generation)

    def _invert(self, kind: EntityKind) -> bool:
        if kind is EntityKind.NODE:
            return self.settings.invert_node_stats
        return self.settings.invert_link_stats

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def calculator(self, kind: EntityKind | str, purpose: StatPurpose | str) -> Optional[StatCalculator]:
        return self.calculators.get((EntityKind(kind), StatPurpose(purpose)))

    def stats(self, kind: EntityKind | str, purpose: StatPurpose | str) -> Dict[Any, ComputedStat]:
        calc = self.calculator(kind, purpose)
        return calc.stats if calc is not None else {}

    def get_warning(self, kind: EntityKind | str, purpose: StatPurpose | str) -> str:
        calc = self.calculator(kind, purpose)
        return calc.get_warning() if calc is not None else ""
