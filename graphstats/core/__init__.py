"""Snapshots, calculators and the recompute orchestrator."""

__all__ = [
    "GraphSnapshot",
    "GraphSnapshotProvider",
    "SourceCache",
    "map_stats",
    "NodeStatCalculatorFactory",
    "LinkStatCalculatorFactory",
    "OrchestratorState",
    "RecomputeOrchestrator",
]


def __getattr__(name: str):  # pragma: no cover - dynamic lazy imports
    if name in {"GraphSnapshot", "GraphSnapshotProvider"}:
        from . import snapshot

        return getattr(snapshot, name)
    if name == "SourceCache":
        from .source_cache import SourceCache

        return SourceCache
    if name == "map_stats":
        from .normalization import map_stats

        return map_stats
    if name in {"NodeStatCalculatorFactory", "LinkStatCalculatorFactory"}:
        from . import factory

        return getattr(factory, name)
    if name in {"OrchestratorState", "RecomputeOrchestrator"}:
        from . import orchestrator

        return getattr(orchestrator, name)
    raise AttributeError(name)
