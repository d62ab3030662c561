"""Graph statistics and normalization engine."""

__version__ = "0.1.0"

# Avoid heavy imports at module load time. Relevant classes and functions
# are available via submodules such as ``graphstats.core`` or
# ``graphstats.analysis``.

__all__: list[str] = [
    "__version__",
    "ComputedStat",
    "GraphSnapshot",
    "GraphSnapshotProvider",
    "LinkStatCalculatorFactory",
    "LinkStatFunction",
    "NodeStatCalculatorFactory",
    "NodeStatFunction",
    "RecomputeOrchestrator",
    "StatPurpose",
    "StatsSettings",
]


def __getattr__(name: str):
    if name in {"ComputedStat", "LinkStatFunction", "NodeStatFunction", "StatPurpose"}:
        from . import models

        return getattr(models, name)
    if name in {"GraphSnapshot", "GraphSnapshotProvider"}:
        from .core import snapshot

        return getattr(snapshot, name)
    if name in {"LinkStatCalculatorFactory", "NodeStatCalculatorFactory"}:
        from .core import factory

        return getattr(factory, name)
    if name == "RecomputeOrchestrator":
        from .core.orchestrator import RecomputeOrchestrator as _RO

        return _RO
    if name == "StatsSettings":
        from .config_models import StatsSettings as _SS

        return _SS
    raise AttributeError(name)
