"""Prometheus monitoring utilities."""

from __future__ import annotations

try:
    from prometheus_client import REGISTRY, Counter, Gauge, start_http_server
except Exception:  # pragma: no cover - optional
    REGISTRY = None
    Counter = None
    Gauge = None
    start_http_server = None

if Gauge is not None:

    def _metric(cls, name: str, desc: str, **kwargs):
        """Return a metric, reusing existing collectors when present."""
        existing = getattr(REGISTRY, "_names_to_collectors", {}).get(name)
        if existing:
            return existing
        return cls(name, desc, **kwargs)

    source_cache_hits_total = _metric(
        Counter, "graphstats_source_cache_hits_total", "Per-source cache hits"
    )
    source_cache_misses_total = _metric(
        Counter, "graphstats_source_cache_misses_total", "Per-source cache misses"
    )
    entity_failures_total = _metric(
        Counter,
        "graphstats_entity_failures_total",
        "Metric evaluations replaced by NaN after an error",
        labelnames=["function"],
    )
    stale_passes_total = _metric(
        Counter,
        "graphstats_stale_passes_total",
        "Computation passes discarded because the graph changed",
    )
    pass_duration_seconds = _metric(
        Gauge,
        "graphstats_pass_duration_seconds",
        "Duration of the last computation pass",
        labelnames=["kind", "purpose"],
    )
else:  # pragma: no cover - optional dependency missing
    source_cache_hits_total = None
    source_cache_misses_total = None
    entity_failures_total = None
    stale_passes_total = None
    pass_duration_seconds = None


_METRICS = {
    "source_cache_hits_total": source_cache_hits_total,
    "source_cache_misses_total": source_cache_misses_total,
    "entity_failures_total": entity_failures_total,
    "stale_passes_total": stale_passes_total,
    "pass_duration_seconds": pass_duration_seconds,
}


def start_metrics_server(port: int = 8000) -> None:
    """Start an HTTP server exposing the Prometheus collectors."""
    if start_http_server is None:
        return
    start_http_server(port)


def update_metric(
    name: str, value: float, labels: dict[str, str] | None = None
) -> None:
    """Set one of the default gauges.

    Parameters
    ----------
    name:
        Name of the metric to update.
    value:
        Value to set.
    labels:
        Optional label mapping for metrics that use ``labelnames``.
    """

    g = _METRICS.get(name)
    if g is not None:
        try:
            if labels:
                g.labels(**labels).set(value)
            else:
                g.set(value)
        except Exception:  # pragma: no cover
            pass


def increment(name: str, labels: dict[str, str] | None = None) -> None:
    """Increment one of the default counters."""

    c = _METRICS.get(name)
    if c is not None:
        try:
            if labels:
                c.labels(**labels).inc()
            else:
                c.inc()
        except Exception:  # pragma: no cover
            pass
