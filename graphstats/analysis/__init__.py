"""Metric functions over graph snapshots and their supporting helpers."""

__all__ = [
    "NetworkxAlgorithmsProvider",
    "TextDocumentProvider",
    "evaluate_gradient",
    "register_gradient",
    "start_metrics_server",
]


def __getattr__(name: str):  # pragma: no cover - dynamic lazy imports
    if name == "NetworkxAlgorithmsProvider":
        from .algorithms import NetworkxAlgorithmsProvider

        return NetworkxAlgorithmsProvider
    if name == "TextDocumentProvider":
        from .nlp import TextDocumentProvider

        return TextDocumentProvider
    if name in {"evaluate_gradient", "register_gradient"}:
        from . import gradients

        return getattr(gradients, name)
    if name == "start_metrics_server":
        from .monitoring import start_metrics_server

        return start_metrics_server
    raise AttributeError(name)
