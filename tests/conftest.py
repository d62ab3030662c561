import os
import sys

# Ensure the repository root is importable so test modules can resolve the
# ``graphstats`` package without relying on ``PYTHONPATH`` tweaks.
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

import asyncio  # noqa: E402
from collections import Counter  # noqa: E402

import pytest  # noqa: E402

from graphstats.core.snapshot import GraphSnapshotProvider  # noqa: E402


class FakeAlgorithms:
    """Algorithms provider returning fixed measures and counting calls."""

    MEASURES = {
        ("A", "B"): 1.0,
        ("A", "C"): 2.0,
        ("B", "C"): 3.0,
        ("B", "A"): 10.0,
        ("C", "A"): 20.0,
        ("C", "B"): 30.0,
    }

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = Counter()

    async def run_algorithm(self, name, source):
        self.calls[source] += 1
        await asyncio.sleep(0)
        if self.fail:
            raise RuntimeError("algorithm unavailable")
        return {t: {"measure": m} for (s, t), m in self.MEASURES.items() if s == source}


@pytest.fixture
def triangle():
    """``A -> B``, ``A -> C`` and ``B -> C`` with weight 1."""
    return GraphSnapshotProvider.from_links({"A": {"B": 1, "C": 1}, "B": {"C": 1}})


@pytest.fixture
def fake_algorithms():
    return FakeAlgorithms()
