"""Pytest configuration, shared graph builders and test categorization.

Tests live in a flat `tests/` layout and are categorized into `unit`,
`regression`, and `e2e` via markers so CI can run targeted subsets.
"""

from __future__ import annotations

import os
import pathlib
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from geometry.graph import Graph, graph_from_edges  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    for name in ("unit", "regression", "e2e"):
        config.addinivalue_line("markers", f"{name}: {name} tests")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-apply test category markers based on filename conventions."""
    for item in items:
        path = pathlib.Path(str(item.fspath))
        name = path.name.lower()

        if "e2e" in name or "end_to_end" in name:
            item.add_marker(pytest.mark.e2e)
            continue

        if "regression" in name:
            item.add_marker(pytest.mark.regression)
            continue

        item.add_marker(pytest.mark.unit)


def path_graph(n: int) -> Graph:
    return graph_from_edges([(i, i + 1) for i in range(n - 1)], nodes=range(n))


def complete_graph(n: int) -> Graph:
    edges = [(i, j) for i in range(n) for j in range(i + 1, n)]
    return graph_from_edges(edges, nodes=range(n))


def star_graph(leaves: int) -> Graph:
    return graph_from_edges(
        [("hub", f"leaf{i}") for i in range(leaves)],
        nodes=["hub"] + [f"leaf{i}" for i in range(leaves)],
    )


@pytest.fixture
def repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().parents[1]
