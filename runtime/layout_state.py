# runtime/layout_state.py
"""Simulation state for one GEM layout run.

Vertices live in flat arrays addressed by row; neighbor lists hold row
indices rather than object references. ``sum_pos`` is the running sum of all
positions, so the barycenter is ``sum_pos / n`` without a pass over the
vertices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, List, Tuple

import numpy as np


class LayoutPhase(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    CONVERGED = "converged"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Vertex:
    """Read-only view of one row of :class:`LayoutState`."""

    node_id: Hashable
    position: Tuple[float, float]
    impulse: Tuple[float, float]
    temperature: float
    skew: float
    neighbors: Tuple[int, ...]


@dataclass
class LayoutState:
    node_ids: List[Hashable]
    positions: np.ndarray
    neighbors: List[np.ndarray]
    max_temperature: float
    impulses: np.ndarray = field(init=False)
    temperatures: np.ndarray = field(init=False)
    skews: np.ndarray = field(init=False)
    sum_pos: np.ndarray = field(init=False)
    global_temperature: float = 0.0
    rounds: int = 0
    max_rounds: int = field(init=False)
    rotation_sensitivity: float = field(init=False)
    phase: LayoutPhase = LayoutPhase.INITIALIZED

    def __post_init__(self):
        n = len(self.node_ids)
        self.positions = np.asarray(self.positions, dtype=np.float64).reshape(n, 2)
        self.impulses = np.zeros((n, 2), dtype=np.float64)
        self.temperatures = np.full(n, float(self.max_temperature), dtype=np.float64)
        self.skews = np.zeros(n, dtype=np.float64)
        self.sum_pos = self.positions.sum(axis=0)
        self.max_rounds = 4 * n
        self.rotation_sensitivity = 1.0 / (2 * n)

    @property
    def vertex_count(self) -> int:
        return len(self.node_ids)

    def barycenter(self) -> np.ndarray:
        return self.sum_pos / self.vertex_count

    def degree(self, row: int) -> int:
        return int(self.neighbors[row].size)

    def vertex(self, row: int) -> Vertex:
        return Vertex(
            node_id=self.node_ids[row],
            position=(float(self.positions[row, 0]), float(self.positions[row, 1])),
            impulse=(float(self.impulses[row, 0]), float(self.impulses[row, 1])),
            temperature=float(self.temperatures[row]),
            skew=float(self.skews[row]),
            neighbors=tuple(int(i) for i in self.neighbors[row]),
        )

    def coordinates(self) -> dict:
        """Current ``node_id -> (x, y)`` mapping as plain floats."""
        return {
            node_id: (float(self.positions[row, 0]), float(self.positions[row, 1]))
            for row, node_id in enumerate(self.node_ids)
        }

    def __len__(self) -> int:
        return self.vertex_count

    def __repr__(self) -> str:
        return (
            f"LayoutState(n={self.vertex_count}, rounds={self.rounds}/"
            f"{self.max_rounds}, T={self.global_temperature:.3f}, "
            f"phase={self.phase.value})"
        )
