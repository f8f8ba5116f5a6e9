# runtime/impulse.py
"""Impulse computation: the direction a vertex wants to move in one round.

The impulse combines four terms:

* attraction toward the barycenter, scaled by the gravitational constant and
  the vertex's scaling factor,
* a random disturbance,
* repulsion from every other vertex, ``delta * L² / d²``,
* attraction toward every neighbor, ``-delta * d² / (L² * scaling)``,

where ``delta`` points from the other vertex to this one, ``d`` is the
configured distance and ``L`` the desired edge length. Coincident vertices
(``d == 0``) exert no repulsion on each other.

This is the O(n) per vertex, O(n²) per round part of the algorithm; the
inner loop over other vertices is done with numpy.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from parameters.layout_parameters import LayoutParameters


def scaling_factor(degree: int) -> float:
    """``1 + degree // 2``: heavier vertices feel gravity and springs less."""
    return float(1 + degree // 2)


def pair_distances(delta: np.ndarray, metric: str) -> np.ndarray:
    """Row-wise distance for an ``(m, 2)`` array of difference vectors."""
    if metric == "manhattan":
        return np.abs(delta).sum(axis=1)
    return np.sqrt(np.einsum("ij,ij->i", delta, delta))


def compute_impulse(
    positions: np.ndarray,
    sum_pos: np.ndarray,
    neighbors: np.ndarray,
    row: int,
    params: LayoutParameters,
    disturbance: np.ndarray,
) -> np.ndarray:
    """Return the impulse for vertex ``row``.

    Parameters
    ----------
    positions : np.ndarray
        ``(n, 2)`` vertex positions. Read only.
    sum_pos : np.ndarray
        Sum of all positions, consistent with ``positions``.
    neighbors : np.ndarray
        Rows adjacent to ``row``; never contains ``row`` itself.
    row : int
        The vertex whose impulse is computed.
    params : LayoutParameters
        Run configuration.
    disturbance : np.ndarray
        Random ``(2,)`` disturbance drawn by the caller.

    Returns
    -------
    np.ndarray
        The ``(2,)`` impulse vector.
    """
    n = positions.shape[0]
    position = positions[row]
    scaling = scaling_factor(neighbors.size)
    edge_sq = float(params.desired_edge_length) ** 2

    impulse = (sum_pos / n - position) * (float(params.gravitational_constant) * scaling)
    impulse = impulse + disturbance

    delta = position - positions
    distance = pair_distances(delta, params.distance_metric)
    # Row ``row`` has delta == 0 and drops out with the coincident vertices.
    nonzero = distance != 0
    if np.any(nonzero):
        scale = edge_sq / distance[nonzero] ** 2
        impulse = impulse + (delta[nonzero] * scale[:, None]).sum(axis=0)

    if neighbors.size:
        near = distance[neighbors]
        scale = near**2 / (edge_sq * scaling)
        impulse = impulse - (delta[neighbors] * scale[:, None]).sum(axis=0)

    return impulse


def compute_impulses(
    positions: np.ndarray,
    sum_pos: np.ndarray,
    neighbors: Sequence[np.ndarray],
    rows: Sequence[int],
    params: LayoutParameters,
    disturbances: np.ndarray,
) -> np.ndarray:
    """Impulses for ``rows`` against one fixed set of positions.

    ``disturbances[k]`` belongs to ``rows[k]``. Nothing is mutated, so
    disjoint slices of ``rows`` may be evaluated concurrently.
    """
    out = np.empty((len(rows), 2), dtype=np.float64)
    for k, row in enumerate(rows):
        out[k] = compute_impulse(
            positions, sum_pos, neighbors[row], int(row), params, disturbances[k]
        )
    return out
