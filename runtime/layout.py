# runtime/layout.py
"""Single entry point used by rendering and interaction code."""

from __future__ import annotations

from typing import Dict, Hashable, Optional, Tuple

import numpy as np

from geometry.graph import Graph
from parameters.layout_parameters import LayoutParameters
from runtime.scheduler import ProgressCallback, RoundScheduler


def compute_layout(
    graph: Graph,
    params: LayoutParameters | dict | None = None,
    *,
    rng: Optional[np.random.Generator] = None,
    progress: Optional[ProgressCallback] = None,
    cancel=None,
) -> Dict[Hashable, Tuple[float, float]]:
    """Lay out ``graph`` and return ``node_id -> (x, y)``.

    Runs to convergence, or until ``cancel.is_set()`` is seen between rounds.
    ``progress(mapping, rounds)`` is called every ``update_frequency`` rounds
    and once at the end; it runs on the layout thread and must return
    quickly. Node positions in ``graph`` are updated and every laid-out node
    ends with ``fixed = True``.
    """
    scheduler = RoundScheduler(
        graph, params, rng=rng, progress=progress, cancel=cancel
    )
    return scheduler.run()["positions"]
