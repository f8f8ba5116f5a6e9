# runtime/initializer.py

import logging
from typing import Dict, Hashable, List, Optional

import numpy as np

from geometry.graph import Graph
from parameters.layout_parameters import LayoutParameters
from runtime.layout_state import LayoutState

logger = logging.getLogger("gem_layout")


def _resolve_neighbors(
    graph: Graph, node_ids: List[Hashable], rows: Dict[Hashable, int]
) -> List[np.ndarray]:
    """Return, per row, the rows of the nodes sharing an edge with it.

    Both edge directions count; repeated edges, self-loops and edges leading
    to nodes outside the layout are dropped.
    """
    incident = graph.incident_edges()
    neighbors = []
    dropped = 0
    for row, node_id in enumerate(node_ids):
        adjacent: Dict[int, None] = {}
        for source, target in incident[node_id]:
            other = target if source == node_id else source
            other_row = rows.get(other)
            if other_row is None:
                dropped += 1
                continue
            if other_row == row:
                continue
            adjacent[other_row] = None
        neighbors.append(np.fromiter(adjacent, dtype=np.intp, count=len(adjacent)))
    if dropped:
        logger.debug("Ignored %d edge endpoints outside the layout.", dropped)
    return neighbors


def initialize_layout(
    graph: Graph, params: LayoutParameters, rng: np.random.Generator
) -> Optional[LayoutState]:
    """Place every visible node at random and build the simulation state.

    Returns ``None`` for a graph without visible nodes.
    """
    nodes = graph.visible_nodes()
    if not nodes:
        logger.info("Graph has no visible nodes; nothing to lay out.")
        return None

    node_ids = [node.node_id for node in nodes]
    # Node ids are unique: Graph.add_node rejects duplicates.
    rows = {node_id: row for row, node_id in enumerate(node_ids)}

    half = float(params.layout_extent) / 2.0
    positions = rng.uniform(-half, half, size=(len(nodes), 2))
    for node, position in zip(nodes, positions):
        node.set_position(position[0], position[1])
        node.fixed = False

    state = LayoutState(
        node_ids=node_ids,
        positions=positions,
        neighbors=_resolve_neighbors(graph, node_ids, rows),
        max_temperature=float(params.max_temperature),
    )

    logger.info("Nodes added to layout: %d.", state.vertex_count)
    logger.debug("max_rounds set to: %d.", state.max_rounds)
    logger.debug("rotation_sensitivity set to: %.6g.", state.rotation_sensitivity)
    return state
