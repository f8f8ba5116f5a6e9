# runtime/publisher.py

import logging
from typing import Dict, Hashable, Tuple

from geometry.graph import Graph
from runtime.layout_state import LayoutState

logger = logging.getLogger("gem_layout")


def publish_layout(
    state: LayoutState, graph: Graph
) -> Dict[Hashable, Tuple[float, float]]:
    """Write final coordinates back to ``graph`` and mark the nodes settled.

    Settled nodes (``fixed = True``) are handed back to the interaction
    layer; the layout no longer touches them.
    """
    coordinates = state.coordinates()
    for node_id, (x, y) in coordinates.items():
        node = graph.nodes[node_id]
        node.set_position(x, y)
        node.fixed = True
    logger.debug("Published %d node positions.", len(coordinates))
    return coordinates
