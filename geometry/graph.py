# graph.py

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterator, List, Tuple

import numpy as np

from core.exceptions import InvalidGraphError

logger = logging.getLogger("gem_layout")


@dataclass
class Node:
    """A graph node as seen by the layout engine.

    ``fixed`` is the "settled" flag: the layout clears it while it owns the
    node and sets it once final coordinates have been written back, so an
    interaction layer knows when the node may be dragged or collapsed.
    """

    node_id: Hashable
    position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    fixed: bool = False
    visible: bool = True
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float).reshape(2)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    def set_position(self, x: float, y: float) -> None:
        self.position = np.array([x, y], dtype=float)


@dataclass
class Graph:
    """Ordered node table plus an edge list of ``(source, target)`` ids.

    Edges may be directed in the source data; the layout treats them as
    undirected. Multi-edges and self-loops are accepted.
    """

    nodes: Dict[Hashable, Node] = field(default_factory=dict)
    edges: List[Tuple[Hashable, Hashable]] = field(default_factory=list)

    def add_node(self, node_id: Hashable, **kwargs) -> Node:
        if node_id in self.nodes:
            raise InvalidGraphError(
                f"Node id {node_id!r} is already present in the graph.",
                node_id=node_id,
            )
        node = Node(node_id, **kwargs)
        self.nodes[node_id] = node
        return node

    def add_edge(self, source: Hashable, target: Hashable) -> None:
        self.edges.append((source, target))

    def visible_nodes(self) -> List[Node]:
        return [node for node in self.nodes.values() if node.visible]

    def incident_edges(self) -> Dict[Hashable, List[Tuple[Hashable, Hashable]]]:
        """Map each node id to the edges touching it, in edge-list order.

        A self-loop is listed once for its node. Edges naming unknown nodes
        are only listed under the endpoints that exist.
        """
        incident: Dict[Hashable, List[Tuple[Hashable, Hashable]]] = {
            node_id: [] for node_id in self.nodes
        }
        for edge in self.edges:
            source, target = edge
            if source in incident:
                incident[source].append(edge)
            if target in incident and target != source:
                incident[target].append(edge)
        return incident

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __contains__(self, node_id) -> bool:
        return node_id in self.nodes

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self.nodes)}, edges={len(self.edges)})"


def graph_from_edges(edges, nodes=None) -> Graph:
    """Build a :class:`Graph` from an edge iterable.

    ``nodes`` fixes the node order; when omitted, nodes appear in the order
    they are first mentioned by an edge.
    """
    graph = Graph()
    edges = [tuple(edge) for edge in edges]
    if nodes is None:
        nodes = []
        seen = set()
        for source, target in edges:
            for node_id in (source, target):
                if node_id not in seen:
                    seen.add(node_id)
                    nodes.append(node_id)
    for node_id in nodes:
        graph.add_node(node_id)
    for source, target in edges:
        if source not in graph.nodes or target not in graph.nodes:
            logger.debug(
                "Edge (%r, %r) references a node outside the graph.", source, target
            )
        graph.add_edge(source, target)
    return graph
