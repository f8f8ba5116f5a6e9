# graph_io.py
import json
import logging

import yaml

from core.exceptions import InvalidGraphError
from geometry.graph import Graph
from parameters.layout_parameters import LayoutParameters

logger = logging.getLogger("gem_layout")

_FLOAT_PARAMS = (
    "desired_temperature",
    "max_temperature",
    "desired_edge_length",
    "gravitational_constant",
    "oscillation_opening_angle",
    "rotation_opening_angle",
    "oscillation_sensitivity",
    "disturbance",
    "layout_extent",
)
_INT_PARAMS = ("update_frequency", "workers", "seed")


def load_data(filename):
    """Load a graph description from a JSON or YAML file.

    Expected format:
    {
        "nodes": ["a", "b", {"id": "c", "visible": false}, ...],
        "edges": [["a", "b"], ["b", "c"], ...],
        "edge_index": "id",            # or "row": edges refer to node rows
        "layout_parameters": {"desired_edge_length": 96, ...}
    }"""
    filename_str = str(filename)
    with open(filename_str, "r") as f:
        if filename_str.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        elif filename_str.endswith(".json"):
            data = json.load(f)
        else:
            logger.error(f"Unsupported file format for: {filename_str}")
            raise ValueError(f"Unsupported file format for: {filename_str}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidGraphError(f"Graph file {filename_str} must contain a mapping.")
    return data


def parse_parameters(raw) -> LayoutParameters:
    params = LayoutParameters()
    params.update(raw or {})

    def _coerce(key, kind):
        """Coerce numeric parameters that may parse as strings in YAML."""
        val = params.get(key)
        if val is None or isinstance(val, bool):
            return
        # Non-integral floats stay as they are so validate() rejects them.
        if kind is int and isinstance(val, float) and not val.is_integer():
            return
        try:
            params.set(key, kind(val))
        except (TypeError, ValueError):
            logger.warning("layout_parameters.%s should be numeric; got %r", key, val)

    for key in _FLOAT_PARAMS:
        _coerce(key, float)
    for key in _INT_PARAMS:
        _coerce(key, int)
    return params


def _parse_node(graph: Graph, entry, row: int):
    if isinstance(entry, dict):
        if "id" not in entry:
            raise InvalidGraphError(f"Node entry {row} has no 'id'.")
        kwargs = {"visible": bool(entry.get("visible", True))}
        if entry.get("position") is not None:
            kwargs["position"] = entry["position"]
        if entry.get("fixed"):
            kwargs["fixed"] = True
        options = {
            k: v
            for k, v in entry.items()
            if k not in ("id", "visible", "position", "fixed")
        }
        if options:
            kwargs["options"] = options
        return graph.add_node(entry["id"], **kwargs)
    return graph.add_node(entry)


def parse_graph(data: dict) -> tuple[Graph, LayoutParameters]:
    """Build a :class:`Graph` and its :class:`LayoutParameters` from loaded data."""
    graph = Graph()
    params = parse_parameters(data.get("layout_parameters"))

    raw_edges = data.get("edges") or []
    raw_nodes = data.get("nodes")
    edge_index = data.get("edge_index", "id")
    if edge_index not in ("id", "row"):
        raise InvalidGraphError(
            f"edge_index must be 'id' or 'row', got {edge_index!r}."
        )

    edges = []
    for entry in raw_edges:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise InvalidGraphError(
                f"Edge entry {entry!r} must be a [source, target] pair."
            )
        edges.append((entry[0], entry[1]))

    if raw_nodes is None:
        if edge_index == "row":
            raise InvalidGraphError("edge_index 'row' requires an explicit node list.")
        raw_nodes = []
        seen = set()
        for source, target in edges:
            for node_id in (source, target):
                if node_id not in seen:
                    seen.add(node_id)
                    raw_nodes.append(node_id)

    for row, entry in enumerate(raw_nodes):
        _parse_node(graph, entry, row)

    node_ids = list(graph.nodes)
    for source, target in edges:
        if edge_index == "row":
            try:
                source, target = node_ids[int(source)], node_ids[int(target)]
            except (IndexError, TypeError, ValueError) as exc:
                raise InvalidGraphError(
                    f"Edge ({source!r}, {target!r}) does not name valid node rows.",
                    edge=(source, target),
                ) from exc
        elif source not in graph.nodes or target not in graph.nodes:
            logger.warning(
                "Edge (%r, %r) references an unknown node; it will be ignored.",
                source,
                target,
            )
        graph.add_edge(source, target)

    logger.debug(
        "Parsed graph with %d nodes and %d edges.", len(graph.nodes), len(graph.edges)
    )
    return graph, params


def save_layout(
    graph: Graph,
    path: str = "outputs/layout.json",
    *,
    params: LayoutParameters | None = None,
    summary: dict | None = None,
    compact: bool = False,
):
    """Write node positions (and enough to reload the graph) to JSON."""

    def _node_entry(node):
        entry = {"id": node.node_id, "position": [node.x, node.y]}
        if node.fixed:
            entry["fixed"] = True
        if not node.visible:
            entry["visible"] = False
        entry.update(node.options)
        return entry

    data = {
        "nodes": [_node_entry(node) for node in graph.nodes.values()],
        "edges": [[source, target] for source, target in graph.edges],
    }
    if params is not None:
        data["layout_parameters"] = params.to_dict()
    if summary:
        data["layout"] = {
            key: summary[key]
            for key in ("rounds", "global_temperature", "converged", "cancelled")
            if key in summary
        }
    with open(path, "w") as f:
        if compact:
            json.dump(data, f, separators=(",", ":"), ensure_ascii=False)
        else:
            json.dump(data, f, indent=4, ensure_ascii=False)
