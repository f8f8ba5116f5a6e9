import json

import numpy as np
import pytest

from core.exceptions import ConfigurationError, InvalidGraphError
from geometry.graph_io import load_data, parse_graph, save_layout


def test_load_json_and_yaml(tmp_path):
    json_path = tmp_path / "g.json"
    json_path.write_text(json.dumps({"edges": [["a", "b"]]}))
    yaml_path = tmp_path / "g.yaml"
    yaml_path.write_text("edges:\n  - [a, b]\n")

    assert load_data(json_path) == {"edges": [["a", "b"]]}
    assert load_data(yaml_path) == {"edges": [["a", "b"]]}


def test_load_rejects_unknown_extension(tmp_path):
    path = tmp_path / "g.txt"
    path.write_text("")
    with pytest.raises(ValueError):
        load_data(path)


def test_parse_graph_nodes_from_edges_and_parameters():
    graph, params = parse_graph(
        {
            "edges": [["a", "b"], ["b", "c"]],
            "layout_parameters": {"desired_edge_length": "96", "update_frequency": "5"},
        }
    )
    assert list(graph.nodes) == ["a", "b", "c"]
    assert graph.edges == [("a", "b"), ("b", "c")]
    assert params.desired_edge_length == 96.0
    assert params.update_frequency == 5
    params.validate()


def test_parse_graph_row_indexed_edges_and_node_dicts():
    graph, _ = parse_graph(
        {
            "edge_index": "row",
            "nodes": ["root", {"id": "leaf", "visible": False, "label": "Leaf"}],
            "edges": [[0, 1]],
        }
    )
    assert graph.edges == [("root", "leaf")]
    assert graph.nodes["leaf"].visible is False
    assert graph.nodes["leaf"].options == {"label": "Leaf"}


def test_parse_graph_row_index_out_of_range():
    with pytest.raises(InvalidGraphError):
        parse_graph({"edge_index": "row", "nodes": ["a"], "edges": [[0, 3]]})


def test_parse_graph_rejects_malformed_edge():
    with pytest.raises(InvalidGraphError):
        parse_graph({"edges": [["a", "b", "c"]]})


def test_parse_graph_keeps_edge_to_unknown_node_with_warning(caplog):
    with caplog.at_level("WARNING", logger="gem_layout"):
        graph, _ = parse_graph({"nodes": ["a"], "edges": [["a", "ghost"]]})
    assert graph.edges == [("a", "ghost")]
    assert "unknown node" in caplog.text


def test_save_layout_roundtrip(tmp_path):
    graph, params = parse_graph({"edges": [["a", "b"]]})
    graph.nodes["a"].set_position(1.0, 2.0)
    graph.nodes["a"].fixed = True
    out = tmp_path / "layout.json"

    save_layout(
        graph,
        str(out),
        params=params,
        summary={"rounds": 3, "global_temperature": 1.5, "converged": True},
    )

    data = load_data(out)
    assert data["layout"] == {"rounds": 3, "global_temperature": 1.5, "converged": True}
    reloaded, reloaded_params = parse_graph(data)
    np.testing.assert_allclose(reloaded.nodes["a"].position, [1.0, 2.0])
    assert reloaded.nodes["a"].fixed is True
    assert reloaded.nodes["b"].fixed is False
    assert reloaded_params.desired_edge_length == params.desired_edge_length


def test_save_layout_compact(tmp_path):
    graph, _ = parse_graph({"edges": [["a", "b"]]})
    out = tmp_path / "compact.json"
    save_layout(graph, str(out), compact=True)
    assert "\n" not in out.read_text()


def test_parse_graph_rejects_duplicate_node_ids():
    with pytest.raises(InvalidGraphError) as excinfo:
        parse_graph({"nodes": ["a", "b", {"id": "a"}], "edges": [["a", "b"]]})
    assert excinfo.value.node_id == "a"


def test_integer_parameters_keep_full_precision():
    big_seed = 2**63 + 1
    _, params = parse_graph(
        {"edges": [["a", "b"]], "layout_parameters": {"seed": big_seed, "workers": 4.0}}
    )
    assert params.seed == big_seed
    assert params.workers == 4
    params.validate()


@pytest.mark.parametrize("key", ["update_frequency", "workers", "seed"])
def test_non_integral_integer_parameters_are_rejected(key):
    _, params = parse_graph(
        {"edges": [["a", "b"]], "layout_parameters": {key: 2.5}}
    )
    assert params.get(key) == 2.5
    with pytest.raises(ConfigurationError) as excinfo:
        params.validate()
    assert excinfo.value.key == key
