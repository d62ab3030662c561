import json

import pytest
from typer.testing import CliRunner

from graphstats import cli

runner = CliRunner()

GRAPH = {
    "nodes": [
        {"id": "A", "text": "Graphs are great."},
        {"id": "B", "text": "Graphs are great!", "ctime": 5},
        "C",
    ],
    "links": [
        {"source": "A", "target": "B"},
        {"source": "A", "target": "C"},
        {"source": "B", "target": "C", "count": 3},
    ],
}


@pytest.fixture
def graph_file(tmp_path, monkeypatch):
    monkeypatch.delenv("GRAPHSTATS_CONFIG", raising=False)
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(GRAPH))
    return path


def test_compute_command(graph_file, tmp_path):
    out = tmp_path / "stats.json"
    result = runner.invoke(
        cli.app_cli,
        [
            "compute",
            str(graph_file),
            "--node-size",
            "forwardUniquelinksCount",
            "--node-color",
            "creationTime",
            "--link-size",
            "BoW",
            "--output",
            str(out),
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text())
    assert data["node_size"]["A"] == {"measure": 2.0, "value": 1.5}
    assert data["node_size"]["C"]["value"] == 0.5
    assert data["link_size"]["A->B"]["measure"] == pytest.approx(1.0)
    assert set(data["link_color"]) == {"A->B", "A->C", "B->C"}
    assert "node_color" in data["warnings"]


def test_compute_rejects_unknown_function(graph_file):
    result = runner.invoke(cli.app_cli, ["compute", str(graph_file), "--node-size", "pagerank"])
    assert result.exit_code == 1


def test_functions_command():
    result = runner.invoke(cli.app_cli, ["functions"])
    assert result.exit_code == 0
    assert "backlinksCount" in result.output
    assert "Adamic Adar" in result.output


def test_compute_with_numeric_ids(tmp_path, monkeypatch):
    monkeypatch.delenv("GRAPHSTATS_CONFIG", raising=False)
    path = tmp_path / "numeric.json"
    path.write_text(json.dumps({"nodes": [1, 2, 3], "links": [{"source": 1, "target": 2}, {"source": 2, "target": 3}]}))
    result = runner.invoke(cli.app_cli, ["compute", str(path), "--link-size", "Jaccard"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert set(data["node_size"]) == {"1", "2", "3"}
    assert set(data["link_size"]) == {"1->2", "2->3"}
