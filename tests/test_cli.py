import json

from trigger_graph.cli import main, parse_args
from trigger_graph.config import load_settings


def test_cli_writes_artifact(tmp_path, sample_map, capsys):
    map_path = tmp_path / "sample.map"
    map_path.write_text(sample_map, encoding="utf-8")
    output_path = tmp_path / "out" / "graph.json"

    exit_code = main(["--input-path", str(map_path), "--output-path", str(output_path), "--inspect", "Team1"])

    assert exit_code == 0
    artifact = json.loads(output_path.read_text(encoding="utf-8"))
    assert [node["id"] for node in artifact["nodes"]] == ["01000000", "G3", "01000001", "01000002", "L5"]
    assert artifact["nodes"][0]["type"] == "trigger"
    assert artifact["nodes"][1]["type"] == "global_variable"
    assert artifact["nodes"][0]["neighbours"] == ["01000001", "01000002", "L5"]
    assert len(artifact["edges"]) == 6
    assert artifact["meta"]["resolver_report"]["bundles"]["Team1"]["secondary1"]["id"] == "Script9"
    printed = capsys.readouterr().out
    assert "nodes=5" in printed
    assert "Warning: Trigger 01000003 doesn't have any tags!" in printed


def test_cli_describes_triggers(tmp_path, sample_map, capsys):
    map_path = tmp_path / "sample.map"
    map_path.write_text(sample_map, encoding="utf-8")

    main(
        [
            "--input-path",
            str(map_path),
            "--output-path",
            str(tmp_path / "graph.json"),
            "--definitions",
            str(tmp_path / "missing.json"),
            "--describe",
            "01000001",
            "nope",
        ]
    )

    printed = capsys.readouterr().out
    assert "Name: Linked A" in printed
    assert "Link Trigger: 01000002" in printed
    assert "Node nope: (not found)" in printed


def test_cli_describes_variables(tmp_path, sample_map, capsys):
    map_path = tmp_path / "sample.map"
    map_path.write_text(sample_map, encoding="utf-8")

    main(["--input-path", str(map_path), "--output-path", str(tmp_path / "graph.json"), "--describe", "L5", "G3"])

    printed = capsys.readouterr().out
    assert "Name: MyLocal\nID: L5\nInitial Value: 1" in printed
    assert "Name: Global Variable 3\nID: G3\nInitial Value: N/A" in printed
    assert "(not found)" not in printed


def test_parse_args_defaults():
    args = parse_args(["--input-path", "x.map"])

    assert args.inspect == []
    assert args.describe == []
    assert args.definitions is None


def test_settings_read_from_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TRIGGER_GRAPH_DEFINITIONS", "fadata.json")
    monkeypatch.setenv("TRIGGER_GRAPH_ENCODING", "cp1252")
    monkeypatch.setenv("TRIGGER_GRAPH_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.definitions_path == "fadata.json"
    assert settings.encoding == "cp1252"
    assert settings.log_level == "DEBUG"
