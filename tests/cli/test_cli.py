import json
from pathlib import Path

import pytest

from resflow import cli

DIAMOND = "s a 10\ns b 5\na t 5\nb t 10\na b 15\n"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_run_single_file(tmp_path: Path, capsys) -> None:
    graph = _write(tmp_path / "diamond.txt", DIAMOND)
    cli.main(["run", str(graph)])
    out = capsys.readouterr().out
    assert str(graph) in out
    assert "Vertices: 4" in out
    assert "Edges: 5" in out
    for name in ("Ford-Fulkerson", "Scaling Ford-Fulkerson", "Preflow-Push"):
        assert name in out
    assert "augmentations" in out
    assert "relabels" in out


def test_run_directory_with_results(tmp_path: Path, capsys) -> None:
    _write(tmp_path / "graphs" / "a.txt", "s t 7\n")
    _write(tmp_path / "graphs" / "sub" / "b.yaml", "edges:\n  - [s, x, 4]\n  - [x, t, 3]\n")
    _write(tmp_path / "graphs" / "readme.md", "not a graph\n")
    results = tmp_path / "out" / "results.json"

    cli.main(["run", str(tmp_path / "graphs"), "--results", str(results)])

    data = json.loads(results.read_text())
    assert len(data) == 2
    a = data[str(tmp_path / "graphs" / "a.txt")]
    b = data[str(tmp_path / "graphs" / "sub" / "b.yaml")]
    assert a["vertices"] == 2
    assert b["edges"] == 2
    assert {run["max_flow"] for run in a["runs"].values()} == {7.0}
    assert {run["max_flow"] for run in b["runs"].values()} == {3.0}


def test_run_selected_algorithm(tmp_path: Path, capsys) -> None:
    graph = _write(tmp_path / "g.txt", DIAMOND)
    results = tmp_path / "r.json"
    cli.main(["run", str(graph), "-a", "preflow-push", "-r", str(results)])
    runs = json.loads(results.read_text())[str(graph)]["runs"]
    assert list(runs) == ["Preflow-Push"]
    assert runs["Preflow-Push"]["max_flow"] == 15.0
    assert runs["Preflow-Push"]["pushes"] > 0


def test_run_custom_terminals(tmp_path: Path) -> None:
    graph = _write(tmp_path / "g.txt", "A B 2\nB C 9\n")
    results = tmp_path / "r.json"
    cli.main(
        ["run", str(graph), "--source", "A", "--sink", "C", "--results", str(results)]
    )
    entry = json.loads(results.read_text())[str(graph)]
    assert entry["source"] == "A"
    assert {run["max_flow"] for run in entry["runs"].values()} == {2.0}


def test_terminals_from_yaml(tmp_path: Path) -> None:
    graph = _write(
        tmp_path / "g.yaml", "source: in\nsink: out\nedges:\n  - [in, out, 5]\n"
    )
    results = tmp_path / "r.json"
    cli.main(["run", str(graph), "--results", str(results)])
    entry = json.loads(results.read_text())[str(graph)]
    assert (entry["source"], entry["sink"]) == ("in", "out")


def test_failing_file_exits_nonzero_but_processes_rest(
    tmp_path: Path, capsys, caplog
) -> None:
    _write(tmp_path / "a_bad.txt", "s t\n")
    _write(tmp_path / "b_no_sink.txt", "s a 1\n")
    _write(tmp_path / "c_good.txt", "s t 4\n")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(tmp_path)])
    assert exc_info.value.code == 1

    out = capsys.readouterr().out
    assert "c_good.txt" in out
    assert "a_bad.txt" in caplog.text
    assert "Sink node 't' does not exist" in caplog.text


def test_missing_path_exits_nonzero(tmp_path: Path, caplog) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(tmp_path / "nope")])
    assert exc_info.value.code == 1
    assert "Path not found" in caplog.text


def test_no_args_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: resflow" in capsys.readouterr().out


def test_unknown_algorithm_rejected(tmp_path: Path) -> None:
    graph = _write(tmp_path / "g.txt", "s t 1\n")
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(graph), "-a", "dinic"])
    assert exc_info.value.code == 2


def test_format_helpers() -> None:
    assert cli._format_flow(7.0) == "7"
    assert cli._format_flow(1234.5) == "1,234.5"
    assert cli._format_duration(0.123) == "123.0 ms"
    assert cli._format_duration(75.2) == "1m 15.2s"
    table = cli._format_table(["A", "B"], [["1", "2"]])
    assert table.splitlines()[0].strip().startswith("A")
    assert cli._format_table(["A"], []) == ""


def test_equal_terminals_report_zero_flow(tmp_path: Path) -> None:
    graph = _write(tmp_path / "cycle.txt", "s a 1\na s 1\n")
    results = tmp_path / "r.json"
    cli.main(
        [
            "run",
            str(graph),
            "--source",
            "s",
            "--sink",
            "s",
            "-a",
            "scaling-ford-fulkerson",
            "--results",
            str(results),
        ]
    )
    runs = json.loads(results.read_text())[str(graph)]["runs"]
    assert runs["Scaling Ford-Fulkerson"]["max_flow"] == 0.0
    assert runs["Scaling Ford-Fulkerson"]["phases"] == 0
