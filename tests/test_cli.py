from __future__ import annotations

from pathlib import Path

import pytest

from trafficbound.cli import main
from trafficbound.storage import Storage


def test_prints_discodnc_curve(ring_dot: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(ring_dot), "-k", "20"]) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("{(0.0,0.0),0.0;!(0.0,")
    assert out.endswith("}")


def test_verbose_adds_step_tables(ring_dot: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(ring_dot), "-v", "-k", "10"]) == 0
    out = capsys.readouterr().out
    assert "# Actual traffic up to 20" in out
    assert "# Pseudo-periodic function up to 20" in out


@pytest.mark.parametrize("heuristic", ["loop", "rescale"])
def test_loop_heuristics(ring_dot: Path, tmp_path: Path, heuristic: str) -> None:
    out = tmp_path / "curve.txt"
    assert main([str(ring_dot), "-H", heuristic, "-n", "1", "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8").startswith("{")


def test_plotly_output(ring_dot: Path, tmp_path: Path) -> None:
    out = tmp_path / "curve.html"
    assert main([str(ring_dot), "-f", "plotly", "-v", "-o", str(out)]) == 0
    assert out.exists()


def test_benchmark(ring_dot: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db = tmp_path / "runs.duckdb"
    assert main([str(ring_dot), "-b", "-B", "3", "--store", str(db), "--notes", "bench"]) == 0
    assert "Mean run time" in capsys.readouterr().out
    storage = Storage(db)
    runs = storage.list_runs()
    assert len(runs) == 1
    assert len(storage.load_benchmarks(runs["run_id"].iloc[0])) == 3


def test_rejects_bad_invocations(ring_dot: Path, tmp_path: Path) -> None:
    assert main([str(tmp_path / "missing.dot")]) == 1
    assert main([str(tmp_path)]) == 1
    assert main([str(ring_dot), "-b", "-B", "1"]) == 1
    assert main([str(ring_dot), "-k", "-3"]) == 1


def test_malformed_description_fails(tmp_path: Path) -> None:
    path = tmp_path / "broken.dot"
    path.write_text("digraph g { B [type=Block, tPeriod=4]; }", encoding="utf-8")
    assert main([str(path)]) == 1
