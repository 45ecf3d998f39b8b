from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import duckdb
import pandas as pd

from trafficbound.config import AnalysisConfig
from trafficbound.curves import ArrivalCurve, PseudoPeriodicFunction
from trafficbound.metrics import BenchmarkSample


@dataclass(slots=True)
class Storage:
    db_path: Path

    def __post_init__(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(str(self.db_path))

    def _init_schema(self) -> None:
        with self._connect() as con:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS run_meta (
                    run_id TEXT PRIMARY KEY,
                    created_at TIMESTAMP,
                    config_json TEXT,
                    notes TEXT,
                    heuristic TEXT,
                    period_begin BIGINT,
                    period_length BIGINT,
                    period_increment DOUBLE,
                    curve TEXT
                );
                """
            )
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS curve_segments (
                    run_id TEXT,
                    idx INTEGER,
                    x DOUBLE,
                    y DOUBLE,
                    slope DOUBLE,
                    left_open BOOLEAN
                );
                """
            )
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS function_steps (
                    run_id TEXT,
                    time BIGINT,
                    value DOUBLE
                );
                """
            )
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS benchmark_samples (
                    run_id TEXT,
                    iteration INTEGER,
                    seconds DOUBLE
                );
                """
            )

    def run_exists(self, run_id: str) -> bool:
        with self._connect() as con:
            result = con.execute(
                "SELECT COUNT(*) FROM run_meta WHERE run_id = ?",
                [run_id],
            ).fetchone()
            return bool(result and result[0] > 0)

    def save_run(
        self,
        config: AnalysisConfig,
        run_id: str,
        function: PseudoPeriodicFunction,
        curve: ArrivalCurve,
        samples: Iterable[BenchmarkSample] = (),
    ) -> None:
        if self.run_exists(run_id):
            msg = f"Run {run_id} already exists"
            raise ValueError(msg)
        config_json = json.dumps(config.to_metadata())
        with self._connect() as con:
            con.execute(
                "INSERT INTO run_meta VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    run_id,
                    config.created_at,
                    config_json,
                    config.notes,
                    config.heuristic.heuristic.value,
                    function.period_begin,
                    function.period_length,
                    float(function.period_increment),
                    str(curve),
                ],
            )
            segments_df = pd.DataFrame(
                [
                    {
                        "run_id": run_id,
                        "idx": idx,
                        "x": float(s.x),
                        "y": float(s.y),
                        "slope": float(s.slope),
                        "left_open": s.left_open,
                    }
                    for idx, s in enumerate(curve)
                ]
            )
            if not segments_df.empty:
                con.execute("INSERT INTO curve_segments SELECT * FROM segments_df")
            steps_df = pd.DataFrame(
                [
                    {"run_id": run_id, "time": t, "value": float(v)}
                    for t, v in zip(function.times, function.values)
                ]
            )
            if not steps_df.empty:
                con.execute("INSERT INTO function_steps SELECT * FROM steps_df")
            bench_df = pd.DataFrame(
                [{"run_id": run_id, "iteration": s.iteration, "seconds": s.seconds} for s in samples]
            )
            if not bench_df.empty:
                con.execute("INSERT INTO benchmark_samples SELECT * FROM bench_df")

    def list_runs(self) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT run_id, created_at, heuristic, curve, notes FROM run_meta ORDER BY created_at DESC"
            ).fetchdf()

    def load_run_meta(self, run_id: str) -> dict[str, object] | None:
        with self._connect() as con:
            row = con.execute(
                "SELECT config_json FROM run_meta WHERE run_id = ?",
                [run_id],
            ).fetchone()
            if not row:
                return None
            return json.loads(row[0])

    def load_segments(self, run_id: str) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT * FROM curve_segments WHERE run_id = ? ORDER BY idx",
                [run_id],
            ).fetchdf()

    def load_steps(self, run_id: str) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT * FROM function_steps WHERE run_id = ? ORDER BY time",
                [run_id],
            ).fetchdf()

    def load_benchmarks(self, run_id: str) -> pd.DataFrame:
        with self._connect() as con:
            return con.execute(
                "SELECT * FROM benchmark_samples WHERE run_id = ? ORDER BY iteration",
                [run_id],
            ).fetchdf()
