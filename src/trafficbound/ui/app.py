from __future__ import annotations

from pathlib import Path

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from trafficbound.analysis import compare_curves, concavity_breaks, curve_summary, soundness_violations
from trafficbound.config import AnalysisConfig, HeuristicConfig, HeuristicType
from trafficbound.errors import TrafficBoundError
from trafficbound.output import arrival_figure
from trafficbound.runner import run_analysis
from trafficbound.storage import default_storage

UPLOAD_DIR = Path(".trafficbound/uploads")

st.set_page_config(page_title="Traffic Bound Explorer", layout="wide")

storage = default_storage()


@st.cache_data
def _load_runs() -> pd.DataFrame:
    return storage.list_runs()


def _render_header() -> None:
    st.title("Traffic Bound Explorer")
    st.caption("Concave arrival curves for periodic block protocols.")


def _build_config(source: Path) -> AnalysisConfig:
    with st.sidebar:
        st.header("Analysis")
        heuristic = st.selectbox("Heuristic", [h.value for h in HeuristicType])
        threshold = st.number_input("Threshold (0 = auto)", min_value=0, value=0)
        num_blocks = st.number_input("Consecutive blocks (0 = auto)", min_value=0, max_value=64, value=0)
        iterations = st.slider("Benchmark iterations", 1, 20, 1)
        notes = st.text_input("Notes", "")
    return AnalysisConfig(
        source_path=source,
        heuristic=HeuristicConfig(HeuristicType(heuristic), int(threshold), int(num_blocks)),
        benchmark_iterations=iterations,
        notes=notes,
    )


def _run_button() -> None:
    upload = st.sidebar.file_uploader("Protocol description (.dot)", type=["dot", "gv"])
    if upload is None:
        return
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    source = UPLOAD_DIR / upload.name
    source.write_bytes(upload.getvalue())
    config = _build_config(source)
    if not st.sidebar.button("Run analysis"):
        return
    progress = st.sidebar.progress(0, text="Running...")

    def on_progress(step: int, total: int) -> None:
        progress.progress(min(1.0, step / total))

    try:
        result = run_analysis(config, storage, progress=on_progress)
    except (TrafficBoundError, ValueError) as exc:
        st.sidebar.error(str(exc))
        return
    st.sidebar.success(f"Run completed: {result.run_id}")
    st.plotly_chart(
        arrival_figure(result.graph, result.function, result.curve, result.horizon),
        use_container_width=True,
    )
    horizon = range(result.horizon + 1)
    for signal in soundness_violations(result.graph, result.curve, horizon) + concavity_breaks(result.curve):
        st.error(f"{signal.label} at {signal.x:g}: {signal.detail}")
    st.cache_data.clear()


def _plot_segments(segments: pd.DataFrame, steps: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    if not steps.empty:
        fig.add_trace(
            go.Scatter(x=steps["time"], y=steps["value"], name="Recorded steps", mode="lines", line=dict(shape="hv"))
        )
    if not segments.empty:
        end = float(max(segments["x"].max(), steps["time"].max() if not steps.empty else 0.0)) * 1.5 + 1
        xs: list[float] = []
        ys: list[float] = []
        rows = segments.sort_values("idx").to_dict("records")
        for idx, row in enumerate(rows):
            stop = rows[idx + 1]["x"] if idx + 1 < len(rows) else end
            xs.extend([row["x"], stop])
            ys.extend([row["y"], row["y"] + row["slope"] * (stop - row["x"])])
        fig.add_trace(go.Scatter(x=xs, y=ys, name="Concave hull", mode="lines"))
    fig.update_layout(height=300, margin=dict(l=10, r=10, t=30, b=10))
    return fig


def _render_run_view(run_id: str) -> None:
    segments = storage.load_segments(run_id)
    steps = storage.load_steps(run_id)
    meta = storage.load_run_meta(run_id) or {}
    st.subheader(f"Run {run_id}")
    st.caption(str(meta.get("notes", "")))

    summary = curve_summary(segments)
    col1, col2, col3 = st.columns(3)
    col1.metric("Burst", f"{summary['burst']:g}")
    col2.metric("Rate", f"{summary['rate']:g}")
    col3.metric("Segments", summary["segments"])
    st.plotly_chart(_plot_segments(segments, steps), use_container_width=True)

    bench = storage.load_benchmarks(run_id)
    if not bench.empty:
        st.bar_chart(bench, x="iteration", y="seconds")


def _render_comparison() -> None:
    runs = _load_runs()
    if runs.empty:
        return
    run_ids = runs["run_id"].tolist()
    st.subheader("Run Comparison")
    base = st.selectbox("Baseline run", run_ids, index=0)
    candidate = st.selectbox("Candidate run", run_ids, index=min(1, len(run_ids) - 1))
    if base == candidate:
        st.info("Select two different runs for comparison")
        return
    regressions = compare_curves(storage.load_segments(base), storage.load_segments(candidate))
    if not regressions:
        st.success("Candidate curve is at least as tight as the baseline")
    else:
        for reg in regressions:
            st.error(f"{reg.message} ({reg.delta_pct:.1f}% on {reg.metric})")


def main() -> None:
    _render_header()
    _run_button()

    runs = _load_runs()
    if runs.empty:
        st.info("No runs yet. Upload a protocol description from the sidebar.")
        return
    selected_run = st.selectbox("Select run", runs["run_id"].tolist())
    _render_run_view(selected_run)
    _render_comparison()


if __name__ == "__main__":
    main()
