from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from trafficbound.config import AnalysisConfig, HeuristicConfig, HeuristicType, OutputFormat
from trafficbound.errors import TrafficBoundError
from trafficbound.output import (
    arrival_figure,
    function_steps,
    max_traffic_steps,
    render_discodnc,
    render_steps,
    write_html,
)
from trafficbound.runner import AnalysisResult, run_analysis
from trafficbound.storage import Storage

logger = logging.getLogger(__name__)

DEFAULT_HTML = Path("arrival_curve.html")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Concave arrival curves for periodic block protocols")
    parser.add_argument("path", help="DOT protocol description")
    parser.add_argument("-f", "--format", choices=[f.value for f in OutputFormat], default=OutputFormat.DISCODNC.value)
    parser.add_argument("-o", "--output", help="Write output here instead of stdout")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help='Include "real" arrival function and pseudoperiodic approximation in output',
    )
    parser.add_argument("-H", "--heuristic", choices=[h.value for h in HeuristicType], default=HeuristicType.SUBADDITIVE.value)
    parser.add_argument("-k", "--threshold", type=int, default=0, help="Threshold for subadditive approximation. 0 for auto")
    parser.add_argument(
        "-n",
        "--numblocks",
        type=int,
        default=0,
        help="Number of sequential blocks for building fully-connected model. 0 for auto",
    )
    parser.add_argument("-b", "--benchmark", action="store_true", help="Run in benchmark mode")
    parser.add_argument("-B", "--bench-iters", type=int, default=5, help="How many iterations for benchmark")
    parser.add_argument("--store", help="duckdb file to record the run in")
    parser.add_argument("--notes", default="")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> AnalysisConfig:
    return AnalysisConfig(
        source_path=Path(args.path),
        heuristic=HeuristicConfig(
            heuristic=HeuristicType(args.heuristic),
            threshold=args.threshold,
            num_blocks=args.numblocks,
        ),
        output_format=OutputFormat(args.format),
        output_path=Path(args.output) if args.output else None,
        verbose=args.verbose,
        benchmark_iterations=args.bench_iters if args.benchmark else 1,
        notes=args.notes,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose else getattr(logging, args.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s | %(levelname)s | %(message)s")

    source = Path(args.path)
    if not source.exists():
        logger.error("%s: No such path", source)
        return 1
    if not source.is_file():
        logger.error("%s: Not a file", source)
        return 1
    if args.benchmark and args.bench_iters < 2:
        logger.error("Benchmark mode needs at least 2 iterations, got %s", args.bench_iters)
        return 1

    if args.threshold < 0 or args.numblocks < 0:
        logger.error("Threshold and block count must not be negative")
        return 1

    config = _build_config(args)

    storage = Storage(Path(args.store)) if args.store else None
    try:
        result = _run(config, storage)
    except (TrafficBoundError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    _emit(config, result)
    if config.benchmark:
        print(f"Mean run time: {result.stats.mean_sec:.6f}s (std {result.stats.std_sec:.6f}s over {result.stats.iterations} runs)")
    if storage is not None:
        logger.info("Stored run %s in %s", result.run_id, storage.db_path)
    return 0


def _run(config: AnalysisConfig, storage: Storage | None) -> AnalysisResult:
    if not config.benchmark:
        return run_analysis(config, storage)
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        transient=True,
    )
    with progress:
        task_id = progress.add_task("Benchmarking", total=config.benchmark_iterations)

        def on_progress(step: int, total: int) -> None:
            progress.update(task_id, completed=step)

        return run_analysis(config, storage, progress=on_progress)


def _emit(config: AnalysisConfig, result: AnalysisResult) -> None:
    if config.output_format is OutputFormat.PLOTLY:
        fig = arrival_figure(
            result.graph if config.verbose else None,
            result.function if config.verbose else None,
            result.curve,
            result.horizon,
        )
        path = write_html(fig, config.output_path or DEFAULT_HTML)
        print(f"Wrote {path}")
        return

    parts = []
    if config.verbose:
        parts.append(render_steps(f"Actual traffic up to {result.horizon}", max_traffic_steps(result.graph, result.horizon)))
        parts.append(
            render_steps(
                f"Pseudo-periodic function up to {result.horizon}",
                function_steps(result.function, result.horizon),
            )
        )
    parts.append(render_discodnc(result.curve))
    text = "\n".join(parts)
    if config.output_path is None:
        print(text)
    else:
        config.output_path.parent.mkdir(parents=True, exist_ok=True)
        config.output_path.write_text(text + "\n", encoding="utf-8")


if __name__ == "__main__":
    raise SystemExit(main())
