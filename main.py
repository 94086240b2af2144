"""CLI entrypoint for the one-line puzzle solver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from onepath.core.constants import DEFAULT_STEP_BUDGET
from onepath.core.exceptions import CrossCheckError, OnePathError
from onepath.core.models import OutcomeKind, Position, SearchOutcome
from onepath.engine.grid import GridConfig, PuzzleGrid
from onepath.engine.scheduler import start_search
from onepath.engine.search import SearchConfig
from onepath.io.layout import Layout, load_layout, parse_position
from onepath.utils.logger import configure_logging, get_logger
from onepath.utils.pretty import print_search_summary


LOGGER = get_logger("onepath.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find a path that visits every open grid cell exactly once",
    )
    parser.add_argument(
        "--layout",
        type=Path,
        metavar="FILE",
        help="Layout file ('.' open, '#'/'X' obstacle, 'S' start)",
    )
    parser.add_argument("--rows", type=int, help="Grid height in cells (without --layout)")
    parser.add_argument("--cols", type=int, help="Grid width in cells (without --layout)")
    parser.add_argument(
        "--obstacle",
        action="append",
        default=[],
        metavar="R,C",
        help="Obstacle cell; repeat for several (without --layout)",
    )
    parser.add_argument("--start", type=str, metavar="R,C", help="Start cell (overrides 'S')")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_STEP_BUDGET,
        help="Search steps per scheduler batch",
    )
    parser.add_argument(
        "--forced-endpoints",
        action="store_true",
        help="Also prune when two cells could only be the final cell",
    )
    parser.add_argument(
        "--cross-check",
        action="store_true",
        help="Confirm the result with the exact CP-SAT model",
    )
    parser.add_argument(
        "--cross-check-timeout",
        type=float,
        default=10.0,
        help="CP-SAT time limit in seconds",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--quiet", action="store_true", help="Skip the grid and stats printout")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def resolve_layout(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Layout:
    if args.layout:
        if args.rows is not None or args.cols is not None or args.obstacle:
            parser.error("--layout cannot be combined with --rows/--cols/--obstacle")
        layout = load_layout(args.layout)
    else:
        if args.rows is None or args.cols is None:
            parser.error("provide --layout or both --rows and --cols")
        obstacles = frozenset(parse_position(value) for value in args.obstacle)
        layout = Layout(config=GridConfig(height=args.rows, width=args.cols, obstacles=obstacles))
    if args.start:
        layout.start = parse_position(args.start)
    if layout.start is None:
        parser.error("no start cell: use --start or mark one 'S' in the layout")
    return layout


def run_search(
    grid: PuzzleGrid, start: Position, config: SearchConfig
) -> Tuple[SearchOutcome, Dict[str, int]]:
    handle = start_search(grid, start, config=config)
    handle.on_progress(
        lambda steps, elapsed_ms: LOGGER.info(
            "Searching... %d steps, %d ms", steps, elapsed_ms
        )
    )
    try:
        outcome = handle.run()
    except KeyboardInterrupt:
        # The handle has already finished the search as cancelled.
        LOGGER.warning("Interrupted, search cancelled")
        assert handle.outcome is not None
        outcome = handle.outcome
    return outcome, handle.session.prune_summary()


def cross_check(
    grid: PuzzleGrid, start: Position, outcome: SearchOutcome, timeout: float
) -> Optional[bool]:
    from onepath.engine.exact import solve_exact

    try:
        exact_path = solve_exact(grid, start, timeout=timeout)
    except CrossCheckError as exc:
        LOGGER.warning("Cross-check inconclusive: %s", exc)
        return None
    agrees = (exact_path is not None) == outcome.is_solved
    if agrees:
        LOGGER.info("Cross-check agrees with the search outcome")
    else:
        LOGGER.error(
            "Cross-check disagrees: search=%s, CP-SAT %s",
            outcome.kind.value,
            "found a path" if exact_path is not None else "proved infeasible",
        )
    return agrees


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    try:
        layout = resolve_layout(args, parser)
        grid = PuzzleGrid(layout.config)
        config = SearchConfig(
            step_budget_per_batch=args.batch_size,
            forced_endpoint_pruning=args.forced_endpoints,
        )
        assert layout.start is not None
        start = grid.require_start(layout.start)
    except OnePathError as exc:
        LOGGER.error("Invalid puzzle: %s", exc)
        return 2

    outcome, prunes = run_search(grid, start, config)
    LOGGER.info(
        "Search %s after %d steps in %d ms",
        outcome.kind.value.lower(),
        outcome.steps,
        outcome.elapsed_ms,
    )

    payload: Dict[str, Any] = {
        "rows": grid.rows,
        "cols": grid.cols,
        "start": list(start),
        "obstacles": sorted(list(pos) for pos in layout.config.obstacles),
        **outcome.to_jsonable(),
    }
    if args.cross_check and outcome.kind != OutcomeKind.CANCELLED:
        payload["cross_check"] = cross_check(grid, start, outcome, args.cross_check_timeout)

    if not args.quiet:
        print_search_summary(outcome, grid, start=start, prunes=prunes)
    if args.output:
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    elif args.quiet:
        print(json.dumps(payload, indent=2))
    return 0 if outcome.is_solved else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
