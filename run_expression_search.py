"""
run_expression_search.py

Command line entry point for the SixNine expression search.

Writes the shortest complete expressions per operation count as JSON and,
optionally, a plain-text report with per-level statistics.

Usage:
    python run_expression_search.py 3
    python run_expression_search.py 4 --no-power --parallel --workers 8
    python run_expression_search.py 3 --config config/search_config.yml \
        --output expressions.json --report search_report.txt
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from component_5_logging_config import get_logger, log_component_error, setup_logging
from component_6_search_config import SearchConfig, load_search_config
from component_7_expression_search import ExpressionSearchService, SearchResult
from sixnine_exceptions import SixNineException, get_user_friendly_message

logger = get_logger(__name__)


def generate_report_text(result: SearchResult) -> str:
    """Formatted text report of a finished search"""
    config = result.config
    lines = [
        "=" * 80,
        "SIXNINE EXPRESSION SEARCH REPORT",
        "=" * 80,
        f"Max Operations: {result.max_operations}",
        f"Operators: {'+ - * / **' if config.include_power else '+ - * /'}",
        f"Parallel: {config.enable_parallel_execution} (workers={config.max_workers})",
        f"Total Values Found: {result.total_found}",
        f"Elapsed: {result.elapsed_ms:.1f}ms",
        "",
        "-" * 80,
        "PER LEVEL",
        "-" * 80,
        f"{'Level':>5} {'Found':>8} {'Retained':>10} {'Candidates':>12} "
        f"{'Adjacency':>10} {'DivZero':>8} {'Overflow':>9} {'Time (ms)':>10}",
    ]

    for stats, mapping in zip(result.statistics, result.levels):
        lines.append(
            f"{stats.level:>5} {len(mapping):>8} {stats.retained:>10} "
            f"{stats.candidates:>12} {stats.adjacency_skips:>10} "
            f"{stats.division_by_zero:>8} {stats.overflow:>9} {stats.elapsed_ms:>10.1f}"
        )

    lines.extend(["", "=" * 80])
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the shortest 6/9 expressions for every reachable integer"
    )
    parser.add_argument("max_operations", type=int, help="Operation budget N")
    parser.add_argument("--no-power", action="store_true", help="Leave out the ** operator")
    parser.add_argument("--parallel", action="store_true", help="Scan compositions in worker threads")
    parser.add_argument("--workers", type=int, default=None, help="Number of worker threads")
    parser.add_argument("--config", type=str, default=None, help="YAML config file")
    parser.add_argument("--output", type=str, default=None, help="Output JSON file (default: stdout)")
    parser.add_argument("--report", type=str, default=None, help="Output text report")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: WARNING)",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Also write log files, main log at this path")
    return parser


def resolve_config(args: argparse.Namespace) -> SearchConfig:
    """Config file settings, overridden by command line flags"""
    config = load_search_config(args.config)

    overrides = {"max_operations": args.max_operations}
    if args.no_power:
        overrides["include_power"] = False
    if args.parallel:
        overrides["enable_parallel_execution"] = True
    if args.workers is not None:
        overrides["max_workers"] = args.workers

    return config.with_overrides(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        console_level=args.log_level,
        log_file=Path(args.log_file) if args.log_file else None,
        enable_file_logging=args.log_file is not None,
    )

    try:
        config = resolve_config(args)
        result = ExpressionSearchService(config).search()
    except SixNineException as e:
        log_component_error(logger, "run_expression_search", e)
        print(get_user_friendly_message(e, include_details=True), file=sys.stderr)
        return 1

    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info(f"Results saved to {args.output}")
    else:
        print(payload)

    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            f.write(generate_report_text(result))
        logger.info(f"Report saved to {args.report}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
