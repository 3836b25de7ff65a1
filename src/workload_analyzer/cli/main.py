"""
Command-line interface for the workload analyzer.

This module provides the main CLI entry point, with three subcommands:

- ``analyze``: load workload files, run the statistics engine, export the
  tables and summary, and render the charts.
- ``plot``: render charts from tables exported by an earlier run.
- ``generate``: write synthetic workload files.

Global options select the configuration file and the log verbosity.
"""

import argparse
import dataclasses
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..analysis import ReportAssembler
from ..config import get_config, set_config_path
from ..generation import generate_workloads, write_workload_files
from ..ingestion import discover_workload_files, load_collection
from ..models.config import TIER_METRICS, AnalyzerConfig
from ..models.results import AnalysisReport
from ..plotter import CHART_TYPES, generate_plots
from ..storage import ReportExporter
from ..validation import (
    NoDataError,
    ValidationError,
    handle_cli_error,
    validate_path_exists,
    validate_positive_integer,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workload-analyzer",
        description="Analyze workload load time series for aggregate usage and volatility.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.toml. Defaults to conf/config.toml of the installation.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze workload files and export the results.")
    analyze.add_argument("--input-dir", type=Path, help="Directory holding the workload files.")
    analyze.add_argument("--output-dir", type=Path, help="Directory for tables, summary and plots.")
    analyze.add_argument(
        "--tier-metric",
        choices=TIER_METRICS,
        help="Volatility score used to split workloads into tiers.",
    )
    analyze.add_argument("--no-plots", action="store_true", help="Skip chart rendering.")
    analyze.add_argument(
        "--per-file",
        action="store_true",
        help="Analyze each workload file on its own, into a subdirectory named after the file.",
    )

    plot = subparsers.add_parser("plot", help="Render charts from previously exported tables.")
    plot.add_argument("--output-dir", type=Path, help="Directory holding the exported tables.")
    plot.add_argument(
        "--chart",
        choices=CHART_TYPES + ("all",),
        default="all",
        help="Chart to render. Defaults to all charts.",
    )

    generate = subparsers.add_parser("generate", help="Write synthetic workload files.")
    generate.add_argument("--count", type=int, required=True, help="Number of workloads.")
    generate.add_argument("--samples", type=int, help="Samples per load channel.")
    generate.add_argument("--output-dir", type=Path, help="Directory for the workload files.")
    generate.add_argument("--seed", type=int, help="Random seed for reproducible output.")
    generate.add_argument(
        "--volatile-percentage",
        type=int,
        help="Share of volatile workloads, 0 to 100.",
    )
    return parser


def log_report_summary(report: AnalysisReport, top_divisor: int) -> None:
    """Log the headline figures of ``report``."""
    grand = report.grand_totals
    deviation = report.deviation
    logger.info(f"Workloads analyzed: {grand.workload_count}")
    logger.info(
        f"Grand totals: load A {grand.total_a:.2f}, load B {grand.total_b:.2f}, "
        f"load C {grand.total_c:.2f}, cost {grand.total_cost:.2f}"
    )
    logger.info(f"Upward Standard Deviation: {deviation.upward_std:.2f}")
    logger.info(f"Downward Standard Deviation: {deviation.downward_std:.2f}")

    if report.peak_usage is not None:
        logger.info(f"Timestamp of Peak Usage: {report.peak_usage.timestamp.isoformat()}")
        logger.info(f"Total Usage at Peak: {report.peak_usage.total_usage:.2f}")
    else:
        logger.info("No peak usage: the collection has no timestamped samples")

    if report.top_contributors:
        logger.info(f"Top 1/{top_divisor} contributors at peak usage:")
        for contributor in report.top_contributors:
            logger.info(f"  Workload: {contributor.name}, Load at Peak: {contributor.load_at_peak:.2f}")
    else:
        logger.info(f"Fewer than {top_divisor} workloads; no top contributors selected")

    if report.tiers is not None:
        tiers = report.tiers
        logger.info(f"Volatility tiers by '{tiers.metric}' score:")
        logger.info(f"  High: {', '.join(tiers.high) or '-'}")
        logger.info(f"  Medium: {', '.join(tiers.medium) or '-'}")
        logger.info(f"  Low: {', '.join(tiers.low) or '-'}")

    if report.failures:
        logger.warning(f"{len(report.failures)} workloads had undefined volatility figures")


def run_analysis(
    config: AnalyzerConfig, files: Optional[List[Path]], output_dir: Path, skip_plots: bool
) -> Optional[AnalysisReport]:
    """
    Load, analyze and export one set of workload files.

    Returns:
        The report, or None if the files held no workloads.
    """
    collection = load_collection(config.input_dir, config.file_prefix, config.file_suffix, files=files)
    report = ReportAssembler(config).assemble(collection)
    if not report.has_data:
        return None

    exporter = ReportExporter(output_dir, config.storage)
    exporter.export(report)
    logger.debug(f"Storage info: {exporter.get_storage_info()}")
    log_report_summary(report, config.top_divisor)
    if not skip_plots:
        generate_plots(output_dir, storage_config=config.storage)
    return report


def cmd_analyze(args: argparse.Namespace, config: AnalyzerConfig) -> None:
    overrides = {}
    if args.input_dir is not None:
        overrides["input_dir"] = args.input_dir
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.tier_metric is not None:
        overrides["tier_metric"] = args.tier_metric
    config = dataclasses.replace(config, **overrides)
    skip_plots = args.no_plots or config.skip_plots

    try:
        validate_path_exists(config.input_dir, field_name="input directory")
    except ValidationError as e:
        handle_cli_error(error=e, context="input directory validation", exit_code=1, logger=logger)

    logger.info(f"Reading workload files from: {config.input_dir}")
    logger.info(f"Outputs will be saved in: {config.output_dir}")

    if args.per_file:
        files = discover_workload_files(config.input_dir, config.file_prefix, config.file_suffix)
        analyzed = 0
        for path in files:
            logger.info(f"--- Analyzing {path.name} ---")
            if run_analysis(config, [path], config.output_dir / path.stem, skip_plots) is not None:
                analyzed += 1
            else:
                logger.warning(f"No workloads in {path.name}; skipped")
        has_data = analyzed > 0
    else:
        has_data = run_analysis(config, None, config.output_dir, skip_plots) is not None

    if not has_data:
        handle_cli_error(
            error=NoDataError(
                f"no workload data found in {config.input_dir} "
                f"(files matching '{config.file_prefix}*{config.file_suffix}')"
            ),
            context="analysis",
            exit_code=1,
            logger=logger,
        )
    logger.info("Analysis completed.")


def cmd_plot(args: argparse.Namespace, config: AnalyzerConfig) -> None:
    output_dir = args.output_dir or config.output_dir
    charts = CHART_TYPES if args.chart == "all" else (args.chart,)

    exporter = ReportExporter(output_dir, config.storage)
    if not exporter.get_storage_info()["files"]:
        logger.warning(f"No exported {config.storage.format} tables in {output_dir}; run 'analyze' first")
        return
    try:
        summary = exporter.load_summary()
        logger.info(f"Plotting results of {summary['workload_count']} workloads")
    except FileNotFoundError as e:
        logger.warning(str(e))

    written = generate_plots(output_dir, charts, storage_config=config.storage)
    if not written:
        logger.warning(f"No plots were generated from tables in {output_dir}")


def cmd_generate(args: argparse.Namespace, config: AnalyzerConfig) -> None:
    samples = args.samples if args.samples is not None else config.samples_per_load
    volatile_percentage = (
        args.volatile_percentage if args.volatile_percentage is not None else config.volatile_percentage
    )
    output_dir = args.output_dir or config.input_dir

    try:
        count = validate_positive_integer(args.count, min_value=1, field_name="--count")
        workloads = generate_workloads(count, samples, volatile_percentage, seed=args.seed)
    except ValidationError as e:
        handle_cli_error(error=e, context="generator argument validation", exit_code=1, logger=logger)

    write_workload_files(workloads, output_dir)


COMMANDS = {
    "analyze": cmd_analyze,
    "plot": cmd_plot,
    "generate": cmd_generate,
}


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for the workload analyzer.

    Raises:
        SystemExit: On configuration errors, validation failures, or when no
            workload data is found.
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.config is not None:
        set_config_path(args.config)

    # Load application configuration
    try:
        app_config = get_config()
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=True,
            logger=logger,
        )

    try:
        COMMANDS[args.command](args, app_config.analyzer)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(130)


if __name__ == "__main__":
    main_cli()
