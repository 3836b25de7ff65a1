"""
Generates plots from exported analysis tables.

This module is the visualization step of an analysis run. It reads the
tables written by the report exporter (CSV or Parquet, following the storage
configuration), reshapes them with Polars, and creates interactive charts
with Plotly.

Four charts are available:
- ``aggregate``: collection-wide load per channel over time, with a dashed
  line for the combined total.
- ``stacked``: the same channel loads as a stacked area, showing the
  composition of the total.
- ``volatility``: the rolling aggregate volatility per channel.
- ``changes``: the interval change series, one line per workload.

Charts are saved as interactive HTML files and, if Kaleido is installed, as
static PNG images.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

# Third-party library imports
import polars as pl
import plotly.express as px
import plotly.graph_objects as go

from .config.storage_config import StorageConfig
from .storage import (
    AGGREGATE_VOLATILITY_TABLE,
    AGGREGATED_TABLE,
    INTERVALS_TABLE,
    ReportExporter,
)

logger = logging.getLogger(__name__)

CHART_TYPES = ("aggregate", "stacked", "volatility", "changes")

CHANNEL_LABELS = {"a": "Load A", "b": "Load B", "c": "Load C"}


def _save_plotly_figure(fig: go.Figure, base_filename: str, output_dir: Path) -> Optional[Path]:
    """
    Saves a Plotly figure to both HTML and, if possible, PNG formats.

    Returns:
        Path of the HTML file, or None if it could not be written.
    """
    plot_filename_html = output_dir / f"{base_filename}.html"
    try:
        fig.write_html(plot_filename_html)
        logger.info(f"Interactive plot saved to: {plot_filename_html}")
    except Exception as e:
        logger.error(
            f"Failed to save plot {plot_filename_html} using Plotly: {e}",
            exc_info=True,
        )
        return None

    # Attempt to save a static PNG image if Kaleido is installed.
    try:
        plot_filename_png = output_dir / f"{base_filename}.png"
        fig.write_image(plot_filename_png, width=1200, height=600)
        logger.info(f"Static plot saved to: {plot_filename_png}")
    except Exception as e_kaleido:
        # This is a non-critical failure, so log it as a warning.
        logger.warning(
            f"Failed to save static plot to PNG (Kaleido might be missing or misconfigured): {e_kaleido}. "
            f"To enable PNG export, install Kaleido: `pip install workload-analyzer[export]`"
        )
    return plot_filename_html


def _timestamped_rows(df: pl.DataFrame) -> pl.DataFrame:
    """Drop rows whose timestamp is unset; unset timestamps export as empty strings."""
    return df.filter(pl.col("timestamp").is_not_null() & (pl.col("timestamp") != ""))


def _channels_long(df: pl.DataFrame, prefix: str, value_name: str) -> pl.DataFrame:
    """Reshape ``<prefix>a/b/c`` columns into (timestamp, Channel, value_name) rows."""
    columns = [f"{prefix}{ch}" for ch in CHANNEL_LABELS]
    return (
        df.unpivot(index="timestamp", on=columns, variable_name="Channel", value_name=value_name)
        .with_columns(
            pl.col("Channel").str.strip_prefix(prefix).replace(CHANNEL_LABELS).alias("Channel")
        )
    )


def _plot_aggregate(exporter: ReportExporter, output_dir: Path) -> Optional[Path]:
    df = _timestamped_rows(exporter.load_table(AGGREGATED_TABLE))
    if df.is_empty():
        logger.warning("Aggregate Plot: No aggregated data. Skipping.")
        return None

    long_df = _channels_long(df, "total_", "Load")
    fig = px.line(
        long_df.to_pandas(),  # Plotly Express often prefers Pandas.
        x="timestamp",
        y="Load",
        color="Channel",
        title="Aggregated Workload Over Time",
        labels={"timestamp": "Time", "Load": "Load"},
        markers=True,
    )

    total_df = df.select(
        "timestamp", (pl.col("total_a") + pl.col("total_b") + pl.col("total_c")).alias("total")
    )
    fig.add_trace(
        go.Scatter(
            x=total_df["timestamp"].to_list(),
            y=total_df["total"].to_list(),
            mode="lines",
            name="Total (Sum of Channels)",
            line={"color": "black", "dash": "dash"},
        )
    )
    fig.update_layout(legend_title_text="Channel", xaxis_title="Time", yaxis_title="Load")
    return _save_plotly_figure(fig, "aggregate_plot", output_dir)


def _plot_stacked(exporter: ReportExporter, output_dir: Path) -> Optional[Path]:
    df = _timestamped_rows(exporter.load_table(AGGREGATED_TABLE))
    if df.is_empty():
        logger.warning("Stacked Plot: No aggregated data. Skipping.")
        return None

    fig = px.area(
        _channels_long(df, "total_", "Load").to_pandas(),
        x="timestamp",
        y="Load",
        color="Channel",  # This column's values will be stacked.
        title="Aggregated Workload Over Time (Stacked Area)",
        labels={"timestamp": "Time", "Load": "Load"},
    )
    fig.update_layout(legend_title_text="Channel", xaxis_title="Time", yaxis_title="Load - Stacked")
    return _save_plotly_figure(fig, "stacked_plot", output_dir)


def _plot_volatility(exporter: ReportExporter, output_dir: Path) -> Optional[Path]:
    df = _timestamped_rows(exporter.load_table(AGGREGATE_VOLATILITY_TABLE))
    if df.is_empty():
        logger.warning("Volatility Plot: No aggregate volatility data. Skipping.")
        return None

    fig = px.line(
        _channels_long(df, "volatility_", "Volatility").to_pandas(),
        x="timestamp",
        y="Volatility",
        color="Channel",
        title="Aggregate Volatility Over Time",
        labels={"timestamp": "Time", "Volatility": "Standard Deviation"},
        markers=True,
    )
    fig.update_layout(legend_title_text="Channel", xaxis_title="Time", yaxis_title="Standard Deviation")
    return _save_plotly_figure(fig, "volatility_plot", output_dir)


def _plot_changes(exporter: ReportExporter, output_dir: Path) -> Optional[Path]:
    df = _timestamped_rows(exporter.load_table(INTERVALS_TABLE))
    if df.is_empty():
        logger.warning("Changes Plot: No interval change data. Skipping.")
        return None

    fig = px.line(
        df.sort("workload", "timestamp").to_pandas(),
        x="timestamp",
        y="change",
        color="workload",  # Creates a different line for each workload.
        title="Workload Changes Between Intervals",
        labels={"timestamp": "Time", "change": "Change", "workload": "Workload"},
    )
    fig.update_layout(legend_title_text="Workload", xaxis_title="Time", yaxis_title="Change")
    return _save_plotly_figure(fig, "changes_plot", output_dir)


_CHART_BUILDERS: Dict[str, Callable[[ReportExporter, Path], Optional[Path]]] = {
    "aggregate": _plot_aggregate,
    "stacked": _plot_stacked,
    "volatility": _plot_volatility,
    "changes": _plot_changes,
}


def plot_chart(
    chart: str, output_dir: Path, storage_config: Optional[StorageConfig] = None
) -> Optional[Path]:
    """
    Render one chart from the tables exported to ``output_dir``.

    Args:
        chart: One of CHART_TYPES
        output_dir: Directory holding the exported tables; plots are written there too
        storage_config: Format the tables were exported in, CSV when omitted

    Returns:
        Path of the HTML plot, or None if the chart was skipped or failed.

    Raises:
        ValueError: If ``chart`` is not a known chart type
    """
    if chart not in _CHART_BUILDERS:
        raise ValueError(f"Unknown chart type '{chart}', expected one of {CHART_TYPES}")

    output_dir = Path(output_dir)
    exporter = ReportExporter(output_dir, storage_config)
    try:
        return _CHART_BUILDERS[chart](exporter, output_dir)
    except FileNotFoundError as e:
        logger.error(f"Cannot plot '{chart}': {e}")
    except pl.exceptions.NoDataError:
        logger.warning(f"No data for '{chart}' chart (Polars NoDataError). Skipping plot.")
    except Exception as e:
        logger.error(f"Error generating '{chart}' chart: {e}", exc_info=True)
    return None


def generate_plots(
    output_dir: Path,
    charts: Iterable[str] = CHART_TYPES,
    storage_config: Optional[StorageConfig] = None,
) -> List[Path]:
    """
    Render every requested chart from the tables in ``output_dir``.

    This is the main public entry point for the plotter module.

    Returns:
        Paths of the HTML plots that were written.
    """
    logger.info(f"Generating plots from tables in: {output_dir}")
    written = []
    for chart in charts:
        logger.info(f"--- Generating '{chart}' chart ---")
        path = plot_chart(chart, output_dir, storage_config)
        if path is not None:
            written.append(path)
    return written
