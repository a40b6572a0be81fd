"""
Series builder.

Turns rows plus a chart choice into label/value series or x/y points that
a charting library can plot directly. Aggregating charts (bar, pie) count
unparseable numbers as 0; pointwise charts (scatter, time line) drop the
row instead of plotting a false zero.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from chartengine.core.errors import InvalidArgumentError
from chartengine.core.performance import track_performance
from chartengine.core.schemas import (
    ChartType,
    ColumnProfile,
    ColumnType,
    Dataset,
    Point,
    SeriesPayload,
)
from chartengine.services.profiler import coerce_numbers, coerce_timestamps_ms, stringify

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "unknown"


class _Columns:
    """Column-wise view of the rows a series is built from."""

    def __init__(self, rows: Sequence[Mapping[str, Any]], x_column: Optional[str], y_column: Optional[str],
                 profiles: Sequence[ColumnProfile]):
        types = {p.name: p.type for p in profiles}
        self.x_column = x_column
        self.y_column = y_column
        self.x_type = types.get(x_column)
        self.y_type = types.get(y_column)
        self.x = pd.Series([row.get(x_column) if x_column else None for row in rows], dtype=object)
        self.y = pd.Series([row.get(y_column) if y_column else None for row in rows], dtype=object)

    @property
    def categorical_by_number(self) -> bool:
        return self.x_type is ColumnType.CATEGORICAL and self.y_type is ColumnType.NUMBER


def _is_missing(value: Any) -> bool:
    return value is None or (np.ndim(value) == 0 and bool(pd.isna(value)))


def _group_labels(values: pd.Series) -> pd.Series:
    return values.map(lambda v: UNKNOWN_LABEL if _is_missing(v) else stringify(v))


def _row_labels(values: pd.Series) -> List[str]:
    return ["" if _is_missing(v) else stringify(v) for v in values]


def _group_sum(columns: _Columns) -> Tuple[List[str], List[float]]:
    """Sum Y per distinct X label, in first-seen order."""
    labels = _group_labels(columns.x)
    values = coerce_numbers(columns.y).fillna(0.0)
    sums = values.groupby(labels, sort=False).sum()
    return [str(label) for label in sums.index], [float(v) for v in sums]


def _group_count(values: pd.Series) -> Tuple[List[str], List[float]]:
    labels = _group_labels(values)
    counts = labels.groupby(labels, sort=False).size()
    return [str(label) for label in counts.index], [float(v) for v in counts]


def _per_row(columns: _Columns) -> SeriesPayload:
    values = coerce_numbers(columns.y).fillna(0.0)
    return SeriesPayload(
        labels=_row_labels(columns.x),
        datasets=[Dataset(label=columns.y_column, values=values.tolist())],
    )


def _build_pie(columns: _Columns) -> Optional[SeriesPayload]:
    if columns.categorical_by_number:
        labels, values = _group_sum(columns)
        return SeriesPayload(labels=labels, datasets=[Dataset(label=columns.y_column, values=values)])

    # Frequency view: count rows per X value, falling back to Y row by row
    x_missing = columns.x.map(_is_missing).astype(bool)
    labels, counts = _group_count(columns.x.where(~x_missing, columns.y))
    return SeriesPayload(labels=labels, datasets=[Dataset(label="count", values=counts)])


def _build_bar(columns: _Columns) -> SeriesPayload:
    if columns.categorical_by_number:
        labels, values = _group_sum(columns)
        return SeriesPayload(labels=labels, datasets=[Dataset(label=columns.y_column, values=values)])
    return _per_row(columns)


def _build_line(columns: _Columns) -> SeriesPayload:
    if columns.x_type is not ColumnType.DATE:
        return _per_row(columns)

    # Source order is kept; callers supply chronologically ordered rows.
    frame = pd.DataFrame({
        "x": coerce_timestamps_ms(columns.x).to_numpy(),
        "y": coerce_numbers(columns.y).to_numpy(),
    }).dropna()
    points = [Point(x=x, y=y) for x, y in zip(frame["x"], frame["y"])]
    return SeriesPayload(points=points, label=columns.y_column)


def _build_scatter(columns: _Columns) -> SeriesPayload:
    frame = pd.DataFrame({
        "x": coerce_numbers(columns.x).to_numpy(),
        "y": coerce_numbers(columns.y).to_numpy(),
    }).dropna()
    dropped = len(columns.x) - len(frame)
    if dropped:
        logger.debug(f"Scatter dropped {dropped} rows with non-numeric coordinates")
    points = [Point(x=x, y=y) for x, y in zip(frame["x"], frame["y"])]
    return SeriesPayload(points=points, label=f"{columns.y_column} vs {columns.x_column}")


def _build_table(columns: _Columns) -> None:
    return None


_BUILDERS: Dict[ChartType, Callable[[_Columns], Optional[SeriesPayload]]] = {
    ChartType.PIE: _build_pie,
    ChartType.BAR: _build_bar,
    ChartType.LINE: _build_line,
    ChartType.SCATTER: _build_scatter,
    ChartType.TABLE: _build_table,
}


@track_performance("build_series")
def build_series(
    rows: Sequence[Mapping[str, Any]],
    x_column: Optional[str],
    y_column: Optional[str],
    chart_type: ChartType,
    profiles: Sequence[ColumnProfile],
) -> Optional[SeriesPayload]:
    """
    Build the series payload for one chart.

    Args:
        rows: Parsed records, in the order they should be plotted
        x_column: Column on the X axis
        y_column: Column on the Y axis (optional for pie)
        chart_type: Chart family to build for
        profiles: Column profiles used to pick aggregation vs pointwise paths

    Returns:
        SeriesPayload, or None for empty rows, a table view, or a non-pie
        chart missing one of its axes
    """
    try:
        chart_type = ChartType(chart_type)
    except ValueError:
        raise InvalidArgumentError(f"Unknown chart type: {chart_type!r}")

    if not rows:
        return None
    if chart_type is not ChartType.PIE and (not x_column or not y_column):
        return None
    if chart_type is ChartType.PIE and not x_column and not y_column:
        return None

    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise InvalidArgumentError(
                f"Row {index} is a {type(row).__name__}, expected a mapping of column names to values"
            )

    columns = _Columns(rows, x_column, y_column, profiles)
    return _BUILDERS[chart_type](columns)
