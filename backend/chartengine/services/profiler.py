"""
Column profiler.

Classifies every column of a row sample as number, date, categorical or
text, and collects fill/uniqueness stats for the column-type table.
Only the first ``sample_size`` rows are inspected, so a column whose
distinguishing values appear later can be misclassified.
"""
import itertools
import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from chartengine.core.config import Settings, get_settings
from chartengine.core.errors import InvalidArgumentError
from chartengine.core.performance import track_performance
from chartengine.core.sanitization import sanitize_for_logging
from chartengine.core.schemas import ColumnProfile, ColumnStats, ColumnType

logger = logging.getLogger(__name__)

# Compared after strip() and upper()
EMPTY_MARKERS = frozenset({"", "N/A", "NA", "-"})

CURRENCY_CHARS = r'[$€£¥,()]'

_MONTH_ABBR = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"
_MONTH_FULL = "January|February|March|April|May|June|July|August|September|October|November|December"
DATE_PATTERN = (
    r'^\d{1,2}[-/]\d{1,2}[-/]\d{2,4}$'          # 31/12/2024, 12-31-24
    r'|^\d{4}[-/]\d{1,2}[-/]\d{1,2}$'           # 2024-12-31
    rf'|^(?:{_MONTH_ABBR})[a-z]*[-\s]\d{{1,2}}'  # Dec 31, Sept-5 ...
    rf'|^(?:{_MONTH_FULL})[-\s]\d{{1,2}}$'
)

# pandas resolves these to the current clock, which says nothing about the column
_RELATIVE_DATE_WORDS = frozenset({"now", "today"})

# "Jan 5", "March-3": month and day with no year
_MONTH_DAY = rf'^((?:{_MONTH_ABBR})[a-z]*)[-\s](\d{{1,2}})$'
# Year assumed for month-day values, the one browsers pick for "Dec 5"
MONTH_DAY_DEFAULT_YEAR = 2001


def is_empty_value(value: Any) -> bool:
    """True for None/NaN and the placeholder strings in EMPTY_MARKERS."""
    if value is None:
        return True
    if np.ndim(value) == 0 and pd.isna(value):
        return True
    return str(value).strip().upper() in EMPTY_MARKERS


def stringify(value: Any) -> str:
    """String form used for labels, uniqueness and sample values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_series(values: Iterable[Any]) -> pd.Series:
    if isinstance(values, pd.Series):
        return values.astype(object)
    return pd.Series(list(values), dtype=object)


def coerce_numbers(values: Iterable[Any]) -> pd.Series:
    """
    Parse values as numbers after stripping currency symbols, commas and
    parentheses. Unparseable, missing and non-finite values become NaN.
    """
    text = _as_series(values).astype(str)
    cleaned = text.str.replace(CURRENCY_CHARS, '', regex=True).str.strip()
    numbers = pd.to_numeric(cleaned, errors='coerce').astype(float)
    return numbers.where(np.isfinite(numbers))


def parse_number(value: Any) -> Optional[float]:
    """Scalar form of :func:`coerce_numbers`."""
    number = coerce_numbers([value]).iloc[0]
    return None if math.isnan(number) else float(number)


def coerce_timestamps_ms(values: Iterable[Any]) -> pd.Series:
    """
    Parse values with the generic date parser and return epoch milliseconds.

    Naive timestamps are read as UTC and month-day values get
    MONTH_DAY_DEFAULT_YEAR. Unparseable values become NaN; values the parser
    places far outside the nanosecond range (year 1 for "Jan", "3 pm" ...)
    come back as large negative numbers rather than raising.
    """
    text = _as_series(values).astype(str).str.strip()
    text = text.mask(text.str.lower().isin(_RELATIVE_DATE_WORDS))
    text = text.str.replace(_MONTH_DAY, rf'\1 \2 {MONTH_DAY_DEFAULT_YEAR}', regex=True, flags=re.IGNORECASE)
    parsed = pd.to_datetime(text, errors='coerce', format='mixed', utc=True).dt.tz_convert(None)
    # Millisecond resolution holds any year, so no nanosecond arithmetic here
    millis = parsed.dt.as_unit("ms").to_numpy().astype("int64").astype(float)
    return pd.Series(millis, index=text.index).where(parsed.notna())


def date_match_share(values: pd.Series) -> float:
    """
    Share of values that look like dates.

    A value passes when it matches DATE_PATTERN, or when the generic parser
    yields a positive timestamp and the value is not a plain number.
    """
    text = values.astype(str).str.strip()
    pattern_hit = text.str.match(DATE_PATTERN, flags=re.IGNORECASE)
    plain_number = pd.to_numeric(text, errors='coerce').notna()
    parsed_ms = coerce_timestamps_ms(text)
    passed = pattern_hit | ((parsed_ms > 0) & ~plain_number)
    return float(passed.mean())


def infer_column_type(present: pd.Series, sample_length: int, settings: Settings) -> ColumnType:
    """
    Classify the non-empty sampled values of one column.

    Tests run in precedence order (numeric, date, categorical) and stop at
    the first hit, so a numeric column is never tested for cardinality.
    """
    count = len(present)
    if count == 0:
        return ColumnType.TEXT

    numeric_share = coerce_numbers(present).notna().sum() / count
    if numeric_share >= settings.numeric_match_threshold:
        return ColumnType.NUMBER

    if date_match_share(present) >= settings.date_match_threshold:
        return ColumnType.DATE

    unique_count = present.map(stringify).nunique()
    percent_unique = unique_count / count * 100
    if (percent_unique <= settings.categorical_max_percent_unique
            and unique_count <= settings.categorical_unique_cap(sample_length)):
        return ColumnType.CATEGORICAL

    return ColumnType.TEXT


def profile_column(name: str, values: Sequence[Any], settings: Optional[Settings] = None) -> ColumnProfile:
    """Build the profile of a single column from its sampled values."""
    settings = settings or get_settings()
    series = pd.Series(list(values), dtype=object)
    total = len(series)
    present = series[~series.map(is_empty_value).astype(bool)]

    if present.empty:
        return ColumnProfile(
            name=name,
            type=ColumnType.TEXT,
            sample_value="",
            use=False,
            stats=ColumnStats(valid_count=0, total=total),
        )

    column_type = infer_column_type(present, total, settings)
    valid_count = len(present)

    return ColumnProfile(
        name=name,
        type=column_type,
        sample_value=stringify(present.iloc[0]),
        use=column_type is not ColumnType.TEXT,
        stats=ColumnStats(
            valid_count=valid_count,
            total=total,
            unique_count=int(present.map(stringify).nunique()),
            percent_filled=int(math.floor(valid_count / total * 100 + 0.5)),
        ),
    )


@track_performance("profile_rows")
def profile_rows(
    rows: Sequence[Mapping[str, Any]],
    sample_size: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> List[ColumnProfile]:
    """
    Profile the columns of ``rows``.

    Columns are taken from the keys of the first row, in order; later rows
    missing a key count as missing values for that column. Input rows are
    never modified.

    Args:
        rows: Parsed records (column name -> scalar)
        sample_size: Rows to inspect, defaults to ``settings.sample_size``
        settings: Thresholds to use, defaults to the global settings

    Returns:
        One ColumnProfile per column, empty for empty input
    """
    settings = settings or get_settings()
    if sample_size is None:
        sample_size = settings.sample_size
    if sample_size < 1:
        raise InvalidArgumentError(f"sample_size must be positive, got {sample_size}")

    if not rows:
        return []

    sample = list(itertools.islice(rows, sample_size))
    for index, row in enumerate(sample):
        if not isinstance(row, Mapping):
            raise InvalidArgumentError(
                f"Row {index} is a {type(row).__name__}, expected a mapping of column names to values"
            )

    columns = list(sample[0].keys())
    profiles = []
    for name in columns:
        profile = profile_column(name, [row.get(name) for row in sample], settings)
        logger.debug(
            f"Column {sanitize_for_logging(name)!r} classified as {profile.type.value} "
            f"({profile.stats.valid_count}/{profile.stats.total} filled)"
        )
        profiles.append(profile)

    logger.info(f"Profiled {len(profiles)} columns from {len(sample)} sampled rows")
    return profiles
