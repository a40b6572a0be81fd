"""
Boundary checks for rows handed over by the parser.

These are contract checks on the shape of the input; bad cell values are
the profiler's and builder's business and never fail here.
"""
import logging
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence

from chartengine.core.errors import ErrorCodes, InvalidArgumentError
from chartengine.core.sanitization import sanitize_for_logging, validate_column_name

logger = logging.getLogger(__name__)


def validate_rows(rows: Any, max_rows: Optional[int] = None) -> Sequence[Mapping[str, Any]]:
    """
    Check that ``rows`` is a sequence of records with usable column names.

    Empty input is valid. Rows whose keys differ from the first row are
    tolerated (missing keys read as missing values) but logged.

    Raises:
        InvalidArgumentError: rows is not a sequence of mappings, the first
            row has no columns, a column name is empty/unsafe or repeats
            after trimming, or there are more than ``max_rows`` rows
    """
    if isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Sequence):
        raise InvalidArgumentError(f"Rows must be a list of records, got {type(rows).__name__}")

    if not rows:
        return rows

    if max_rows is not None and len(rows) > max_rows:
        raise InvalidArgumentError(
            f"Got {len(rows)} rows, at most {max_rows} are accepted",
            code=ErrorCodes.TOO_MANY_ROWS,
        )

    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise InvalidArgumentError(
                f"Row {index} is a {type(row).__name__}, expected a mapping of column names to values"
            )

    columns = list(rows[0].keys())
    if not columns:
        raise InvalidArgumentError("The first row has no columns")

    for name in columns:
        if not validate_column_name(name):
            raise InvalidArgumentError(
                f"Invalid column name: {sanitize_for_logging(name)!r}",
                code=ErrorCodes.INVALID_COLUMN,
            )

    duplicates = [name for name, count in Counter(name.strip() for name in columns).items() if count > 1]
    if duplicates:
        raise InvalidArgumentError(
            f"Duplicate column headers found: {', '.join(sanitize_for_logging(d) for d in duplicates)}",
            code=ErrorCodes.INVALID_COLUMN,
        )

    expected = set(columns)
    ragged = sum(1 for row in rows if set(row.keys()) != expected)
    if ragged:
        logger.warning(f"{ragged} of {len(rows)} rows have a different column set than the first row")

    return rows


def normalize_rows(rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Copy ``rows`` with whitespace-trimmed column names."""
    return [
        {(key.strip() if isinstance(key, str) else key): value for key, value in row.items()}
        for row in rows
    ]
