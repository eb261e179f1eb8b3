"""Sales CSV loader.

Streams a comma-delimited sales file chunk by chunk and converts each row
into a ``SaleRecord``. The file is re-read on every call; nothing is cached.

Row policy:
    A row is malformed when ``date``, ``region`` or ``product`` is empty, or
    when ``revenue`` is empty or not a finite decimal. Malformed rows are
    skipped and counted in the returned ``LoadResult``; in strict mode the
    first malformed row aborts the load with ``MalformedRowError`` instead.
    Surrounding whitespace is stripped from every cell. A line with more
    fields than the header, or any line the CSV reader cannot tokenize, fails
    the whole load with ``DatasetLoadError``.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple, Union

import pandas as pd

from sales_mcp.core.config import DEFAULT_CHUNK_SIZE
from sales_mcp.core.errors import DatasetLoadError, DatasetNotFoundError, MalformedRowError
from sales_mcp.core.models import LoadResult, SaleRecord, SkippedRow
from sales_mcp.core.schemas import (
    DATE_COLUMN,
    PRODUCT_COLUMN,
    REGION_COLUMN,
    REVENUE_COLUMN,
    missing_columns,
)

logger = logging.getLogger(__name__)

# Only the first skipped rows are reported in detail; all are counted.
MAX_SKIPPED_DETAILS = 100

_ENCODING = "utf-8-sig"


def _cell(value: Any) -> str:
    """Normalize a raw cell; pandas yields NaN for fields missing from short rows."""
    if isinstance(value, str):
        return value.strip()
    return ""


def parse_revenue(text: str) -> Optional[Decimal]:
    """Parse a revenue cell into a finite Decimal, or None if it is not one.

    Examples:
        >>> parse_revenue("12.50")
        Decimal('12.50')
        >>> parse_revenue("NaN") is None
        True
        >>> parse_revenue("n/a") is None
        True
    """
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_row(row: dict) -> Tuple[Optional[SaleRecord], Optional[str]]:
    """Convert a raw row mapping into a SaleRecord.

    Returns:
        ``(record, None)`` for a valid row, ``(None, reason)`` otherwise.
    """
    date = _cell(row.get(DATE_COLUMN))
    region = _cell(row.get(REGION_COLUMN))
    product = _cell(row.get(PRODUCT_COLUMN))
    revenue_text = _cell(row.get(REVENUE_COLUMN))

    empty = [
        name
        for name, value in (
            (DATE_COLUMN, date),
            (REGION_COLUMN, region),
            (PRODUCT_COLUMN, product),
            (REVENUE_COLUMN, revenue_text),
        )
        if not value
    ]
    if empty:
        return None, f"missing value for {', '.join(empty)}"

    revenue = parse_revenue(revenue_text)
    if revenue is None:
        return None, f"invalid revenue {revenue_text!r}"

    return SaleRecord(date=date, region=region, product=product, revenue=revenue), None


def _read_header(path: Path) -> List[str]:
    try:
        header = pd.read_csv(path, nrows=0, encoding=_ENCODING, dtype=str)
    except pd.errors.EmptyDataError as e:
        raise DatasetLoadError(f"Sales dataset is empty: {path}", path) from e
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise DatasetLoadError(f"Failed to read sales dataset {path}: {e}", path) from e
    return [str(c) for c in header.columns]


def _iter_chunks(path: Path, chunk_size: int) -> Iterator[pd.DataFrame]:
    """Yield the data rows of ``path`` in chunks of string cells.

    Every column is read so that pandas' field count check stays active: a
    line with more fields than the header raises ``ParserError``. The one
    exception is the first data row, whose surplus leading fields pandas turns
    into an implicit index; that shows up as a non-default index here.
    """
    reader = pd.read_csv(
        path,
        encoding=_ENCODING,
        dtype=str,
        keep_default_na=False,
        chunksize=chunk_size,
    )
    with reader:
        for chunk in reader:
            if not isinstance(chunk.index, pd.RangeIndex):
                raise DatasetLoadError(
                    f"Failed to read sales dataset {path}: row 1 has more fields than the header",
                    path,
                )
            chunk.columns = [str(c).strip() for c in chunk.columns]
            yield chunk


def load_sales_sync(
    path: Union[str, Path],
    *,
    strict: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> LoadResult:
    """Blocking implementation of ``load_sales``."""
    path = Path(path)
    if not path.exists():
        raise DatasetNotFoundError(f"Sales dataset not found: {path}", path)
    if not path.is_file():
        raise DatasetLoadError(f"Sales dataset is not a file: {path}", path)

    missing = missing_columns(_read_header(path))
    if missing:
        raise DatasetLoadError(
            f"Sales dataset {path} is missing required columns: {', '.join(missing)}", path
        )

    records: List[SaleRecord] = []
    skipped: List[SkippedRow] = []
    skipped_count = 0

    def skip(row_number: int, reason: str) -> None:
        nonlocal skipped_count
        if strict:
            raise MalformedRowError(
                f"Malformed row {row_number} in {path}: {reason}", path, row=row_number
            )
        skipped_count += 1
        if len(skipped) < MAX_SKIPPED_DETAILS:
            skipped.append(SkippedRow(row=row_number, reason=reason))

    row_number = 0
    try:
        for chunk in _iter_chunks(path, chunk_size):
            for row in chunk.to_dict(orient="records"):
                row_number += 1
                record, reason = parse_row(row)
                if record is None:
                    skip(row_number, reason or "malformed row")
                    continue
                records.append(record)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise DatasetLoadError(f"Failed to read sales dataset {path}: {e}", path) from e

    if skipped_count:
        logger.warning("Skipped %d malformed rows in %s", skipped_count, path)
    logger.debug("Loaded %d sales records from %s", len(records), path)

    return LoadResult(
        source=path,
        records=tuple(records),
        skipped_rows=skipped_count,
        skipped=tuple(skipped),
    )


async def load_sales(
    path: Union[str, Path],
    *,
    strict: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> LoadResult:
    """Load and parse a sales CSV file.

    The blocking read runs in a worker thread so concurrent invocations on
    the event loop are not stalled by file I/O.

    Args:
        path: CSV file with a header naming date, region, product and revenue.
        strict: Fail on the first malformed row instead of skipping it.
        chunk_size: Rows parsed per chunk while streaming the file.

    Returns:
        LoadResult with records in file order and the skipped-row report.

    Raises:
        DatasetNotFoundError: If the file does not exist.
        DatasetLoadError: If the file cannot be read or lacks required columns.
        MalformedRowError: In strict mode, on the first malformed row.
    """
    return await asyncio.to_thread(load_sales_sync, path, strict=strict, chunk_size=chunk_size)


__all__ = ["load_sales", "load_sales_sync", "parse_row", "parse_revenue", "MAX_SKIPPED_DETAILS"]
