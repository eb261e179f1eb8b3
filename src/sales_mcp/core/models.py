"""Domain data models.

This module defines the typed records produced by the dataset loader:
- SaleRecord: one sales observation
- SkippedRow: a malformed row left out of a load
- LoadResult: records plus the skip report of a single load
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class SaleRecord:
    """A single sales observation.

    Attributes:
        date: Date string exactly as found in the file (not parsed).
        region: Sales region, never empty.
        product: Product name, never empty.
        revenue: Finite revenue amount; may be zero or negative.

    Examples:
        >>> SaleRecord("2024-01-01", "East", "Widget", Decimal("100"))
        SaleRecord(date='2024-01-01', region='East', product='Widget', revenue=Decimal('100'))
    """

    date: str
    region: str
    product: str
    revenue: Decimal


@dataclass(frozen=True)
class SkippedRow:
    """A data row excluded from a load.

    ``row`` is the 1-based position of the row among the data rows of the
    file (blank lines are not counted).
    """

    row: int
    reason: str


@dataclass(frozen=True)
class LoadResult:
    """Outcome of loading a sales dataset.

    Attributes:
        source: File the records were read from.
        records: Parsed records in file order.
        skipped_rows: Total number of malformed rows left out.
        skipped: Details for the first skipped rows (bounded by the loader).
    """

    source: Path
    records: Tuple[SaleRecord, ...] = ()
    skipped_rows: int = 0
    skipped: Tuple[SkippedRow, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.records)


__all__ = ["SaleRecord", "SkippedRow", "LoadResult"]
