"""Column definitions for the sales dataset.

Used by the loader and the dataset quality checks to agree on which header
columns a sales CSV must provide.
"""

from __future__ import annotations

from typing import List, Tuple

# Header names the loader looks up; column order in the file does not matter.
DATE_COLUMN = "date"
REGION_COLUMN = "region"
PRODUCT_COLUMN = "product"
REVENUE_COLUMN = "revenue"

REQUIRED_COLUMNS: Tuple[str, ...] = (
    DATE_COLUMN,
    REGION_COLUMN,
    PRODUCT_COLUMN,
    REVENUE_COLUMN,
)

IDENTIFIER_COLUMNS: Tuple[str, ...] = (DATE_COLUMN, REGION_COLUMN, PRODUCT_COLUMN)


def missing_columns(columns: List[str]) -> List[str]:
    """Return the required columns absent from ``columns``, in canonical order.

    Header names are compared after stripping surrounding whitespace.

    Examples:
        >>> missing_columns(["region", "date", "revenue"])
        ['product']
    """
    present = {str(c).strip() for c in columns}
    return [c for c in REQUIRED_COLUMNS if c not in present]


__all__ = [
    "DATE_COLUMN",
    "REGION_COLUMN",
    "PRODUCT_COLUMN",
    "REVENUE_COLUMN",
    "REQUIRED_COLUMNS",
    "IDENTIFIER_COLUMNS",
    "missing_columns",
]
