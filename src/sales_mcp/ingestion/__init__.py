"""Dataset ingestion for sales CSV files.

Public API:
 - load_sales (async), load_sales_sync
 - parse_row, parse_revenue
"""

from .loader import MAX_SKIPPED_DETAILS, load_sales, load_sales_sync, parse_revenue, parse_row

__all__ = [
    "load_sales",
    "load_sales_sync",
    "parse_row",
    "parse_revenue",
    "MAX_SKIPPED_DETAILS",
]
