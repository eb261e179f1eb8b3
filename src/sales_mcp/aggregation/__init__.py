"""Aggregation engine: totals, grouped sums and top-N rankings."""

from .engine import (
    exact_arithmetic,
    group_sum,
    sales_by_product,
    sales_by_region,
    sum_amounts,
    top_n,
    total_revenue,
)

__all__ = [
    "exact_arithmetic",
    "sum_amounts",
    "total_revenue",
    "group_sum",
    "top_n",
    "sales_by_region",
    "sales_by_product",
]
