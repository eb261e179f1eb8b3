"""Revenue aggregation over loaded sales records.

All functions here are pure: no I/O, no state, inputs are never mutated.
Revenue amounts are ``Decimal`` and every sum is computed in an unbounded
decimal context with ``Inexact`` trapped, so grouped sums always add up
exactly to the overall total however large the amounts get.
"""

from __future__ import annotations

import decimal
from contextlib import contextmanager
from decimal import Decimal
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from sales_mcp.core.enums import GroupKey
from sales_mcp.core.models import SaleRecord

KeyFunc = Callable[[SaleRecord], str]
Ranking = List[Tuple[str, Decimal]]

_ZERO = Decimal(0)


@contextmanager
def exact_arithmetic() -> Iterator[decimal.Context]:
    """Decimal context in which additions are never rounded.

    Raises ``decimal.Inexact`` rather than returning a rounded result.
    """
    with decimal.localcontext() as ctx:
        ctx.prec = decimal.MAX_PREC
        ctx.Emax = decimal.MAX_EMAX
        ctx.Emin = decimal.MIN_EMIN
        ctx.traps[decimal.Inexact] = True
        yield ctx


def _key_func(key: Union[GroupKey, KeyFunc]) -> KeyFunc:
    if isinstance(key, GroupKey):
        field_name = key.value
        return lambda record: getattr(record, field_name)
    return key


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Exact sum of revenue amounts; Decimal(0) for empty input."""
    with exact_arithmetic():
        return sum(amounts, _ZERO)


def total_revenue(records: Iterable[SaleRecord], region: Optional[str] = None) -> Decimal:
    """Sum revenue over all records, or over one region when given.

    Returns Decimal(0) for empty input.
    """
    if region is None:
        return sum_amounts(r.revenue for r in records)
    return sum_amounts(r.revenue for r in records if r.region == region)


def group_sum(
    records: Iterable[SaleRecord], key: Union[GroupKey, KeyFunc]
) -> Dict[str, Decimal]:
    """Sum revenue per group.

    Args:
        records: Records to aggregate.
        key: Field to group by, or a callable returning the group key.

    Returns:
        Mapping of group key to summed revenue, ordered by first occurrence
        of each key. Groups without records are absent.
    """
    key_of = _key_func(key)
    totals: Dict[str, Decimal] = {}
    with exact_arithmetic():
        for record in records:
            k = key_of(record)
            totals[k] = totals.get(k, _ZERO) + record.revenue
    return totals


def top_n(grouped: Mapping[str, Decimal], n: int) -> Ranking:
    """Return the ``n`` largest groups, highest total first.

    Ties keep the mapping's iteration order (the sort is stable). When ``n``
    exceeds the number of groups every group is returned, without padding.

    Raises:
        ValueError: If ``n`` is not a positive integer.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise ValueError(f"n must be a positive integer, got {n!r}")
    ranked = sorted(grouped.items(), key=lambda item: item[1], reverse=True)
    return ranked[:n]


def sales_by_region(records: Iterable[SaleRecord]) -> Dict[str, Decimal]:
    """Revenue per region."""
    return group_sum(records, GroupKey.REGION)


def sales_by_product(records: Iterable[SaleRecord]) -> Dict[str, Decimal]:
    """Revenue per product."""
    return group_sum(records, GroupKey.PRODUCT)


__all__ = [
    "exact_arithmetic",
    "sum_amounts",
    "total_revenue",
    "group_sum",
    "top_n",
    "sales_by_region",
    "sales_by_product",
]
