"""Negative revenue validation check.

Negative amounts are kept by the loader and reduce totals. They are usually
returns or corrections, so they are only reported for review.
"""

from __future__ import annotations

from typing import List

import pandas as pd

from sales_mcp.core.schemas import REVENUE_COLUMN
from sales_mcp.ingestion.loader import parse_revenue
from ..config import cap_messages, get_severity
from ..models import CheckResult
from . import row_label


class NegativeRevenueCheck:
    """Report rows with negative revenue."""

    def validate(self, df: pd.DataFrame) -> List[CheckResult]:
        if REVENUE_COLUMN not in df.columns:
            return []

        severity = get_severity("negative_revenue", REVENUE_COLUMN)
        messages = []
        for index, raw in df[REVENUE_COLUMN].items():
            value = parse_revenue(str(raw).strip())
            if value is not None and value < 0:
                messages.append(f"{row_label(df, index)} has negative revenue: {value}")

        if messages:
            return [
                CheckResult(
                    check_id="negative_revenue",
                    severity=severity,
                    passed=False,
                    fail_count=len(messages),
                    messages=cap_messages(messages),
                )
            ]
        return [
            CheckResult(check_id="negative_revenue", severity=severity, passed=True, fail_count=0)
        ]
