"""Invalid revenue validation check.

Flags revenue cells that are empty or do not parse as a finite number
("n/a", "NaN", "Infinity"). The loader skips such rows.
"""

from __future__ import annotations

from typing import List

import pandas as pd

from sales_mcp.core.schemas import REVENUE_COLUMN
from sales_mcp.ingestion.loader import parse_revenue
from ..config import cap_messages, get_severity
from ..models import CheckResult
from . import row_label


class InvalidRevenueCheck:
    """Validate that every revenue cell is a finite number."""

    def validate(self, df: pd.DataFrame) -> List[CheckResult]:
        if REVENUE_COLUMN not in df.columns:
            return []

        severity = get_severity("invalid_revenue", REVENUE_COLUMN)
        messages = []
        for index, raw in df[REVENUE_COLUMN].items():
            text = str(raw).strip()
            if parse_revenue(text) is None:
                messages.append(f"{row_label(df, index)} has invalid revenue: {text!r}")

        if messages:
            return [
                CheckResult(
                    check_id="invalid_revenue",
                    severity=severity,
                    passed=False,
                    fail_count=len(messages),
                    messages=cap_messages(messages),
                )
            ]
        return [
            CheckResult(check_id="invalid_revenue", severity=severity, passed=True, fail_count=0)
        ]
