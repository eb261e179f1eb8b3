"""Empty identifiers validation check.

Rows with an empty date, region or product are skipped by the loader, so
their revenue silently disappears from every aggregate.
"""

from __future__ import annotations

from typing import List

import pandas as pd

from sales_mcp.core.schemas import IDENTIFIER_COLUMNS
from ..config import cap_messages, get_severity
from ..models import CheckResult
from . import row_label


class EmptyIdentifiersCheck:
    """Validate that identifier columns are filled in."""

    def validate(self, df: pd.DataFrame) -> List[CheckResult]:
        """Produce one result per identifier column present in the file."""
        results = []
        for column in IDENTIFIER_COLUMNS:
            if column not in df.columns:
                continue
            empty = df[column].astype(str).str.strip() == ""
            severity = get_severity("empty_identifiers", column)
            if not empty.any():
                results.append(
                    CheckResult(
                        check_id="empty_identifiers",
                        severity=severity,
                        passed=True,
                        fail_count=0,
                    )
                )
                continue
            messages = [f"{row_label(df, i)} has empty '{column}'" for i in df.index[empty]]
            results.append(
                CheckResult(
                    check_id="empty_identifiers",
                    severity=severity,
                    passed=False,
                    fail_count=int(empty.sum()),
                    messages=cap_messages(messages),
                )
            )
        return results
