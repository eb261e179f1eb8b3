"""Required fields validation check.

Ensures the header names every column the loader looks up. A file missing
one of them cannot be loaded at all.
"""

from __future__ import annotations

from typing import List

import pandas as pd

from sales_mcp.core.schemas import missing_columns
from ..models import CheckResult


class RequiredFieldsCheck:
    """Validate that all required columns are present."""

    def validate(self, df: pd.DataFrame) -> List[CheckResult]:
        missing = missing_columns(list(df.columns))

        if missing:
            return [
                CheckResult(
                    check_id="required_fields",
                    severity="error",
                    passed=False,
                    fail_count=len(missing),
                    messages=[f"Missing columns: {', '.join(missing)}"],
                )
            ]

        return [
            CheckResult(
                check_id="required_fields",
                severity="error",
                passed=True,
                fail_count=0,
            )
        ]
