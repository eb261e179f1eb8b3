"""Validation checks base interface.

Each check inspects one aspect of a sales CSV loaded as a DataFrame of
strings (empty cells are empty strings, column names already stripped).

To implement a new validation check:

1. Create a new file in this directory (e.g., `my_check.py`)
2. Define a class with a `validate(df) -> List[CheckResult]` method
3. Add the check to the ALL_CHECKS list in registry.py

Example:
    ```python
    class MyCheck:
        def validate(self, df: pd.DataFrame) -> List[CheckResult]:
            return [CheckResult(check_id="my_check", severity="warning", passed=True, fail_count=0)]
    ```
"""

from __future__ import annotations

from typing import List, Protocol

import pandas as pd

from ..models import CheckResult


class ValidationCheck(Protocol):
    """Protocol defining the interface for validation checks."""

    def validate(self, df: pd.DataFrame) -> List[CheckResult]:
        """Run the validation check.

        Args:
            df: The sales CSV with every cell read as a string.

        Returns:
            List of CheckResult objects. Checks whose inputs are absent (for
            example a missing column) return an empty list.
        """
        ...


def row_label(df: pd.DataFrame, index: int) -> str:
    """Describe a data row for messages as 'Row N (region/product)'."""
    row = df.loc[index]
    region = str(row.get("region", "")).strip() or "?"
    product = str(row.get("product", "")).strip() or "?"
    return f"Row {int(index) + 1} ({region}/{product})"


__all__ = ["ValidationCheck", "row_label"]
