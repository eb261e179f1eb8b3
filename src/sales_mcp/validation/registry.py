"""Validation check registry and runner.

This module orchestrates dataset quality checks:
- ALL_CHECKS: List of all available validation check instances
- run_validation(): Loads a sales CSV, executes every check and returns a ValidationReport
- print_report(): Displays validation results to console
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from .checks.empty_identifiers import EmptyIdentifiersCheck
from .checks.invalid_revenue import InvalidRevenueCheck
from .checks.negative_revenue import NegativeRevenueCheck
from .checks.required_fields import RequiredFieldsCheck
from .models import CheckResult, ValidationReport


# Registry of all available validation checks
ALL_CHECKS = [
    RequiredFieldsCheck(),
    EmptyIdentifiersCheck(),
    InvalidRevenueCheck(),
    NegativeRevenueCheck(),
]


def read_sales_frame(csv_path: Path) -> pd.DataFrame:
    """Read a sales CSV with every cell as a string and empty cells as ''.

    Raises:
        ValueError: If the file cannot be read or parsed.
    """
    try:
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError(f"Failed to read CSV file {csv_path}: {e}") from e
    if not isinstance(df.index, pd.RangeIndex):
        # surplus fields on the first data row become an implicit index
        raise ValueError(
            f"Failed to read CSV file {csv_path}: row 1 has more fields than the header"
        )
    df.columns = [str(c).strip() for c in df.columns]
    return df.fillna("")


def run_validation(csv_path: Path) -> ValidationReport:
    """Run all validation checks on a sales CSV file.

    Args:
        csv_path: Path to the sales CSV file.

    Returns:
        ValidationReport containing aggregated results from all checks.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If the CSV file cannot be parsed.

    Examples:
        >>> report = run_validation(Path("data/sales.csv"))
        >>> print(report.summary())
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    df = read_sales_frame(csv_path)

    all_results: List[CheckResult] = []
    for check in ALL_CHECKS:
        all_results.extend(check.validate(df))

    return ValidationReport(results=all_results, csv_path=csv_path, row_count=len(df))


def print_report(report: ValidationReport) -> None:
    """Print validation report to console.

    Displays a summary followed by details of all failed checks.
    """
    print(report.summary())
    print()

    failed = report.get_failed_checks()

    if not failed:
        print("✅ All validation checks passed!")
        return

    print("Failed Checks:")
    for result in failed:
        icon = "❌" if result.severity == "error" else "⚠️"
        print(f"{icon} {result.check_id} ({result.severity}): {result.fail_count} failures")

        for msg in result.messages:
            print(f"   - {msg}")
