"""Validation data models.

This module defines core data structures for dataset quality results:
- CheckResult: Outcome of a single validation check
- ValidationReport: Aggregated results from all checks for one CSV file
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CheckResult:
    """Result of a single validation check.

    Attributes:
        check_id: Unique identifier for the check (e.g., "invalid_revenue").
        severity: Severity level - "error" for unusable rows, "warning" for review items.
        passed: True if check passed without issues, False otherwise.
        fail_count: Number of failures detected (0 if passed).
        messages: Detailed failure messages (e.g., which rows failed).

    Examples:
        >>> CheckResult(
        ...     check_id="negative_revenue",
        ...     severity="warning",
        ...     passed=False,
        ...     fail_count=1,
        ...     messages=["Row 4 (East/Widget) has negative revenue: -20"]
        ... )
    """

    check_id: str
    severity: str  # "error" | "warning"
    passed: bool
    fail_count: int
    messages: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.severity not in ("error", "warning"):
            raise ValueError(f"Invalid severity: {self.severity}. Must be 'error' or 'warning'.")
        if self.passed and self.fail_count != 0:
            raise ValueError("passed=True requires fail_count=0")
        if not self.passed and self.fail_count == 0:
            raise ValueError("passed=False requires fail_count > 0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check_id": self.check_id,
            "severity": self.severity,
            "passed": self.passed,
            "fail_count": self.fail_count,
            "messages": list(self.messages),
        }


@dataclass
class ValidationReport:
    """Aggregated validation results for a sales CSV file.

    Attributes:
        results: List of check results.
        csv_path: Path to the CSV file that was validated.
        row_count: Number of data rows in the file.
    """

    results: List[CheckResult]
    csv_path: Path
    row_count: int = 0

    def has_errors(self, strict: bool = False) -> bool:
        """Check if validation failed.

        Args:
            strict: If True, treat warnings as errors. Default False.
        """
        for result in self.results:
            if result.passed:
                continue
            if result.severity == "error" or strict:
                return True
        return False

    def get_error_count(self) -> int:
        """Total failures from error-severity checks."""
        return sum(r.fail_count for r in self.results if r.severity == "error" and not r.passed)

    def get_warning_count(self) -> int:
        """Total failures from warning-severity checks."""
        return sum(r.fail_count for r in self.results if r.severity == "warning" and not r.passed)

    def get_failed_checks(self, severity: Optional[str] = None) -> List[CheckResult]:
        """Get all failed checks, optionally filtered by severity."""
        return [
            r for r in self.results if not r.passed and (severity is None or r.severity == severity)
        ]

    def summary(self) -> str:
        """Generate a concise text summary of validation results.

        Examples:
            >>> print(report.summary())
            Validation Summary:
              File: sales.csv (120 rows)
              Checks: 5 executed (4 passed, 1 warnings, 0 failed)
              Issues: 0 errors, 3 warnings
        """
        total = len(self.results)
        passed = sum(1 for r in self.results if r.passed)
        warning_checks = len(self.get_failed_checks("warning"))
        failed_checks = len(self.get_failed_checks("error"))

        return (
            f"Validation Summary:\n"
            f"  File: {self.csv_path.name} ({self.row_count} rows)\n"
            f"  Checks: {total} executed ({passed} passed, {warning_checks} warnings, "
            f"{failed_checks} failed)\n"
            f"  Issues: {self.get_error_count()} errors, {self.get_warning_count()} warnings"
        )

    def to_markdown(self) -> str:
        """Generate a Markdown validation report."""
        passed_checks = sorted([r for r in self.results if r.passed], key=lambda x: x.check_id)
        warning_checks = sorted(self.get_failed_checks("warning"), key=lambda x: x.check_id)
        error_checks = sorted(self.get_failed_checks("error"), key=lambda x: x.check_id)

        lines = [
            f"# Validation Report: {self.csv_path.name}",
            "",
            f"**Rows:** {self.row_count}",
            f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "",
            "## Summary",
            "",
            f"- **Total Rules:** {len(self.results)}",
            f"- **Passed:** {len(passed_checks)}",
            f"- **With Warnings:** {len(warning_checks)}",
            f"- **With Errors:** {len(error_checks)}",
            "",
        ]

        if passed_checks:
            lines.append("## Passed Checks")
            lines.append("")
            for result in passed_checks:
                lines.append(f"- **{result.check_id}**")
            lines.append("")

        for title, checks in (("Warnings", warning_checks), ("Errors", error_checks)):
            if not checks:
                continue
            lines.append(f"## {title}")
            lines.append("")
            for result in checks:
                lines.append(f"### {result.check_id} ({result.fail_count} failures)")
                lines.append("")
                for msg in result.messages:
                    lines.append(f"- {msg}")
                lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        """Generate a JSON validation report."""
        report_data = {
            "metadata": {
                "csv_path": self.csv_path.name,
                "row_count": self.row_count,
                "generated_at": datetime.now().isoformat(),
            },
            "summary": {
                "total_rules": len(self.results),
                "passed": sum(1 for r in self.results if r.passed),
                "errors": self.get_error_count(),
                "warnings": self.get_warning_count(),
            },
            "results": [r.to_dict() for r in self.results],
        }
        return json.dumps(report_data, indent=2, ensure_ascii=False)
