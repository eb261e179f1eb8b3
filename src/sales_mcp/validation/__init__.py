"""Dataset quality validation for sales CSV files.

- **Models**: CheckResult, ValidationReport - validation result data structures
- **Checks**: Individual check implementations (see validation/checks/)
- **Config**: Severity rules (import from .config)
- **Registry**: run_validation(), print_report() - check orchestration and execution

Usage:
    >>> from pathlib import Path
    >>> from sales_mcp.validation import run_validation, print_report
    >>> report = run_validation(Path("data/sales.csv"))
    >>> print_report(report)
"""

from __future__ import annotations

from .models import CheckResult, ValidationReport
from .registry import print_report, run_validation

__all__ = [
    "CheckResult",
    "ValidationReport",
    "run_validation",
    "print_report",
]
