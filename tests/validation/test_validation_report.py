"""Tests for ValidationReport and run_validation()."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sales_mcp.core.errors import DatasetLoadError
from sales_mcp.ingestion import load_sales_sync
from sales_mcp.validation import run_validation
from sales_mcp.validation.models import CheckResult, ValidationReport


def _report(results):
    return ValidationReport(results=results, csv_path=Path("data/sales.csv"), row_count=3)


class TestCheckResult:
    def test_invalid_severity(self):
        with pytest.raises(ValueError, match="Invalid severity"):
            CheckResult(check_id="x", severity="info", passed=True, fail_count=0)

    def test_passed_with_failures(self):
        with pytest.raises(ValueError):
            CheckResult(check_id="x", severity="error", passed=True, fail_count=2)

    def test_failed_without_failures(self):
        with pytest.raises(ValueError):
            CheckResult(check_id="x", severity="error", passed=False, fail_count=0)


class TestValidationReport:
    @pytest.fixture
    def mixed(self):
        return _report(
            [
                CheckResult(check_id="required_fields", severity="error", passed=True, fail_count=0),
                CheckResult(
                    check_id="negative_revenue",
                    severity="warning",
                    passed=False,
                    fail_count=2,
                    messages=["Row 1 (East/A) has negative revenue: -1"],
                ),
            ]
        )

    def test_warnings_only_fail_in_strict_mode(self, mixed):
        assert mixed.has_errors() is False
        assert mixed.has_errors(strict=True) is True
        assert mixed.get_error_count() == 0
        assert mixed.get_warning_count() == 2

    def test_summary(self, mixed):
        summary = mixed.summary()
        assert "File: sales.csv (3 rows)" in summary
        assert "Checks: 2 executed (1 passed, 1 warnings, 0 failed)" in summary
        assert "Issues: 0 errors, 2 warnings" in summary

    def test_to_markdown(self, mixed):
        markdown = mixed.to_markdown()
        assert markdown.startswith("# Validation Report: sales.csv")
        assert "## Passed Checks" in markdown
        assert "### negative_revenue (2 failures)" in markdown
        assert "## Errors" not in markdown

    def test_to_json(self, mixed):
        data = json.loads(mixed.to_json())
        assert data["metadata"]["row_count"] == 3
        assert data["summary"] == {"total_rules": 2, "passed": 1, "errors": 0, "warnings": 2}
        assert [r["check_id"] for r in data["results"]] == ["required_fields", "negative_revenue"]


class TestRunValidation:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_validation(tmp_path / "absent.csv")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="Failed to read"):
            run_validation(path)

    def test_clean_file(self, region_csv):
        report = run_validation(region_csv)
        assert report.row_count == 3
        assert report.has_errors(strict=True) is False
        assert {r.check_id for r in report.results} == {
            "required_fields",
            "empty_identifiers",
            "invalid_revenue",
            "negative_revenue",
        }

    def test_problem_file(self, write_sales_csv):
        path = write_sales_csv(
            [
                ("2024-01-01", "East", "A", "10"),
                ("2024-01-02", "", "A", "5"),
                ("2024-01-03", "West", "B", "-3"),
                ("2024-01-04", "West", "B", "n/a"),
            ]
        )
        report = run_validation(path)
        assert report.row_count == 4
        assert report.has_errors() is True
        failed = {r.check_id: r for r in report.get_failed_checks()}
        assert failed["invalid_revenue"].fail_count == 1
        assert failed["negative_revenue"].fail_count == 1
        assert failed["empty_identifiers"].messages == ["Row 2 (?/A) has empty 'region'"]

    def test_missing_columns_only_reports_required_fields(self, write_sales_csv):
        path = write_sales_csv([("2024-01-01", "East")], header="date,region")
        report = run_validation(path)
        (failed,) = report.get_failed_checks()
        assert failed.check_id == "required_fields"


@pytest.mark.parametrize(
    "bad_row",
    [
        ("", "East", "P1", "100"),
        ("2024-01-02", "", "P1", "100"),
        ("2024-01-02", "East", "", "100"),
        ("2024-01-02", "East", "P1", ""),
        ("2024-01-02", "East", "P1", "NaN"),
        ("2024-01-02", "East", "P1", "-100"),
        ("2024-01-02", "East", "P1", "100"),
    ],
)
def test_validation_errors_match_rows_the_loader_drops(write_sales_csv, bad_row):
    path = write_sales_csv([("2024-01-01", "West", "P2", "5"), bad_row])

    report = run_validation(path)
    loaded = load_sales_sync(path)

    assert report.has_errors() is (loaded.skipped_rows > 0)


def test_row_with_extra_fields_is_rejected_like_the_loader(tmp_path):
    path = tmp_path / "long.csv"
    path.write_text("date,region,product,revenue\n2024-01-01,East,P1,100,999\n", encoding="utf-8")
    with pytest.raises(ValueError, match="more fields than the header"):
        run_validation(path)
    with pytest.raises(DatasetLoadError):
        load_sales_sync(path)
