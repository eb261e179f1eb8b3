"""Shared pytest configuration and fixtures for sales dataset testing."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

import pytest

from sales_mcp.core.config import ServerConfig
from sales_mcp.core.models import SaleRecord

HEADER = "date,region,product,revenue"

# (date, region, product, revenue) rows used by several tool tests
REGION_ROWS = [
    ("2024-01-01", "East", "P1", "100"),
    ("2024-01-02", "West", "P2", "50"),
    ("2024-01-03", "East", "P3", "25"),
]

PRODUCT_ROWS = [
    ("2024-01-01", "North", "A", "10"),
    ("2024-01-02", "South", "B", "30"),
    ("2024-01-03", "North", "A", "5"),
]


def make_records(rows: Iterable[Sequence[str]]) -> List[SaleRecord]:
    """Build SaleRecords from (date, region, product, revenue) tuples."""
    return [SaleRecord(d, r, p, Decimal(str(v))) for d, r, p, v in rows]


def csv_text(rows: Iterable[Sequence[str]], header: str = HEADER) -> str:
    lines = [header] + [",".join(str(c) for c in row) for row in rows]
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_sales_csv(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes rows to a CSV file under tmp_path."""

    def _write(rows: Iterable[Sequence[str]], name: str = "sales.csv", header: str = HEADER) -> Path:
        path = tmp_path / name
        path.write_text(csv_text(rows, header), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def region_csv(write_sales_csv) -> Path:  # pylint: disable=redefined-outer-name
    return write_sales_csv(REGION_ROWS)


@pytest.fixture
def product_csv(write_sales_csv) -> Path:  # pylint: disable=redefined-outer-name
    return write_sales_csv(PRODUCT_ROWS)


@pytest.fixture
def config_for() -> Callable[..., ServerConfig]:
    """Return a helper building a ServerConfig for a data file."""

    def _config(data_file: Path, **overrides) -> ServerConfig:
        return ServerConfig(data_file=data_file, **overrides)

    return _config
