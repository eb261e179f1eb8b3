"""Sales tools and resources.

Implements the tool surface:
 - get_total_sales
 - get_sales_by_all_regions
 - get_top_products
 - describe_dataset

and the resources:
 - sales://summary/regions
 - sales://top/products

Each handler reloads the dataset, so results always reflect the file as it
is at call time.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import Field

from sales_mcp.aggregation import (
    sales_by_product,
    sales_by_region,
    sum_amounts,
    top_n,
    total_revenue,
)
from sales_mcp.core.arguments import NoArguments, ToolArguments
from sales_mcp.core.config import ServerConfig
from sales_mcp.core.models import LoadResult
from sales_mcp.ingestion import load_sales
from .registry import Registry, ResourceDescriptor, ToolDescriptor

logger = logging.getLogger(__name__)

TOP_PRODUCTS_DEFAULT = 5
TOP_PRODUCTS_MAX = 50

REGIONS_SUMMARY_URI = "sales://summary/regions"
TOP_PRODUCTS_URI = "sales://top/products"


class TotalSalesArgs(ToolArguments):
    region: Optional[str] = Field(None, description="Optional region to filter totals")


class TopProductsArgs(ToolArguments):
    limit: int = Field(
        TOP_PRODUCTS_DEFAULT,
        ge=1,
        le=TOP_PRODUCTS_MAX,
        description=f"How many products to return (default {TOP_PRODUCTS_DEFAULT})",
    )


def _top_products_payload(load: LoadResult, limit: int) -> Dict[str, Any]:
    ranked = top_n(sales_by_product(load.records), limit)
    return {"top": [{"product": product, "revenue": revenue} for product, revenue in ranked]}


class SalesTools:
    """Handlers bound to one dataset configuration."""

    def __init__(self, config: ServerConfig) -> None:
        self.config = config

    async def _load(self) -> LoadResult:
        return await load_sales(
            self.config.data_file,
            strict=self.config.strict_rows,
            chunk_size=self.config.chunk_size,
        )

    async def get_total_sales(self, args: TotalSalesArgs) -> Dict[str, Any]:
        """Total revenue, optionally for a single region."""
        load = await self._load()
        # an empty region string means no filter
        region = args.region or None
        total = total_revenue(load.records, region)
        logger.debug("Total for region %s over %d records", region or "ALL", len(load))
        return {"region": region if region is not None else "ALL", "totalRevenue": total}

    async def get_sales_by_all_regions(self, args: NoArguments) -> Dict[str, Any]:
        """Revenue per region plus the grand total."""
        load = await self._load()
        regions = sales_by_region(load.records)
        return {"regions": regions, "total": sum_amounts(regions.values())}

    async def get_top_products(self, args: TopProductsArgs) -> Dict[str, Any]:
        """Products ranked by revenue, highest first."""
        load = await self._load()
        return _top_products_payload(load, args.limit)

    async def describe_dataset(self, args: NoArguments) -> Dict[str, Any]:
        """Row counts and the skipped-row report of the current dataset."""
        load = await self._load()
        return {
            "source": str(load.source),
            "records": len(load),
            "skippedRows": load.skipped_rows,
            "skipped": [{"row": s.row, "reason": s.reason} for s in load.skipped],
            "regions": len({r.region for r in load.records}),
            "products": len({r.product for r in load.records}),
        }

    async def regions_summary(self) -> Dict[str, Any]:
        load = await self._load()
        return sales_by_region(load.records)

    async def top_products(self) -> Dict[str, Any]:
        load = await self._load()
        return _top_products_payload(load, self.config.top_products_resource_limit)


def build_registry(config: ServerConfig) -> Registry:
    """Create the registry holding every sales tool and resource."""
    sales = SalesTools(config)
    registry = Registry()

    registry.register_tool(
        ToolDescriptor(
            name="get_total_sales",
            description="Total revenue across all sales, or for one region when given.",
            arguments=TotalSalesArgs,
            handler=sales.get_total_sales,
        )
    )
    registry.register_tool(
        ToolDescriptor(
            name="get_sales_by_all_regions",
            description="Revenue for every region together with the overall total.",
            arguments=NoArguments,
            handler=sales.get_sales_by_all_regions,
        )
    )
    registry.register_tool(
        ToolDescriptor(
            name="get_top_products",
            description=(
                "Products ranked by total revenue, highest first. "
                f"Parameters: limit (int, 1-{TOP_PRODUCTS_MAX}, default {TOP_PRODUCTS_DEFAULT})."
            ),
            arguments=TopProductsArgs,
            handler=sales.get_top_products,
        )
    )
    registry.register_tool(
        ToolDescriptor(
            name="describe_dataset",
            description="Record count, distinct regions/products and rows skipped as malformed.",
            arguments=NoArguments,
            handler=sales.describe_dataset,
        )
    )

    registry.register_resource(
        ResourceDescriptor(
            name="sales_summary",
            uri=REGIONS_SUMMARY_URI,
            description="JSON snapshot of revenue by region",
            handler=sales.regions_summary,
        )
    )
    registry.register_resource(
        ResourceDescriptor(
            name="top_products",
            uri=TOP_PRODUCTS_URI,
            description=(
                f"JSON snapshot of the top {config.top_products_resource_limit} products by revenue"
            ),
            handler=sales.top_products,
        )
    )
    return registry


__all__ = [
    "SalesTools",
    "TotalSalesArgs",
    "TopProductsArgs",
    "build_registry",
    "REGIONS_SUMMARY_URI",
    "TOP_PRODUCTS_URI",
]
