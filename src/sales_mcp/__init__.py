"""Sales MCP Server: sales CSV aggregates exposed as MCP tools and resources.

The dispatcher, aggregation engine and loader live in this package; the
``sales-mcp`` CLI starts the server, runs single queries and validates
datasets.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
