"""Exception hierarchy for the sales MCP server.

Everything raised on purpose below the dispatcher derives from
``SalesMcpError`` so the dispatcher can map it onto a failure envelope.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union


class SalesMcpError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(SalesMcpError):
    """Configuration file is missing or holds invalid values."""


class DatasetLoadError(SalesMcpError):
    """The sales dataset could not be loaded."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class DatasetNotFoundError(DatasetLoadError, FileNotFoundError):
    """The sales dataset file does not exist."""


class MalformedRowError(DatasetLoadError):
    """A data row could not be parsed while loading in strict mode."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None, row: int = 0):
        super().__init__(message, path)
        self.row = row


class ArgumentValidationError(SalesMcpError, ValueError):
    """Caller arguments violate a tool's input schema.

    Carries every violated constraint, not only the first one found.
    """

    def __init__(self, violations: Iterable[str], target: str = "") -> None:
        self.violations: List[str] = list(violations)
        self.target = target
        prefix = f"Invalid arguments for '{target}'" if target else "Invalid arguments"
        super().__init__(f"{prefix}: " + "; ".join(self.violations))


class UnknownToolError(SalesMcpError, LookupError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool not found: {name}")
        self.name = name


class UnknownResourceError(SalesMcpError, LookupError):
    """No resource is registered under the requested URI."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Resource not found: {uri}")
        self.uri = uri


__all__ = [
    "SalesMcpError",
    "ConfigError",
    "DatasetLoadError",
    "DatasetNotFoundError",
    "MalformedRowError",
    "ArgumentValidationError",
    "UnknownToolError",
    "UnknownResourceError",
]
