"""Server configuration.

Settings are read from a YAML file (``config/server.yaml`` by default) and
may be overridden from the command line. Example file::

    server_name: sales-mcp-server
    data_file: data/sales.csv
    strict_rows: false
    chunk_size: 10000
    load_timeout: 30
    top_products_resource_limit: 5
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/server.yaml")
DEFAULT_DATA_FILE = Path("data/sales.csv")
DEFAULT_CHUNK_SIZE = 10_000
DEFAULT_TOP_LIMIT = 5


@dataclass(frozen=True)
class ServerConfig:
    """Runtime settings for the MCP server and CLI commands."""

    server_name: str = "sales-mcp-server"
    data_file: Path = DEFAULT_DATA_FILE
    strict_rows: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    load_timeout: Optional[float] = None
    top_products_resource_limit: int = DEFAULT_TOP_LIMIT

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.load_timeout is not None and self.load_timeout <= 0:
            raise ConfigError(f"load_timeout must be positive, got {self.load_timeout}")
        if not 1 <= self.top_products_resource_limit <= 50:
            raise ConfigError(
                "top_products_resource_limit must be between 1 and 50, "
                f"got {self.top_products_resource_limit}"
            )

    def with_overrides(self, **overrides: Any) -> "ServerConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "data_file" in changes:
            changes["data_file"] = Path(changes["data_file"])
        return replace(self, **changes)


def _coerce(raw: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(ServerConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
    values: Dict[str, Any] = {}
    try:
        if "server_name" in raw:
            values["server_name"] = str(raw["server_name"])
        if "data_file" in raw:
            values["data_file"] = Path(str(raw["data_file"]))
        if "strict_rows" in raw:
            if not isinstance(raw["strict_rows"], bool):
                raise ConfigError("strict_rows must be true or false")
            values["strict_rows"] = raw["strict_rows"]
        if "chunk_size" in raw:
            values["chunk_size"] = int(raw["chunk_size"])
        if raw.get("load_timeout") is not None:
            values["load_timeout"] = float(raw["load_timeout"])
        if "top_products_resource_limit" in raw:
            values["top_products_resource_limit"] = int(raw["top_products_resource_limit"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e
    return values


def load_config(path: Optional[Path] = None) -> ServerConfig:
    """Load server settings from YAML.

    Args:
        path: Config file to read. When None, ``config/server.yaml`` is used if
            it exists, otherwise built-in defaults apply.

    Returns:
        The parsed ServerConfig.

    Raises:
        ConfigError: If an explicitly named file is missing, the YAML cannot be
            parsed, or a value is invalid.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("No config file at %s, using defaults", DEFAULT_CONFIG_PATH)
            return ServerConfig()
        path = DEFAULT_CONFIG_PATH
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    config = ServerConfig(**_coerce(data))
    logger.debug("Loaded config from %s: %s", path, config)
    return config


__all__ = ["ServerConfig", "load_config", "DEFAULT_CONFIG_PATH", "DEFAULT_DATA_FILE"]
