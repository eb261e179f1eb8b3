"""Tool and resource registry.

Descriptors are registered once at startup into a ``Registry`` instance that
is then handed to the dispatcher. Nothing is registered at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from sales_mcp.core.arguments import NoArguments

ToolHandler = Callable[[Any], Awaitable[Any]]
ResourceHandler = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDescriptor:
    """A named tool: its input contract and the coroutine that serves it.

    The handler receives the validated ``arguments`` model instance and
    returns a JSON-serializable result.
    """

    name: str
    handler: ToolHandler
    description: str = ""
    arguments: Type[BaseModel] = NoArguments


@dataclass(frozen=True)
class ResourceDescriptor:
    """A URI-addressed, argument-free snapshot of computed data."""

    name: str
    uri: str
    handler: ResourceHandler
    description: str = ""
    mime_type: str = "application/json"


class Registry:
    """Lookup of tools by name and resources by URI."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        self._resources: Dict[str, ResourceDescriptor] = {}

    def register_tool(self, descriptor: ToolDescriptor) -> None:
        """Add a tool; names must be unique."""
        if descriptor.name in self._tools:
            raise ValueError(f"Tool already registered: {descriptor.name}")
        self._tools[descriptor.name] = descriptor

    def register_resource(self, descriptor: ResourceDescriptor) -> None:
        """Add a resource; URIs must be unique."""
        if descriptor.uri in self._resources:
            raise ValueError(f"Resource already registered: {descriptor.uri}")
        self._resources[descriptor.uri] = descriptor

    def get_tool(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def get_resource(self, uri: str) -> Optional[ResourceDescriptor]:
        return self._resources.get(uri)

    def tools(self) -> List[ToolDescriptor]:
        """Registered tools in registration order."""
        return list(self._tools.values())

    def resources(self) -> List[ResourceDescriptor]:
        """Registered resources in registration order."""
        return list(self._resources.values())


__all__ = [
    "ToolDescriptor",
    "ResourceDescriptor",
    "Registry",
    "ToolHandler",
    "ResourceHandler",
]
