"""Invocation dispatcher.

Resolves a tool name or resource URI against the registry, validates the
arguments, runs the handler and packages the outcome into a response
envelope. Every outcome, including handler crashes, becomes an envelope:
nothing raised by a handler escapes ``call_tool`` or ``read_resource``.

Envelope shapes (``to_dict``):
    tool:     {"content": [{"type": "text", "text": "<json>"}], "isError": bool}
    resource: {"contents": [{"uri", "mimeType", "text"}], "isError": bool}

Failure text is JSON of the form
``{"error": "<message>", "kind": "<kind>", "violations": [...]}`` where kind
is one of ``validation``, ``not_found``, ``data_load``, ``timeout`` or
``internal``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sales_mcp.core.arguments import input_schema, validate_arguments
from sales_mcp.core.enums import InvocationState
from sales_mcp.core.errors import (
    ArgumentValidationError,
    DatasetLoadError,
    UnknownResourceError,
    UnknownToolError,
)
from .registry import Registry

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"


def _json_default(value: Any) -> Any:
    """Render Decimals as JSON numbers.

    Integral amounts become exact JSON integers of any size. Other amounts
    are rendered as the nearest binary float, which is lossy: long fractions
    lose digits and magnitudes below the float range become 0.0.
    """
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_json(payload: Any) -> str:
    """Serialize a result deterministically (insertion-ordered keys)."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=_json_default)


@dataclass(frozen=True)
class TextBlock:
    """A text payload block of a tool response."""

    text: str
    type: str = "text"

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ResourceBlock:
    """A content block of a resource read."""

    uri: str
    text: str
    mime_type: str = JSON_MIME_TYPE

    def to_dict(self) -> Dict[str, str]:
        return {"uri": self.uri, "mimeType": self.mime_type, "text": self.text}


@dataclass(frozen=True)
class ToolResponse:
    """Envelope returned for a tool invocation."""

    name: str
    content: Tuple[TextBlock, ...]
    state: InvocationState
    is_error: bool = False

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content)

    def json(self) -> Any:
        """Decode the JSON payload of the text block."""
        return json.loads(self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {"content": [b.to_dict() for b in self.content], "isError": self.is_error}


@dataclass(frozen=True)
class ResourceResponse:
    """Envelope returned for a resource read."""

    uri: str
    contents: Tuple[ResourceBlock, ...]
    state: InvocationState
    is_error: bool = False
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.contents)

    def json(self) -> Any:
        return json.loads(self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {"contents": [b.to_dict() for b in self.contents], "isError": self.is_error}


def _failure_payload(exc: BaseException) -> Tuple[str, Dict[str, Any]]:
    """Map an exception onto an error kind and a JSON-ready payload."""
    if isinstance(exc, ArgumentValidationError):
        return str(exc), {"error": str(exc), "kind": "validation", "violations": exc.violations}
    if isinstance(exc, (UnknownToolError, UnknownResourceError)):
        return str(exc), {"error": str(exc), "kind": "not_found"}
    if isinstance(exc, DatasetLoadError):
        return str(exc), {"error": str(exc), "kind": "data_load"}
    if isinstance(exc, asyncio.TimeoutError):
        message = "Invocation timed out"
        return message, {"error": message, "kind": "timeout"}
    message = f"Internal error: {exc}"
    return message, {"error": message, "kind": "internal"}


class Dispatcher:
    """Run registered tools and resources and wrap their results.

    Args:
        registry: Tools and resources available to callers.
        timeout: Optional limit in seconds for a single handler run.
    """

    def __init__(self, registry: Registry, *, timeout: Optional[float] = None) -> None:
        self.registry = registry
        self.timeout = timeout

    def _transition(self, target: str, state: InvocationState) -> InvocationState:
        logger.debug("%s -> %s", target, state.value)
        return state

    async def _run(self, coro: Any) -> Any:
        if self.timeout is None:
            return await coro
        return await asyncio.wait_for(coro, self.timeout)

    async def call_tool(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> ToolResponse:
        """Invoke a tool by name.

        Returns:
            A success envelope holding the JSON result, or a failure envelope
            (``is_error=True``) describing what went wrong.
        """
        state = self._transition(name, InvocationState.VALIDATING)
        try:
            descriptor = self.registry.get_tool(name)
            if descriptor is None:
                raise UnknownToolError(name)
            args = validate_arguments(descriptor.arguments, arguments, target=name)

            state = self._transition(name, InvocationState.EXECUTING)
            result = await self._run(descriptor.handler(args))
            text = dump_json(result)
        except Exception as e:  # every failure becomes an envelope
            return self._tool_failure(name, state, e)

        state = self._transition(name, InvocationState.SUCCEEDED)
        return ToolResponse(name=name, content=(TextBlock(text=text),), state=state)

    def _tool_failure(
        self, name: str, state: InvocationState, exc: Exception
    ) -> ToolResponse:
        message, payload = _failure_payload(exc)
        self._log_failure(name, state, payload["kind"], message, exc)
        failed = self._transition(name, InvocationState.FAILED)
        return ToolResponse(
            name=name,
            content=(TextBlock(text=dump_json(payload)),),
            state=failed,
            is_error=True,
        )

    async def read_resource(self, uri: str) -> ResourceResponse:
        """Read a resource by URI; failures come back as error envelopes."""
        state = self._transition(uri, InvocationState.VALIDATING)
        try:
            descriptor = self.registry.get_resource(uri)
            if descriptor is None:
                raise UnknownResourceError(uri)

            state = self._transition(uri, InvocationState.EXECUTING)
            result = await self._run(descriptor.handler())
            block = ResourceBlock(uri=uri, text=dump_json(result), mime_type=descriptor.mime_type)
        except Exception as e:  # every failure becomes an envelope
            message, payload = _failure_payload(e)
            self._log_failure(uri, state, payload["kind"], message, e)
            failed = self._transition(uri, InvocationState.FAILED)
            return ResourceResponse(
                uri=uri,
                contents=(ResourceBlock(uri=uri, text=dump_json(payload)),),
                state=failed,
                is_error=True,
                error=message,
                error_kind=payload["kind"],
            )

        state = self._transition(uri, InvocationState.SUCCEEDED)
        return ResourceResponse(uri=uri, contents=(block,), state=state)

    @staticmethod
    def _log_failure(
        target: str, state: InvocationState, kind: str, message: str, exc: Exception
    ) -> None:
        if kind == "internal":
            logger.error("Unhandled error in %s while %s", target, state.value, exc_info=exc)
        else:
            logger.warning("%s failed while %s: %s", target, state.value, message)

    def list_tools(self) -> List[Dict[str, Any]]:
        """Describe registered tools with their JSON input schemas."""
        return [
            {
                "name": t.name,
                "description": t.description,
                "inputSchema": input_schema(t.arguments),
            }
            for t in self.registry.tools()
        ]

    def list_resources(self) -> List[Dict[str, Any]]:
        return [
            {
                "uri": r.uri,
                "name": r.name,
                "description": r.description,
                "mimeType": r.mime_type,
            }
            for r in self.registry.resources()
        ]


__all__ = [
    "Dispatcher",
    "ToolResponse",
    "ResourceResponse",
    "TextBlock",
    "ResourceBlock",
    "dump_json",
]
