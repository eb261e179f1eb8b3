"""Tests for the dispatcher state machine and response envelopes."""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from pydantic import Field

from sales_mcp.core.arguments import ToolArguments
from sales_mcp.core.enums import InvocationState
from sales_mcp.core.errors import DatasetNotFoundError
from sales_mcp.interfaces.mcp.dispatcher import Dispatcher, dump_json
from sales_mcp.interfaces.mcp.registry import Registry, ResourceDescriptor, ToolDescriptor


class EchoArgs(ToolArguments):
    count: int = Field(1, ge=1, le=3)


def _registry(tool_handler, resource_handler=None) -> Registry:
    registry = Registry()
    registry.register_tool(ToolDescriptor(name="echo", handler=tool_handler, arguments=EchoArgs))
    if resource_handler is not None:
        registry.register_resource(
            ResourceDescriptor(name="snap", uri="test://snap", handler=resource_handler)
        )
    return registry


def test_call_tool_success_envelope():
    async def echo(args: EchoArgs):
        return {"count": args.count, "amount": Decimal("2.50")}

    response = asyncio.run(Dispatcher(_registry(echo)).call_tool("echo", {"count": 2}))

    assert response.is_error is False
    assert response.state == InvocationState.SUCCEEDED
    assert len(response.content) == 1
    assert response.content[0].type == "text"
    assert response.json() == {"count": 2, "amount": 2.5}
    assert response.to_dict()["isError"] is False


def test_call_tool_unknown_name_fails_while_validating():
    handler = AsyncMock()
    response = asyncio.run(Dispatcher(_registry(handler)).call_tool("nope", {}))

    assert response.is_error is True
    assert response.state == InvocationState.FAILED
    payload = response.json()
    assert payload["kind"] == "not_found"
    assert "nope" in payload["error"]
    handler.assert_not_called()


def test_call_tool_validation_error_never_reaches_handler():
    handler = AsyncMock()
    dispatcher = Dispatcher(_registry(handler))

    response = asyncio.run(dispatcher.call_tool("echo", {"count": 9, "other": True}))

    assert response.is_error is True
    payload = response.json()
    assert payload["kind"] == "validation"
    assert len(payload["violations"]) == 2
    handler.assert_not_called()


def test_call_tool_handler_exception_becomes_internal_failure():
    async def boom(args):
        raise ZeroDivisionError("division by zero")

    response = asyncio.run(Dispatcher(_registry(boom)).call_tool("echo"))

    assert response.is_error is True
    assert response.state == InvocationState.FAILED
    assert response.json() == {"error": "Internal error: division by zero", "kind": "internal"}


def test_call_tool_load_error_is_reported():
    async def missing(args):
        raise DatasetNotFoundError("Sales dataset not found: x.csv")

    response = asyncio.run(Dispatcher(_registry(missing)).call_tool("echo"))

    assert response.is_error is True
    assert response.json()["kind"] == "data_load"


def test_call_tool_unserializable_result_is_internal_failure():
    async def weird(args):
        return {"value": object()}

    response = asyncio.run(Dispatcher(_registry(weird)).call_tool("echo"))
    assert response.is_error is True
    assert response.json()["kind"] == "internal"


def test_call_tool_timeout():
    async def slow(args):
        await asyncio.sleep(1)
        return {}

    response = asyncio.run(Dispatcher(_registry(slow), timeout=0.01).call_tool("echo"))
    assert response.is_error is True
    assert response.json()["kind"] == "timeout"


def test_read_resource_success():
    async def snap():
        return {"b": Decimal("3"), "a": Decimal("1.5")}

    response = asyncio.run(
        Dispatcher(_registry(AsyncMock(), snap)).read_resource("test://snap")
    )

    assert response.is_error is False
    assert response.state == InvocationState.SUCCEEDED
    block = response.contents[0]
    assert block.uri == "test://snap"
    assert block.mime_type == "application/json"
    # insertion order preserved
    assert list(json.loads(block.text)) == ["b", "a"]
    assert response.to_dict()["contents"][0]["mimeType"] == "application/json"


def test_read_resource_unknown_uri():
    response = asyncio.run(Dispatcher(_registry(AsyncMock())).read_resource("test://missing"))
    assert response.is_error is True
    assert response.error_kind == "not_found"
    assert "test://missing" in response.error


def test_read_resource_handler_failure():
    async def broken():
        raise RuntimeError("bad state")

    response = asyncio.run(Dispatcher(_registry(AsyncMock(), broken)).read_resource("test://snap"))
    assert response.is_error is True
    assert response.state == InvocationState.FAILED
    assert response.error_kind == "internal"


def test_registry_rejects_duplicates():
    registry = _registry(AsyncMock(), AsyncMock())
    with pytest.raises(ValueError):
        registry.register_tool(ToolDescriptor(name="echo", handler=AsyncMock()))
    with pytest.raises(ValueError):
        registry.register_resource(
            ResourceDescriptor(name="other", uri="test://snap", handler=AsyncMock())
        )


def test_list_tools_renders_schemas():
    dispatcher = Dispatcher(_registry(AsyncMock()))
    (tool,) = dispatcher.list_tools()
    assert tool["name"] == "echo"
    assert tool["inputSchema"]["properties"]["count"]["maximum"] == 3


def test_dump_json_renders_integral_decimals_as_ints():
    text = dump_json({"a": Decimal("125.0"), "b": Decimal("0.1"), "c": Decimal("-3")})
    assert json.loads(text) == {"a": 125, "b": 0.1, "c": -3}
    assert '"a": 125,' in text


def test_dump_json_integers_are_exact_and_fractions_are_floats():
    text = dump_json(
        {
            "big": Decimal("10000000000000000000000000012"),
            "long": Decimal("0.12345678901234567890123"),
            "tiny": Decimal("1.5e-400"),
        }
    )
    payload = json.loads(text)
    assert payload["big"] == 10**28 + 12
    assert payload["long"] == float(Decimal("0.12345678901234567890123"))
    assert payload["tiny"] == 0.0
