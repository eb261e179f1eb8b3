"""Tests for the MCP server wiring."""

from __future__ import annotations

import asyncio
import json

import pytest

pytest.importorskip("mcp")

from mcp.shared.exceptions import McpError  # noqa: E402
from pydantic import AnyUrl  # noqa: E402

from sales_mcp.core.config import ServerConfig  # noqa: E402
from sales_mcp.interfaces.mcp import server as mcp_server  # noqa: E402


def test_create_dispatcher_uses_config_timeout(tmp_path):
    config = ServerConfig(data_file=tmp_path / "sales.csv", load_timeout=2.5)
    dispatcher = mcp_server.create_dispatcher(config)
    assert dispatcher.timeout == 2.5
    assert dispatcher.registry.get_tool("get_top_products") is not None


def test_create_server_registers_handlers(tmp_path):
    config = ServerConfig(server_name="test-sales", data_file=tmp_path / "sales.csv")
    server = mcp_server.create_server(mcp_server.create_dispatcher(config), config.server_name)

    assert server.name == "test-sales"
    handlers = {cls.__name__ for cls in server.request_handlers}
    assert {
        "ListToolsRequest",
        "CallToolRequest",
        "ListResourcesRequest",
        "ReadResourceRequest",
    } <= handlers


def test_create_http_app_mounts_mcp_path(tmp_path):
    config = ServerConfig(data_file=tmp_path / "sales.csv")
    app = mcp_server.create_http_app(mcp_server.create_server(mcp_server.create_dispatcher(config)))
    assert [route.path for route in app.routes] == ["/mcp"]


def _client_session(data_file):
    from mcp.shared.memory import create_connected_server_and_client_session

    config = ServerConfig(data_file=data_file)
    server = mcp_server.create_server(mcp_server.create_dispatcher(config))
    return create_connected_server_and_client_session(server)


class TestClientSession:
    """Full round trips through an in-memory MCP client session."""

    def test_tools(self, region_csv):
        async def scenario():
            async with _client_session(region_csv) as client:
                listed = await client.list_tools()
                total = await client.call_tool("get_total_sales", {"region": "East"})
                invalid = await client.call_tool("get_top_products", {"limit": 0})
                unknown = await client.call_tool("no_such_tool", {})
                return listed, total, invalid, unknown

        listed, total, invalid, unknown = asyncio.run(scenario())

        schemas = {tool.name: tool.inputSchema for tool in listed.tools}
        assert schemas["get_top_products"]["properties"]["limit"]["maximum"] == 50
        assert schemas["get_sales_by_all_regions"]["additionalProperties"] is False

        assert total.isError is False
        assert json.loads(total.content[0].text) == {"region": "East", "totalRevenue": 125}

        assert invalid.isError is True
        assert json.loads(invalid.content[0].text)["kind"] == "validation"

        assert unknown.isError is True
        assert json.loads(unknown.content[0].text)["kind"] == "not_found"

    def test_resources(self, region_csv):
        async def scenario():
            async with _client_session(region_csv) as client:
                listed = await client.list_resources()
                summary = await client.read_resource(AnyUrl("sales://summary/regions"))
                with pytest.raises(McpError) as excinfo:
                    await client.read_resource(AnyUrl("sales://no/such"))
                return listed, summary, excinfo.value

        listed, summary, error = asyncio.run(scenario())

        assert [str(r.uri) for r in listed.resources] == [
            "sales://summary/regions",
            "sales://top/products",
        ]
        (content,) = summary.contents
        assert content.mimeType == "application/json"
        assert json.loads(content.text) == {"East": 125, "West": 50}
        assert "sales://no/such" in error.error.message

    def test_missing_dataset_is_reported_not_raised(self, tmp_path):
        async def scenario():
            async with _client_session(tmp_path / "absent.csv") as client:
                return await client.call_tool("get_sales_by_all_regions", {})

        result = asyncio.run(scenario())
        assert result.isError is True
        assert json.loads(result.content[0].text)["kind"] == "data_load"
