"""Tests for the MCP server wiring."""

from __future__ import annotations

import asyncio
import json

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from repoprobe.server import create_server, format_result
from repoprobe.toolbox import TOOLS, ToolResult
from tests._fixtures.project_builder import ProjectBuilder


def test_format_result_renders_payloads() -> None:
    assert format_result(ToolResult(name="get_project_structure", payload="proj/\n")) == "proj/\n"
    rendered = format_result(ToolResult(name="delete_file", payload={"path": "a.txt"}))
    assert json.loads(rendered) == {"path": "a.txt"}
    assert rendered == json.dumps({"path": "a.txt"}, indent=2)


def test_format_result_raises_for_failures() -> None:
    with pytest.raises(ToolError, match="Error: File not found: a.txt"):
        format_result(ToolResult(name="read_file", error="File not found: a.txt"))


def test_server_registers_every_tool(project_builder: ProjectBuilder) -> None:
    server = create_server(project_builder.toolbox())

    tools = asyncio.run(server.list_tools())

    assert sorted(tool.name for tool in tools) == sorted(TOOLS)
    search = next(tool for tool in tools if tool.name == "search_code")
    assert search.inputSchema["required"] == ["query"]
