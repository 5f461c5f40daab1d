"""
End-to-end tests through the FastMCP in-memory client.
"""

import json

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from core.config import Settings
from core.server_info import SERVER_INFO_URI, SERVER_NAME
from tools.mcp_server import create_server

from _helpers import RecordingHandler, StubImageClient

EXPECTED_TOOLS = {"greet", "calculator", "getTime", "geocode", "get-weather", "generate-image"}


@pytest.fixture
def server(registry):
    return create_server(registry=registry)


@pytest.mark.asyncio
async def test_lists_all_tools_with_schemas(server):
    async with Client(server) as client:
        tools = {tool.name: tool for tool in await client.list_tools()}

    assert set(tools) == EXPECTED_TOOLS
    calculator_schema = tools["calculator"].inputSchema
    assert set(calculator_schema["required"]) == {"num1", "num2", "operator"}
    assert tools["geocode"].annotations.openWorldHint is True
    assert tools["greet"].annotations.openWorldHint is False


@pytest.mark.asyncio
async def test_greet(server):
    async with Client(server) as client:
        result = await client.call_tool("greet", {"name": "Tom", "language": "ko"})
    assert result.content[0].text == "안녕하세요, Tom님!"


@pytest.mark.asyncio
async def test_calculator_structured_output(server):
    async with Client(server) as client:
        result = await client.call_tool("calculator", {"num1": 10, "num2": 4, "operator": "/"})
    assert result.content[0].text == "10 / 4 = 2.5"
    assert result.structured_content["result"] == 2.5


@pytest.mark.asyncio
async def test_divide_by_zero_is_a_tool_error(server):
    async with Client(server) as client:
        with pytest.raises(ToolError, match="0으로 나눌 수 없습니다"):
            await client.call_tool("calculator", {"num1": 1, "num2": 0, "operator": "/"})


@pytest.mark.asyncio
async def test_invalid_arguments_are_a_tool_error(server):
    async with Client(server) as client:
        with pytest.raises(ToolError, match="operator"):
            await client.call_tool("calculator", {"num1": 1, "num2": 2, "operator": "^"})


@pytest.mark.asyncio
async def test_unknown_tool_is_a_tool_error(server):
    async with Client(server) as client:
        with pytest.raises(ToolError):
            await client.call_tool("teleport", {})


@pytest.mark.asyncio
async def test_geocode_without_results(make_registry):
    server = create_server(registry=make_registry(RecordingHandler(json=[])))
    async with Client(server) as client:
        result = await client.call_tool("geocode", {"address": "nowhere-at-all"})
    assert "검색 결과가 없습니다" in result.content[0].text


@pytest.mark.asyncio
async def test_generate_image_returns_image_content(make_registry):
    registry = make_registry(
        settings_override=Settings(hf_token="hf_test"), image_client=StubImageClient()
    )
    async with Client(create_server(registry=registry)) as client:
        result = await client.call_tool("generate-image", {"prompt": "a lighthouse"})
    block = result.content[0]
    assert block.type == "image"
    assert block.mimeType == "image/png"


@pytest.mark.asyncio
async def test_server_info_resource(server):
    async with Client(server) as client:
        resources = await client.list_resources()
        contents = await client.read_resource(SERVER_INFO_URI)

    assert [str(resource.uri) for resource in resources] == [SERVER_INFO_URI]
    info = json.loads(contents[0].text)
    assert info["name"] == SERVER_NAME
    assert info["uptime_seconds"] >= 0
    assert {tool["name"] for tool in info["tools"]} == EXPECTED_TOOLS


@pytest.mark.asyncio
async def test_argument_named_like_a_log_parameter_is_ignored(server):
    async with Client(server) as client:
        result = await client.call_tool("greet", {"name": "Tom", "tool_name": "x"})
    assert result.content[0].text == "Hey there, Tom! 👋 Nice to meet you!"
