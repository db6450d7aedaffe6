import asyncio

from canvas_assignment_assistant import server as server_module
from canvas_assignment_assistant.client import CanvasClient
from canvas_assignment_assistant.config import Settings
from canvas_assignment_assistant.reports import ToolResult
from canvas_assignment_assistant.server import (
    ASSIGNMENT_RESOURCE_URI,
    create_server,
    to_call_tool_result,
)


def test_tools_are_registered():
    server = create_server(CanvasClient(Settings()))

    tools = asyncio.run(server.list_tools())

    assert {tool.name for tool in tools} == {
        "list_courses",
        "canvas_list_active_courses",
        "search_assignments",
        "get_assignment",
    }


def test_get_assignment_schema_requires_ids():
    server = create_server(CanvasClient(Settings()))

    tools = {tool.name: tool for tool in asyncio.run(server.list_tools())}
    schema = tools["get_assignment"].inputSchema

    assert set(schema["required"]) == {"courseId", "assignmentId"}
    assert "formatType" in schema["properties"]


def test_search_schema_uses_camel_case_filters():
    server = create_server(CanvasClient(Settings()))

    tools = {tool.name: tool for tool in asyncio.run(server.list_tools())}
    properties = tools["search_assignments"].inputSchema["properties"]

    assert set(properties) == {"query", "dueBefore", "dueAfter", "includeCompleted", "courseId"}


def test_search_tool_passes_filters_through(monkeypatch):
    calls = []

    def fake_search(client, **kwargs):
        calls.append(kwargs)
        return ToolResult(text="No assignments found.")

    monkeypatch.setattr(server_module.reports, "search_assignments", fake_search)
    server = create_server(CanvasClient(Settings()))

    asyncio.run(
        server.call_tool(
            "search_assignments",
            {"query": "essay", "dueBefore": "2024-05-01", "includeCompleted": True, "courseId": 7},
        )
    )

    assert calls == [
        {
            "query": "essay",
            "due_before": "2024-05-01",
            "due_after": None,
            "include_completed": True,
            "course_id": 7,
        }
    ]


def test_assignment_resource_template_is_registered():
    server = create_server(CanvasClient(Settings()))

    templates = asyncio.run(server.list_resource_templates())

    assert [t.uriTemplate for t in templates] == [ASSIGNMENT_RESOURCE_URI]
    assert templates[0].mimeType == "text/markdown"


def test_tool_result_conversion():
    converted = to_call_tool_result(ToolResult(text="Search failed: boom", is_error=True))

    assert converted.isError is True
    assert converted.content[0].type == "text"
    assert converted.content[0].text == "Search failed: boom"
