"""MCP tool and resource registration."""

from typing import Annotated, Literal, Optional, Union

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from . import reports
from .client import CanvasClient

SERVER_NAME = "Canvas-Assignment-Assistant"
ASSIGNMENT_RESOURCE_URI = "canvas://courses/{courseId}/assignments/{assignmentId}"

LIST_COURSES_DESCRIPTION = (
    "Lists all courses you are enrolled in, with options to filter by active, "
    "completed, or all courses."
)
LIST_ACTIVE_COURSES_DESCRIPTION = (
    "Lists only your active/current courses using the dashboard API. "
    "Much faster than list_courses."
)
SEARCH_ASSIGNMENTS_DESCRIPTION = (
    "Searches for assignments across all courses based on title, description, "
    "due dates, and course filters."
)
GET_ASSIGNMENT_DESCRIPTION = (
    "Retrieves detailed information about a specific assignment, including its "
    "description, submission requirements, and embedded links."
)


def to_call_tool_result(result: reports.ToolResult) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def create_server(client: CanvasClient) -> FastMCP:
    """Build a FastMCP server whose handlers all share ``client``."""
    mcp = FastMCP(SERVER_NAME)

    # Tool parameter names are the public schema clients already use, hence camelCase.
    @mcp.tool(description=LIST_COURSES_DESCRIPTION)
    def list_courses(
        state: Annotated[
            Literal["active", "completed", "all"],
            Field(description="Filter courses by state: active, completed, or all"),
        ] = "active",
    ):
        return to_call_tool_result(reports.list_courses(client, state))

    @mcp.tool(description=LIST_ACTIVE_COURSES_DESCRIPTION)
    def canvas_list_active_courses():
        return to_call_tool_result(reports.list_active_courses(client))

    @mcp.tool(description=SEARCH_ASSIGNMENTS_DESCRIPTION)
    def search_assignments(
        query: Annotated[
            Optional[str],
            Field(
                description=(
                    "Search term to find in assignment titles or descriptions. "
                    "Use '*' as wildcard to match all. Optional if other filters "
                    "like dates are specified."
                )
            ),
        ] = None,
        dueBefore: Annotated[
            Optional[str],
            Field(description="Only include assignments due before this date (YYYY-MM-DD)"),
        ] = None,
        dueAfter: Annotated[
            Optional[str],
            Field(description="Only include assignments due after this date (YYYY-MM-DD)"),
        ] = None,
        includeCompleted: Annotated[
            bool, Field(description="Include assignments from completed courses")
        ] = False,
        courseId: Annotated[
            Optional[Union[str, int]],
            Field(description="Optional: Limit search to specific course ID"),
        ] = None,
    ):
        return to_call_tool_result(
            reports.search_assignments(
                client,
                query=query,
                due_before=dueBefore,
                due_after=dueAfter,
                include_completed=includeCompleted,
                course_id=courseId,
            )
        )

    @mcp.tool(description=GET_ASSIGNMENT_DESCRIPTION)
    def get_assignment(
        courseId: Annotated[Union[str, int], Field(description="Course ID")],
        assignmentId: Annotated[Union[str, int], Field(description="Assignment ID")],
        formatType: Annotated[
            Literal["full", "plain", "markdown"],
            Field(
                description=(
                    "Format type: full (HTML), plain (text only), or markdown (formatted)"
                )
            ),
        ] = "markdown",
    ):
        return to_call_tool_result(
            reports.get_assignment(client, courseId, assignmentId, formatType)
        )

    @mcp.resource(
        ASSIGNMENT_RESOURCE_URI,
        name="assignment_content",
        mime_type="text/markdown",
    )
    def assignment_content(courseId: str, assignmentId: str) -> str:
        return reports.assignment_content(client, courseId, assignmentId)

    return mcp
