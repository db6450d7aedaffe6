"""Build the text reports returned by the MCP tools and resource.

Tool handlers never raise: any failure becomes a ``ToolResult`` with
``is_error`` set so the client always gets a well-formed answer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from .client import CanvasClient, Identifier
from .dates import format_date
from .errors import CanvasError
from .html_render import extract_links, to_markdown, to_plain_text
from .models import Assignment, SearchResult
from .search import is_wildcard, normalize_query, search_assignments as run_search

LOGGER = logging.getLogger(__name__)

COURSE_STATES = ("active", "completed", "all")
FORMAT_TYPES = ("full", "plain", "markdown")

NO_DESCRIPTION = "No description available"
NOT_SPECIFIED = "Not specified"


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False


def _failure(prefix: str, exc: Exception) -> ToolResult:
    if isinstance(exc, CanvasError):
        LOGGER.warning("%s%s", prefix, exc)
    else:
        LOGGER.exception("%s%s", prefix, exc)
    return ToolResult(text=f"{prefix}{exc}", is_error=True)


def _format_number(value: Optional[Union[int, float]]) -> str:
    if value is None:
        return NOT_SPECIFIED
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _submission_types(assignment: Assignment) -> str:
    return ", ".join(assignment.submission_types) or NOT_SPECIFIED


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


def list_courses(client: CanvasClient, state: str = "active") -> ToolResult:
    """List enrolled courses in ``state`` (active, completed or all)."""
    try:
        if state not in COURSE_STATES:
            raise ValueError(f"state must be one of {', '.join(COURSE_STATES)}")
        courses = client.list_courses(state, include_term=True)
    except Exception as exc:  # noqa: BLE001
        return _failure("Failed to fetch courses: ", exc)

    if not courses:
        return ToolResult(text=f"No {state} courses found.")

    lines = []
    for course in courses:
        term = f"({course.term})" if course.term else ""
        lines.append(f"- ID: {course.id} | {course.name} {term}".rstrip())
    return ToolResult(text=f"Your {state} courses:\n\n" + "\n".join(lines))


def list_active_courses(client: CanvasClient) -> ToolResult:
    """List the courses pinned to the user's dashboard."""
    try:
        cards = client.list_dashboard_cards()
    except Exception as exc:  # noqa: BLE001
        return _failure("Failed to fetch active courses: ", exc)

    if not cards:
        return ToolResult(text="No active courses found in your dashboard.")

    lines = []
    for card in cards:
        term = f"({card.term})" if card.term else ""
        lines.append(f"- ID: {card.id} | {card.short_name} {term}".rstrip())
    return ToolResult(text="Your active courses:\n\n" + "\n".join(lines))


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def _describe_filters(query: str, due_before: Optional[str], due_after: Optional[str]) -> str:
    date_range = []
    if due_after:
        date_range.append(f"after {due_after}")
    if due_before:
        date_range.append(f"before {due_before}")
    date_part = f" due {' and '.join(date_range)}" if date_range else ""
    # The wildcard is not a real search term, so it is not echoed back.
    query_part = "" if is_wildcard(query) else f' matching "{query}"'
    return f"{query_part}{date_part}"


def _build_search_entry(result: SearchResult) -> str:
    assignment = result.assignment
    status = "" if assignment.published else " (Unpublished)"
    return "\n".join(
        [
            f"- Course: {result.course_name} (ID: {result.course_id})",
            f"  Assignment: {assignment.name}{status} (ID: {assignment.id})",
            f"  Due: {format_date(assignment.due_at)}",
        ]
    )


def search_assignments(
    client: CanvasClient,
    query: Optional[str] = None,
    due_before: Optional[str] = None,
    due_after: Optional[str] = None,
    include_completed: bool = False,
    course_id: Optional[Identifier] = None,
) -> ToolResult:
    """Search assignment titles and descriptions across courses."""
    normalized = normalize_query(query)
    try:
        outcome = run_search(
            client,
            query=normalized,
            due_before=due_before,
            due_after=due_after,
            include_completed=include_completed,
            course_id=course_id,
        )
    except Exception as exc:  # noqa: BLE001
        return _failure("Search failed: ", exc)

    if outcome.no_courses:
        return ToolResult(text="No courses found.")

    filters = _describe_filters(normalized, due_before, due_after)
    if not outcome.results:
        return ToolResult(text=f"No assignments found{filters}.")

    entries = "\n\n".join(_build_search_entry(result) for result in outcome.results)
    return ToolResult(text=f"Found {len(outcome.results)} assignments{filters}:\n\n{entries}")


# ---------------------------------------------------------------------------
# Assignment details
# ---------------------------------------------------------------------------


def _render_description(assignment: Assignment, format_type: str) -> str:
    if format_type == "full":
        return assignment.description or NO_DESCRIPTION
    if format_type == "plain":
        return to_plain_text(assignment.description) or NO_DESCRIPTION
    return to_markdown(assignment.description) or NO_DESCRIPTION


def _build_requirements(assignment: Assignment) -> List[str]:
    lines = [f"- **Submission Type:** {_submission_types(assignment)}"]

    if "online_upload" in assignment.submission_types and assignment.allowed_extensions:
        extensions = ", ".join(f"`.{ext}`" for ext in assignment.allowed_extensions)
        lines.append(f"- **Allowed File Types:** {extensions}")

    # -1 is Canvas' "unlimited"
    if assignment.allowed_attempts is not None and assignment.allowed_attempts != -1:
        lines.append(f"- **Allowed Attempts:** {assignment.allowed_attempts}")

    grading_type = assignment.grading_type.replace("_", " ").lower()
    lines.append(f"- **Grading Type:** {grading_type or NOT_SPECIFIED}")

    if assignment.unlock_at or assignment.lock_at:
        lines.append("- **Time Restrictions:**")
        if assignment.unlock_at:
            lines.append(f"  - Available from: {format_date(assignment.unlock_at)}")
        if assignment.lock_at:
            lines.append(f"  - Locks at: {format_date(assignment.lock_at)}")

    if assignment.has_group_assignment:
        lines.append("- **Group Assignment:** Yes")

    if assignment.peer_reviews:
        lines.append("- **Peer Reviews Required:** Yes")

    if assignment.word_count:
        lines.append(f"- **Required Word Count:** {assignment.word_count}")

    tool = assignment.external_tool
    if tool and tool.url:
        lines.append("- **External Tool Required:** Yes")
        lines.append(f"  - Tool URL: {tool.url}")
        if tool.new_tab:
            lines.append("  - Opens in new tab: Yes")

    if assignment.turnitin_enabled or assignment.vericite_enabled:
        lines.append("- **Plagiarism Detection:**")
        if assignment.turnitin_enabled:
            lines.append("  - Turnitin enabled")
        if assignment.vericite_enabled:
            lines.append("  - VeriCite enabled")

    return lines


def _build_rubric(assignment: Assignment) -> List[str]:
    if not assignment.rubric:
        return []
    lines = ["", "## Rubric"]
    if assignment.use_rubric_for_grading:
        lines.extend(["*This rubric is used for grading*", ""])
    for criterion in assignment.rubric:
        lines.append(f"### {criterion.description} ({_format_number(criterion.points)} points)")
        if criterion.long_description:
            lines.append(criterion.long_description)
        lines.append("")
    return lines


def _build_special_requirements(assignment: Assignment) -> List[str]:
    requirements = []
    if assignment.anonymize_students:
        requirements.append("Anonymous Grading Enabled")
    if assignment.require_lockdown_browser:
        requirements.append("Lockdown Browser Required")
    if assignment.annotatable_attachment_id:
        requirements.append("Annotation Required")
    if not requirements:
        return []
    return ["", "## Special Requirements", ""] + [f"- {item}" for item in requirements]


def _build_access_restrictions(assignment: Assignment) -> List[str]:
    if not assignment.locked_for_user:
        return []
    explanation = assignment.lock_explanation or "This assignment is currently locked."
    return ["", "## Access Restrictions", "", explanation]


def build_assignment_report(
    assignment: Assignment, course_id: Identifier, format_type: str = "markdown"
) -> str:
    """Markdown report for one assignment; optional sections only when set."""
    if format_type not in FORMAT_TYPES:
        raise ValueError(f"format_type must be one of {', '.join(FORMAT_TYPES)}")

    visibility = " (Only visible to specific students)" if assignment.only_visible_to_overrides else ""
    status = "Published" if assignment.published else "Unpublished"

    details = [
        f"# {assignment.name}",
        "",
        f"**Course ID:** {course_id}",
        f"**Assignment ID:** {assignment.id}",
        f"**Due Date:** {format_date(assignment.due_at)}",
        f"**Points Possible:** {_format_number(assignment.points_possible)}",
        f"**Status:** {status}{visibility}",
        "",
        "## Submission Requirements",
    ]
    details.extend(_build_requirements(assignment))
    details.extend(_build_rubric(assignment))
    details.extend(_build_special_requirements(assignment))
    details.extend(_build_access_restrictions(assignment))
    details.extend(["", "## Description", "", _render_description(assignment, format_type)])

    links = extract_links(assignment.description)
    if links:
        details.extend(["", "## Required Materials and Links", ""])
        details.extend(f"- [{link.text}]({link.href})" for link in links)

    return "\n".join(details)


def get_assignment(
    client: CanvasClient,
    course_id: Identifier,
    assignment_id: Identifier,
    format_type: str = "markdown",
) -> ToolResult:
    """Detailed report for a single assignment."""
    try:
        assignment = client.get_assignment(course_id, assignment_id)
        return ToolResult(text=build_assignment_report(assignment, course_id, format_type))
    except Exception as exc:  # noqa: BLE001
        return _failure("Failed to fetch assignment details: ", exc)


# ---------------------------------------------------------------------------
# Resource
# ---------------------------------------------------------------------------


def assignment_content(
    client: CanvasClient, course_id: Identifier, assignment_id: Identifier
) -> str:
    """Markdown body of the ``canvas://courses/{id}/assignments/{id}`` resource.

    Raises:
        CanvasError: the assignment could not be fetched.
    """
    try:
        assignment = client.get_assignment(course_id, assignment_id)
    except CanvasError as exc:
        raise CanvasError(f"Failed to fetch assignment content: {exc}") from exc

    due = format_date(assignment.due_at) if assignment.due_at else "No due date"
    return "\n".join(
        [
            f"# {assignment.name}",
            "",
            f"**Due Date:** {due}",
            f"**Points Possible:** {_format_number(assignment.points_possible)}",
            f"**Submission Type:** {_submission_types(assignment)}",
            "",
            "## Description",
            "",
            assignment.description or NO_DESCRIPTION,
        ]
    )
