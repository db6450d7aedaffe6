"""Search assignments across every course the user is enrolled in."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .client import CanvasClient, Identifier
from .dates import is_date_in_range, parse_date
from .html_render import to_plain_text
from .models import Assignment, Course, SearchResult

LOGGER = logging.getLogger(__name__)

WILDCARD = "*"


@dataclass(frozen=True)
class CourseFailure:
    """A course whose assignments could not be fetched."""

    course_id: int
    message: str


@dataclass
class SearchOutcome:
    courses: List[Course] = field(default_factory=list)
    results: List[SearchResult] = field(default_factory=list)
    failures: List[CourseFailure] = field(default_factory=list)

    @property
    def no_courses(self) -> bool:
        return not self.courses


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip()


def is_wildcard(query: Optional[str]) -> bool:
    """Empty queries and ``*`` match every assignment."""
    return normalize_query(query) in ("", WILDCARD)


def search_terms(query: str) -> List[str]:
    return [term for term in query.lower().split() if term]


def matches_terms(assignment: Assignment, terms: Sequence[str]) -> bool:
    """True if any term is a substring of the title or the description text."""
    title = assignment.name.lower()
    if any(term in title for term in terms):
        return True
    if not assignment.description:
        return False
    description = to_plain_text(assignment.description).lower()
    return any(term in description for term in terms)


def _due_sort_key(result: SearchResult) -> Tuple[bool, Optional[datetime]]:
    due = parse_date(result.assignment.due_at)
    # Undated (or unparseable) assignments go last; sorted() keeps their order.
    return (due is None, due)


def sort_by_due_date(results: Sequence[SearchResult]) -> List[SearchResult]:
    return sorted(results, key=_due_sort_key)


def _resolve_courses(
    client: CanvasClient, include_completed: bool, course_id: Optional[Identifier]
) -> List[Course]:
    if course_id is not None and course_id != "":
        return [client.get_course(course_id)]
    state = "all" if include_completed else "active"
    return client.list_courses(state)


def filter_assignments(
    assignments: Sequence[Assignment],
    query: Optional[str] = None,
    due_before: Optional[str] = None,
    due_after: Optional[str] = None,
) -> List[Assignment]:
    """Apply the text filter and the inclusive due-date range."""
    normalized = normalize_query(query)
    terms = [] if is_wildcard(normalized) else search_terms(normalized)

    kept: List[Assignment] = []
    for assignment in assignments:
        if terms and not matches_terms(assignment, terms):
            continue
        if not is_date_in_range(assignment.due_at, due_before, due_after):
            LOGGER.debug(
                "Assignment %s: due %s outside range -> skip",
                assignment.id,
                assignment.due_at,
            )
            continue
        kept.append(assignment)
    return kept


def search_assignments(
    client: CanvasClient,
    query: Optional[str] = None,
    due_before: Optional[str] = None,
    due_after: Optional[str] = None,
    include_completed: bool = False,
    course_id: Optional[Identifier] = None,
) -> SearchOutcome:
    """Search one course, or every active (or all) course, for assignments.

    A course whose assignments cannot be fetched is logged and recorded in
    ``SearchOutcome.failures``; the other courses are still searched. Errors
    while resolving the course list itself propagate.

    Returns:
        Outcome with results sorted by due date, undated ones last.
    """
    outcome = SearchOutcome(courses=_resolve_courses(client, include_completed, course_id))

    collected: List[SearchResult] = []
    for course in outcome.courses:
        try:
            assignments = client.list_assignments(course.id)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Error searching in course %s: %s", course.id, exc)
            outcome.failures.append(CourseFailure(course_id=course.id, message=str(exc)))
            continue

        LOGGER.debug("Found %d assignments in course %s", len(assignments), course.id)
        for assignment in filter_assignments(assignments, query, due_before, due_after):
            collected.append(
                SearchResult(assignment=assignment, course_name=course.name, course_id=course.id)
            )

    outcome.results = sort_by_due_date(collected)

    LOGGER.info(
        "Searched %d courses (%d failed), %d assignments matched",
        len(outcome.courses),
        len(outcome.failures),
        len(outcome.results),
    )
    return outcome
