"""Data models for Canvas API records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

Number = Union[int, float]


def _term_name(term: Any) -> Optional[str]:
    if isinstance(term, Mapping):
        return term.get("name") or None
    if isinstance(term, str):
        return term or None
    return None


@dataclass(frozen=True)
class User:
    """The account the API token belongs to."""

    id: int
    name: str
    email: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            email=data.get("email") or data.get("primary_email"),
        )


@dataclass(frozen=True)
class Course:
    """A course the user is enrolled in."""

    id: int
    name: str
    term: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Course":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            term=_term_name(data.get("term")),
        )


@dataclass(frozen=True)
class DashboardCard:
    """A course tile from the user's dashboard."""

    id: int
    short_name: str
    term: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "DashboardCard":
        return cls(
            id=data["id"],
            short_name=data.get("shortName") or data.get("originalName") or "",
            term=_term_name(data.get("term")),
        )


@dataclass(frozen=True)
class RubricCriterion:
    id: str
    points: Optional[Number]
    description: str
    long_description: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "RubricCriterion":
        return cls(
            id=str(data.get("id", "")),
            points=data.get("points"),
            description=data.get("description") or "",
            long_description=data.get("long_description") or None,
        )


@dataclass(frozen=True)
class ExternalTool:
    url: str
    new_tab: bool = False


@dataclass(frozen=True)
class Link:
    """An anchor found in an HTML fragment."""

    text: str
    href: str


@dataclass(frozen=True)
class Assignment:
    """A single assignment as returned by the assignments endpoints.

    ``allowed_attempts`` keeps Canvas' convention: ``-1`` means unlimited,
    ``None`` means the field was never set.
    """

    id: int
    name: str
    description: Optional[str] = None
    due_at: Optional[str] = None
    points_possible: Optional[Number] = None
    submission_types: Tuple[str, ...] = ()
    allowed_extensions: Optional[Tuple[str, ...]] = None
    allowed_attempts: Optional[int] = None
    grading_type: str = ""
    lock_at: Optional[str] = None
    unlock_at: Optional[str] = None
    has_group_assignment: bool = False
    group_category_id: Optional[int] = None
    peer_reviews: bool = False
    word_count: Optional[int] = None
    external_tool: Optional[ExternalTool] = None
    rubric: Optional[Tuple[RubricCriterion, ...]] = None
    use_rubric_for_grading: bool = False
    published: bool = True
    only_visible_to_overrides: bool = False
    locked_for_user: bool = False
    lock_explanation: Optional[str] = None
    turnitin_enabled: bool = False
    vericite_enabled: bool = False
    annotatable_attachment_id: Optional[int] = None
    anonymize_students: bool = False
    require_lockdown_browser: bool = False

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Assignment":
        extensions = data.get("allowed_extensions")
        rubric = data.get("rubric")

        tool = None
        tool_attrs = data.get("external_tool_tag_attributes") or {}
        if tool_attrs.get("url"):
            tool = ExternalTool(url=tool_attrs["url"], new_tab=bool(tool_attrs.get("new_tab")))

        return cls(
            id=data["id"],
            name=data.get("name") or "",
            description=data.get("description"),
            due_at=data.get("due_at"),
            points_possible=data.get("points_possible"),
            submission_types=tuple(data.get("submission_types") or ()),
            allowed_extensions=tuple(extensions) if extensions is not None else None,
            allowed_attempts=data.get("allowed_attempts"),
            grading_type=data.get("grading_type") or "",
            lock_at=data.get("lock_at"),
            unlock_at=data.get("unlock_at"),
            has_group_assignment=bool(data.get("has_group_assignment")),
            group_category_id=data.get("group_category_id"),
            peer_reviews=bool(data.get("peer_reviews")),
            word_count=data.get("word_count"),
            external_tool=tool,
            rubric=(
                tuple(RubricCriterion.from_api(item) for item in rubric)
                if rubric is not None
                else None
            ),
            use_rubric_for_grading=bool(data.get("use_rubric_for_grading")),
            published=bool(data.get("published", True)),
            only_visible_to_overrides=bool(data.get("only_visible_to_overrides")),
            locked_for_user=bool(data.get("locked_for_user")),
            lock_explanation=data.get("lock_explanation"),
            turnitin_enabled=bool(data.get("turnitin_enabled")),
            vericite_enabled=bool(data.get("vericite_enabled")),
            annotatable_attachment_id=data.get("annotatable_attachment_id"),
            anonymize_students=bool(data.get("anonymize_students")),
            require_lockdown_browser=bool(data.get("require_lockdown_browser")),
        )


@dataclass(frozen=True)
class SearchResult:
    """An assignment found by a search, tagged with its course."""

    assignment: Assignment
    course_name: str
    course_id: int
