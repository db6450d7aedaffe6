from canvas_assignment_assistant.errors import ApiError, TransportError
from canvas_assignment_assistant.models import Assignment, Course
from canvas_assignment_assistant.search import (
    filter_assignments,
    is_wildcard,
    search_assignments,
)


class FakeClient:
    def __init__(self, courses, assignments, failing=None):
        self.courses = courses
        self.assignments = assignments
        self.failing = failing or {}
        self.states = []
        self.fetched = []

    def list_courses(self, state="active", include_term=False):
        self.states.append(state)
        return list(self.courses)

    def get_course(self, course_id):
        for course in self.courses:
            if str(course.id) == str(course_id):
                return course
        raise ApiError(404, "course not found")

    def list_assignments(self, course_id):
        self.fetched.append(course_id)
        if course_id in self.failing:
            raise self.failing[course_id]
        return list(self.assignments.get(course_id, []))


def assignment(id, name, due_at=None, description=None):
    return Assignment(id=id, name=name, due_at=due_at, description=description)


ALGORITHMS = Course(id=1, name="Algorithms")
DATABASES = Course(id=2, name="Databases")


def test_wildcard_detection():
    assert is_wildcard(None)
    assert is_wildcard("")
    assert is_wildcard("  * ")
    assert not is_wildcard("essay")


def test_one_failing_course_does_not_abort_search():
    client = FakeClient(
        [ALGORITHMS, DATABASES],
        {1: [assignment(10, "Sorting lab")]},
        failing={2: ApiError(500, "boom")},
    )

    outcome = search_assignments(client, query="lab")

    assert [(r.course_id, r.course_name, r.assignment.id) for r in outcome.results] == [
        (1, "Algorithms", 10)
    ]
    assert [f.course_id for f in outcome.failures] == [2]
    assert "500" in outcome.failures[0].message
    assert client.fetched == [1, 2]


def test_timeout_in_first_course_still_searches_the_rest():
    client = FakeClient(
        [ALGORITHMS, DATABASES],
        {2: [assignment(20, "Schema design")]},
        failing={1: TransportError("timed out")},
    )

    outcome = search_assignments(client)

    assert [r.assignment.id for r in outcome.results] == [20]


def test_malformed_course_payload_is_recorded_as_failure():
    client = FakeClient(
        [ALGORITHMS, DATABASES],
        {1: [assignment(10, "Sorting lab")]},
        failing={2: KeyError("id")},
    )

    outcome = search_assignments(client, query="lab")

    assert [r.assignment.id for r in outcome.results] == [10]
    assert [f.course_id for f in outcome.failures] == [2]
    assert "id" in outcome.failures[0].message


def test_results_sorted_by_due_date_with_undated_last():
    client = FakeClient(
        [ALGORITHMS],
        {
            1: [
                assignment(1, "March", "2024-03-01T12:00:00Z"),
                assignment(2, "Someday"),
                assignment(3, "January", "2024-01-01T12:00:00Z"),
            ]
        },
    )

    outcome = search_assignments(client, query="*")

    assert [r.assignment.id for r in outcome.results] == [3, 1, 2]


def test_sort_merges_courses_and_is_stable():
    client = FakeClient(
        [ALGORITHMS, DATABASES],
        {
            1: [assignment(1, "Undated A"), assignment(2, "Late", "2024-05-01T12:00:00Z")],
            2: [assignment(3, "Early", "2024-02-01T12:00:00Z"), assignment(4, "Undated B")],
        },
    )

    outcome = search_assignments(client)

    assert [r.assignment.id for r in outcome.results] == [3, 2, 1, 4]


def test_wildcard_queries_skip_text_filtering():
    items = [assignment(1, "Essay"), assignment(2, "Quiz")]

    for query in ("", "*", None):
        client = FakeClient([ALGORITHMS], {1: items})
        outcome = search_assignments(client, query=query)
        assert [r.assignment.id for r in outcome.results] == [1, 2]


def test_any_term_matches_title_or_description():
    items = [
        assignment(1, "Lab 1"),
        assignment(2, "Reading", description="<p>Short <b>quiz</b> at the end</p>"),
        assignment(3, "Essay", description="<p>Nothing relevant</p>"),
    ]

    kept = filter_assignments(items, query="QUIZ lab")

    assert [a.id for a in kept] == [1, 2]


def test_date_range_keeps_undated_assignments():
    items = [
        assignment(1, "Old", "2024-01-01T12:00:00Z"),
        assignment(2, "Current", "2024-02-15T12:00:00Z"),
        assignment(3, "Undated"),
        assignment(4, "Broken", "whenever"),
    ]

    kept = filter_assignments(items, due_after="2024-02-01", due_before="2024-02-28")

    assert [a.id for a in kept] == [2, 3, 4]


def test_course_state_follows_include_completed():
    client = FakeClient([ALGORITHMS], {})

    search_assignments(client)
    search_assignments(client, include_completed=True)

    assert client.states == ["active", "all"]


def test_course_id_restricts_search():
    client = FakeClient(
        [ALGORITHMS, DATABASES],
        {1: [assignment(1, "Lab")], 2: [assignment(2, "Lab")]},
    )

    outcome = search_assignments(client, course_id="2")

    assert client.states == []
    assert client.fetched == [2]
    assert [r.course_name for r in outcome.results] == ["Databases"]


def test_no_courses_is_distinguished_from_no_matches():
    empty = search_assignments(FakeClient([], {}))
    unmatched = search_assignments(FakeClient([ALGORITHMS], {1: [assignment(1, "Lab")]}), query="essay")

    assert empty.no_courses
    assert not unmatched.no_courses
    assert unmatched.results == []
