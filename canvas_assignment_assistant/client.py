"""Authenticated access to the Canvas REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from .config import Settings
from .errors import ApiError, ConfigurationError, DeserializationError, TransportError
from .models import Assignment, Course, DashboardCard, User

LOGGER = logging.getLogger(__name__)

ASSIGNMENTS_PAGE_SIZE = 100

Identifier = Union[int, str]


class CanvasClient:
    """Thin wrapper around ``requests`` that speaks to ``/api/v1``."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def base_url(self) -> str:
        if not self.settings.api_host:
            raise ConfigurationError(
                "Canvas domain not set. Please check CANVAS_DOMAIN environment variable."
            )
        return f"https://{self.settings.api_host}/api/v1"

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Call ``path`` and return the decoded JSON body.

        Raises:
            ConfigurationError: token or host missing; nothing is sent.
            ApiError: Canvas answered with a non-2xx status.
            TransportError: timeout or connection failure.
            DeserializationError: the body was not JSON.
        """
        if not self.settings.api_token:
            raise ConfigurationError(
                "Canvas API token not set. Please check CANVAS_API_TOKEN environment variable."
            )

        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self.settings.api_token}",
            "Content-Type": "application/json",
        }

        LOGGER.debug("%s %s params=%s", method, url, params)
        try:
            response = requests.request(
                method,
                url,
                headers=headers,
                params=params,
                json=body,
                timeout=self.settings.request_timeout,
            )
        except requests.Timeout as exc:
            raise TransportError(
                f"Request to {path} timed out after {self.settings.request_timeout:g}s"
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise DeserializationError(f"Invalid JSON in response from {path}") from exc

    def _request_list(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        data = self.request(path, params=params)
        if not isinstance(data, list):
            raise DeserializationError(f"Expected a JSON array from {path}")
        return data

    def get_current_user(self) -> User:
        return User.from_api(self.request("/users/self"))

    def list_courses(self, state: str = "active", include_term: bool = False) -> List[Course]:
        params: Dict[str, Any] = {"enrollment_state": state}
        if include_term:
            params["include[]"] = "term"
        return [Course.from_api(item) for item in self._request_list("/courses", params)]

    def get_course(self, course_id: Identifier) -> Course:
        return Course.from_api(self.request(f"/courses/{course_id}"))

    def list_assignments(self, course_id: Identifier) -> List[Assignment]:
        """One page of a course's assignments, ordered by due date."""
        params = {
            "per_page": ASSIGNMENTS_PAGE_SIZE,
            "order_by": "due_at",
            "include[]": "submission",
        }
        path = f"/courses/{course_id}/assignments"
        return [Assignment.from_api(item) for item in self._request_list(path, params)]

    def get_assignment(self, course_id: Identifier, assignment_id: Identifier) -> Assignment:
        return Assignment.from_api(
            self.request(f"/courses/{course_id}/assignments/{assignment_id}")
        )

    def list_dashboard_cards(self) -> List[DashboardCard]:
        return [
            DashboardCard.from_api(item)
            for item in self._request_list("/dashboard/dashboard_cards")
        ]
