"""Exceptions raised while talking to the Canvas API."""

from __future__ import annotations


class CanvasError(Exception):
    """Base class for every failure surfaced to a tool handler."""


class ConfigurationError(CanvasError):
    """The API token or host is missing; no request was attempted."""


class ApiError(CanvasError):
    """Canvas answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Canvas API error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class TransportError(CanvasError):
    """The request timed out or the connection failed."""


class DeserializationError(CanvasError):
    """The response body was not valid JSON."""
