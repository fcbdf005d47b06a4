"""Error taxonomy shared by the store, the repositories and the API."""
from __future__ import annotations


class TaskSaverError(Exception):
    """Base class; ``status_code`` is the HTTP status the API reports."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskSaverError):
    """Missing or malformed field."""

    status_code = 400


class AuthenticationError(TaskSaverError):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = 401


class NotFoundError(TaskSaverError):
    """Unknown id (or an id owned by someone else)."""

    status_code = 404


class StoreUnavailableError(TaskSaverError):
    """The document store could not be reached."""

    status_code = 503
