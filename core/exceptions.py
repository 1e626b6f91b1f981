"""
Domain errors.

Every error carries the HTTP status it maps to and a message that is safe
to show to the caller.  ``api.middleware.register_exception_handlers``
turns them into ``{"detail": message}`` responses.
"""

from __future__ import annotations


class TaskboardError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskboardError):
    status_code = 400
    default_message = "Invalid request"


class Unauthenticated(TaskboardError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(TaskboardError):
    status_code = 403
    default_message = "Not authorized to modify this task"


class NotFound(TaskboardError):
    status_code = 404
    default_message = "Task not found"


class Conflict(TaskboardError):
    status_code = 409
    default_message = "Resource already exists"


class StorageError(TaskboardError):
    status_code = 500
    default_message = "Storage unavailable, please try again later"
