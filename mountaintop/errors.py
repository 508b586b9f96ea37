"""
Error types surfaced by the scoring, leaderboard and pick services.

Each error carries the HTTP status and machine-readable code the API layer
responds with, so routes can simply let them propagate.
"""


class PickemError(Exception):
    """Base class for all application errors"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self):
        data = {"error": self.message, "code": self.code}
        if self.details:
            data["details"] = self.details
        return data


class NotFoundError(PickemError):
    status_code = 404
    code = "NOT_FOUND"


class ValidationError(PickemError):
    """Malformed or missing input, rejected before any mutation"""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message="Validation failed", details=None):
        super().__init__(message, details)


class ForbiddenError(PickemError):
    status_code = 403
    code = "FORBIDDEN"


class PersistenceError(PickemError):
    """A database write failed; the enclosing unit of work was rolled back"""

    status_code = 500
    code = "PERSISTENCE_ERROR"


class ConflictError(PickemError):
    status_code = 409
    code = "CONFLICT"
