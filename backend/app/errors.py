"""
Domain errors raised by the lifecycle engine and the service layer.

main.py maps each class to an HTTP status; nothing here knows about HTTP.
"""


class TimesheetAppError(Exception):
    """Base class for every error the service layer reports to callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TimesheetAppError):
    """Malformed input: hours out of range, empty required text, inactive project."""

    status_code = 400


class AuthorizationError(TimesheetAppError):
    """The actor's role or ownership does not allow the requested mutation."""

    status_code = 403


class NotFoundError(TimesheetAppError):
    status_code = 404


class InvalidTransitionError(TimesheetAppError):
    """The requested status change is not reachable from the current status."""

    status_code = 409


class CollaboratorError(TimesheetAppError):
    """A backend store or identity call failed. The reason string is opaque."""

    status_code = 502
