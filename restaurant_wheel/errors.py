"""Exceptions raised by the service layer.

Blueprints turn these into ``{"error": message}`` responses using ``status_code``.
"""


class WheelError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WheelError):
    """Missing or malformed input."""


class StateError(WheelError):
    """The restaurant is not in the state an operation requires."""


class NotFoundError(WheelError):
    status_code = 404


class ForbiddenError(WheelError):
    status_code = 403
