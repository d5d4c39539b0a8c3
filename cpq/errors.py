# cpq/errors.py
"""Error taxonomy shared by the store and the HTTP layer.

Each error carries the HTTP status it maps to; ``create_app`` turns any
``ApiError`` raised from a view into ``{"ok": false, "error": message}``.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(ApiError):
    """Malformed, missing or out-of-range request field."""
    status_code = 400


class NotFound(ApiError):
    """Referenced customer or quote does not exist."""
    status_code = 404


class Internal(ApiError):
    """Storage engine or unexpected failure."""
    status_code = 500
