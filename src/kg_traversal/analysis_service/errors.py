from __future__ import annotations


class AnalysisError(Exception):
    """Base error rendered as `{"error": message}` with `status_code`.

    Raised bare, it is the generic 500 returned for unexpected failures; the
    underlying exception is only logged.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(AnalysisError):
    status_code = 401
    default_message = "Unauthorized"


class RequestValidationFailed(AnalysisError):
    status_code = 400
    default_message = "Bad request"
