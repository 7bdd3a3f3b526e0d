"""Application error taxonomy.

Every error carries the HTTP status and the message that is safe to show to
the caller. Handlers in ``main`` render them into the response envelope.
"""


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    message: str = "Server error. Please try again."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = 422
    message = "The given data was invalid."

    def __init__(self, errors: dict[str, list[str]], message: str | None = None) -> None:
        self.errors = errors
        super().__init__(message)


class Unauthenticated(AppError):
    status_code = 401
    message = "Unauthenticated"


class InvalidCredentials(AppError):
    status_code = 401
    message = "Invalid credentials"


class AlreadyVerified(AppError):
    status_code = 400
    message = "Email already verified"


class InvalidLink(AppError):
    status_code = 403
    message = "Invalid verification link"


class InvalidSignature(AppError):
    status_code = 403
    message = "Invalid signature"


class NotFound(AppError):
    status_code = 404
    message = "Resource not found"


class PersistenceError(AppError):
    status_code = 500


class StorageError(AppError):
    status_code = 500
