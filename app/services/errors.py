"""Account lifecycle errors. Each carries the HTTP status it maps to and a client-safe message."""


class AccountError(Exception):
    status_code = 400
    default_message = "Request failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AccountError):
    """Missing or malformed input."""
    status_code = 400
    default_message = "All fields are required."


class ConflictError(AccountError):
    """Email already registered."""
    status_code = 400
    default_message = "Email is already in use. Please log in."


class NotFoundError(AccountError):
    status_code = 404
    default_message = "User not found."


class InvalidCodeError(AccountError):
    """Supplied code does not match the pending verification code."""
    status_code = 400
    default_message = "The verification code you entered is incorrect."


class ForbiddenError(AccountError):
    """Unverified account, or invalid/expired token."""
    status_code = 403
    default_message = "Access denied."


class UnauthorizedError(AccountError):
    """Wrong password, or no token presented."""
    status_code = 401
    default_message = "Not authenticated."


class DependencyError(AccountError):
    """Store, notification or asset store failure. Message is generic; details go to the log."""
    status_code = 500
    default_message = "Server error."
