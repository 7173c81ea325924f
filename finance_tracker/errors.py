"""
Domain errors raised by the service layer and rendered by the route layer.
"""


class FinanceTrackerError(Exception):
    """Base error. `message` is safe to show to clients."""
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceTrackerError):
    """Bad username, password, entry name or amount."""
    http_status = 400


class NotFoundError(FinanceTrackerError):
    """Entry or user does not exist."""
    http_status = 404


class SizeLimitError(FinanceTrackerError):
    """Ledger would exceed the configured size cap."""
    http_status = 413


class ConflictError(FinanceTrackerError):
    """Duplicate username at signup."""
    http_status = 409


class ConcurrentUpdateError(ConflictError):
    """Ledger kept changing underneath a mutation."""
    http_status = 409


class LedgerCorruptError(FinanceTrackerError):
    """Stored ledger document failed validation."""
    http_status = 500


class AuthError(FinanceTrackerError):
    """Base token error. Handled by redirecting to the login page."""
    http_status = 401


class TokenExpiredError(AuthError):
    """Access token signature is valid but it has expired."""


class TokenInvalidError(AuthError):
    """Token is malformed, has a bad signature or the wrong type."""


class TokenRevokedError(AuthError):
    """Refresh token is not present in the token store."""
