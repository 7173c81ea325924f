"""
Application-wide error handlers.

Domain errors become `{"status": 1, "message": ...}` responses; auth errors
redirect to the login page; anything else is logged and reported generically.
"""
import logging

from flask import redirect, url_for
from werkzeug.exceptions import HTTPException

from finance_tracker.errors import AuthError, FinanceTrackerError
from finance_tracker.responses import Failure

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = 'Unable to process request at this time.'


def handle_auth_error(error: AuthError):
    logger.info(f"Auth error: {error.message}")
    return redirect(url_for('auth.login_page'))


def handle_domain_error(error: FinanceTrackerError):
    if error.http_status >= 500:
        logger.error(f"Domain error: {error.message}")
        return Failure(GENERIC_FAILURE_MESSAGE, http_status=error.http_status).to_response()
    logger.info(f"{type(error).__name__}: {error.message}")
    return Failure(error.message, http_status=error.http_status).to_response()


def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return error
    logger.error(f"Unhandled error: {error}", exc_info=True)
    return Failure(GENERIC_FAILURE_MESSAGE, http_status=500).to_response()


def register_error_handlers(app) -> None:
    app.register_error_handler(AuthError, handle_auth_error)
    app.register_error_handler(FinanceTrackerError, handle_domain_error)
    app.register_error_handler(Exception, handle_unexpected_error)
