"""
Per-request session gate.

Evaluated on every request, with no server-side session cache:
  1. no access cookie            -> unauthenticated
  2. access token verifies       -> authenticated as its user
  3. access token bad or expired -> refresh token must be in the store;
                                    if so a new access token is minted
"""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import after_this_request, current_app, g, redirect, request, url_for

from finance_tracker.errors import AuthError
from finance_tracker.services import get_services

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    username: str
    # Set when the access token was re-issued from the refresh token.
    new_access_token: Optional[str] = None


def resolve_session() -> Optional[SessionState]:
    config = current_app.config
    access_token = request.cookies.get(config["ACCESS_COOKIE_NAME"])
    refresh_token = request.cookies.get(config["REFRESH_COOKIE_NAME"])

    if not access_token:
        return None

    tokens = get_services().tokens
    try:
        claims = tokens.verify_access(access_token)
        return SessionState(username=claims.username)
    except AuthError as exc:
        logger.info(f"Session: access token rejected ({type(exc).__name__}), trying refresh")

    try:
        username, new_access_token = tokens.rotate_on_expiry(refresh_token)
    except AuthError as exc:
        logger.info(f"Session: refresh rejected ({type(exc).__name__})")
        return None
    return SessionState(username=username, new_access_token=new_access_token)


def set_access_cookie(response, token: str, max_age: Optional[int] = None):
    config = current_app.config
    response.set_cookie(
        config["ACCESS_COOKIE_NAME"],
        token,
        max_age=max_age,
        httponly=True,
        secure=config["COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


def set_refresh_cookie(response, token: str):
    config = current_app.config
    response.set_cookie(
        config["REFRESH_COOKIE_NAME"],
        token,
        httponly=True,
        secure=config["COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


def clear_session_cookies(response):
    config = current_app.config
    response.delete_cookie(config["ACCESS_COOKIE_NAME"])
    response.delete_cookie(config["REFRESH_COOKIE_NAME"])
    return response


def login_required(view=None, *, refresh_cookie=True):
    """
    Redirect to the login page unless the request carries a valid session.
    The resolved username is bound to `g.username`.

    With `refresh_cookie=False` a rotated access token is not written back
    to the client (used by logout, which deletes the session cookies).
    """
    if view is None:
        return lambda v: login_required(v, refresh_cookie=refresh_cookie)

    @wraps(view)
    def wrapped(*args, **kwargs):
        state = resolve_session()
        if state is None:
            return redirect(url_for("auth.login_page"))

        g.username = state.username
        if state.new_access_token and refresh_cookie:
            token = state.new_access_token

            @after_this_request
            def refresh_access_cookie(response):
                return set_access_cookie(response, token)

        return view(*args, **kwargs)

    return wrapped
