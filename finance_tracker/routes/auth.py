"""
Signup, login and logout routes.
"""
from datetime import datetime, timezone

from flask import Blueprint, g, redirect, request, url_for

from finance_tracker.responses import Ok
from finance_tracker.services import get_services
from finance_tracker.session import (
    clear_session_cookies,
    login_required,
    resolve_session,
    set_access_cookie,
    set_refresh_cookie,
)

auth_bp = Blueprint('auth', __name__)

FORM_FIELDS = ['username', 'password']


def _redirect_if_authenticated():
    """Send already-authenticated visitors straight to the dashboard."""
    state = resolve_session()
    if state is None:
        return None
    response = redirect(url_for('main.dashboard'))
    if state.new_access_token:
        set_access_cookie(response, state.new_access_token)
    return response


@auth_bp.route('/signup', methods=['GET'])
def signup_page():
    """Describe the signup form, or redirect if a session already exists."""
    return _redirect_if_authenticated() or Ok(
        data={'fields': FORM_FIELDS},
        message='Sign up with a username and password.',
    ).to_response()


@auth_bp.route('/signup', methods=['POST'])
def signup():
    payload = request.get_json(silent=True) or {}
    get_services().auth.signup(payload.get('username'), payload.get('password'))
    return Ok(message='Success!', include_data=False).to_response()


@auth_bp.route('/login', methods=['GET'])
def login_page():
    """Describe the login form, or redirect if a session already exists."""
    return _redirect_if_authenticated() or Ok(
        data={'fields': FORM_FIELDS},
        message='Log in with your username and password.',
    ).to_response()


@auth_bp.route('/login', methods=['POST'])
def login():
    payload = request.get_json(silent=True) or {}
    pair = get_services().auth.login(payload.get('username'), payload.get('password'))

    response, status_code = Ok(message='Login successful.', include_data=False).to_response()
    set_refresh_cookie(response, pair.refresh_token)
    max_age = int((pair.access_expires_at - datetime.now(timezone.utc)).total_seconds())
    set_access_cookie(response, pair.access_token, max_age=max(max_age, 0))
    return response, status_code


@auth_bp.route('/logout', methods=['GET'])
@login_required(refresh_cookie=False)
def logout():
    get_services().auth.logout(g.username)
    response = redirect(url_for('auth.login_page'))
    return clear_session_cookies(response)
