"""
Health check and dashboard routes (no HTML rendering).
"""
from flask import Blueprint, g, jsonify, redirect, url_for

from finance_tracker.responses import Ok
from finance_tracker.services import get_services
from finance_tracker.session import login_required

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """Health check endpoint for uptime monitoring."""
    return jsonify({
        'status': 'healthy',
        'service': 'finance-tracker'
    }), 200


@main_bp.route('/')
def index():
    return redirect(url_for('main.dashboard'))


@main_bp.route('/dashboard')
@login_required
def dashboard():
    """Running totals for the signed-in user."""
    ledger = get_services().ledger.get_ledger(g.username)
    return Ok(data={
        'username': g.username,
        'totals': ledger.totals(),
    }).to_response()
