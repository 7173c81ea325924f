"""
Ledger routes. All of them require a session.
"""
import logging

from flask import Blueprint, g, request

from finance_tracker.errors import LedgerCorruptError, NotFoundError
from finance_tracker.responses import Failure, Ok
from finance_tracker.services import get_services
from finance_tracker.session import login_required

logger = logging.getLogger(__name__)

ledger_bp = Blueprint('ledger', __name__)


def _payload():
    return request.get_json(silent=True) or {}


@ledger_bp.route('/get-user-data', methods=['GET'])
@login_required
def get_user_data():
    try:
        ledger = get_services().ledger.get_ledger(g.username)
    except NotFoundError:
        return Failure('User not found!', http_status=404, include_data=True).to_response()
    except LedgerCorruptError as exc:
        logger.error(f"Ledger for '{g.username}' could not be loaded: {exc.message}")
        return Failure(
            'Unable to process request at this time.', http_status=500, include_data=True
        ).to_response()
    return Ok(data=ledger.to_document()).to_response()


@ledger_bp.route('/add-expense', methods=['POST'])
@login_required
def add_expense():
    payload = _payload()
    ledger = get_services().ledger.add_expense(
        g.username, payload.get('expenseName'), payload.get('expenseAmount')
    )
    return Ok(data=ledger.to_document()).to_response()


@ledger_bp.route('/add-income', methods=['POST'])
@login_required
def add_income():
    payload = _payload()
    ledger = get_services().ledger.add_income(
        g.username, payload.get('incomeName'), payload.get('incomeAmount')
    )
    return Ok(data=ledger.to_document()).to_response()


@ledger_bp.route('/delete-expense', methods=['DELETE'])
@login_required
def delete_expense():
    ledger = get_services().ledger.delete_expense(g.username, _payload().get('expenseName'))
    return Ok(data=ledger.to_document()).to_response()


@ledger_bp.route('/delete-income', methods=['DELETE'])
@login_required
def delete_income():
    ledger = get_services().ledger.delete_income(g.username, _payload().get('incomeName'))
    return Ok(data=ledger.to_document()).to_response()
