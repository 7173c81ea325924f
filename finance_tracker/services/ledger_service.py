"""
Ledger document mutations.

Every operation validates its input, loads the current ledger, applies the
change to a copy, enforces the size cap and writes the whole document back.
Writes are conditional on the version that was read; if another request
wrote in between, the change is re-applied on the fresh ledger.
"""
from __future__ import annotations

import json
import logging
from typing import Callable, Optional, Tuple

from finance_tracker.errors import ConcurrentUpdateError, NotFoundError, SizeLimitError
from finance_tracker.schemas import Entry, EntryKind, Ledger
from finance_tracker.services.credential_store import CredentialStore
from finance_tracker.utils.validators import parse_amount, validate_entry_name, validate_username

logger = logging.getLogger(__name__)

LABELS = {"expenses": "Expense", "incomes": "Income"}

# A mutation takes the current ledger and returns (new_ledger, changed, delta).
Mutation = Callable[[Ledger], Tuple[Ledger, bool, Optional[dict]]]


def add_entry(ledger: Ledger, kind: EntryKind, name: str, amount: float) -> Tuple[Ledger, bool]:
    """
    Add or update an entry by case-insensitive name.

    Returns (ledger, changed). A matching entry with the same amount is a
    no-op; a matching entry with a different amount is updated in place and
    keeps its original spelling and position.
    """
    updated = ledger.model_copy(deep=True)
    entries = updated.entries(kind)
    existing = updated.find(kind, name)
    if existing is not None:
        if existing.amount == amount:
            return ledger, False
        existing.amount = amount
        return updated, True
    entries.append(Entry(name=name, amount=amount))
    return updated, True


def delete_entry(ledger: Ledger, kind: EntryKind, name: str) -> Ledger:
    """
    Remove every entry whose name matches case-insensitively.

    Raises NotFoundError if nothing matched.
    """
    updated = ledger.model_copy(deep=True)
    remaining = [entry for entry in updated.entries(kind) if not entry.matches(name)]
    if len(remaining) == len(updated.entries(kind)):
        raise NotFoundError(f'{LABELS[kind]} with the name "{name}" not found.')
    setattr(updated, kind, remaining)
    return updated


def check_size(proposed: Ledger, delta: Optional[dict], limit: int) -> None:
    """
    Reject when proposed-document bytes plus delta bytes exceed `limit`.

    The delta is already part of the proposed document, so this overestimates.
    """
    size = proposed.byte_size()
    if delta is not None:
        size += len(json.dumps(delta, separators=(",", ":")).encode("utf-8"))
    if size > limit:
        raise SizeLimitError("Data size limit exceeded")


class LedgerService:
    def __init__(self, store: CredentialStore, size_limit: int = 1024 * 1024, max_retries: int = 3):
        self.store = store
        self.size_limit = size_limit
        self.max_retries = max(1, max_retries)

    def get_ledger(self, username: str) -> Ledger:
        normalized = validate_username(username)
        user = self.store.get(normalized)
        if user is None:
            raise NotFoundError("User not found!")
        return user.ledger

    def add_entry(self, username: str, kind: EntryKind, name, amount) -> Ledger:
        label = LABELS[kind]
        normalized = validate_username(username)
        name = validate_entry_name(name, label)
        amount = parse_amount(amount, label)

        def mutation(ledger: Ledger):
            updated, changed = add_entry(ledger, kind, name, amount)
            return updated, changed, {"name": name, "amount": amount}

        ledger = self._apply(normalized, mutation)
        logger.info(f"LedgerService: {label.lower()} '{name}' set to {amount} for '{normalized}'")
        return ledger

    def delete_entry(self, username: str, kind: EntryKind, name) -> Ledger:
        label = LABELS[kind]
        normalized = validate_username(username)
        name = validate_entry_name(name, label)

        def mutation(ledger: Ledger):
            return delete_entry(ledger, kind, name), True, None

        ledger = self._apply(normalized, mutation)
        logger.info(f"LedgerService: {label.lower()} '{name}' deleted for '{normalized}'")
        return ledger

    def add_expense(self, username: str, name, amount) -> Ledger:
        return self.add_entry(username, "expenses", name, amount)

    def add_income(self, username: str, name, amount) -> Ledger:
        return self.add_entry(username, "incomes", name, amount)

    def delete_expense(self, username: str, name) -> Ledger:
        return self.delete_entry(username, "expenses", name)

    def delete_income(self, username: str, name) -> Ledger:
        return self.delete_entry(username, "incomes", name)

    # Internal helpers -------------------------------------------------

    def _apply(self, username: str, mutation: Mutation) -> Ledger:
        for attempt in range(1, self.max_retries + 1):
            user = self.store.get(username)
            if user is None:
                raise NotFoundError("User not found!")

            updated, changed, delta = mutation(user.ledger)
            if not changed:
                return user.ledger

            check_size(updated, delta, self.size_limit)

            if self.store.set_ledger(username, updated, expected_version=user.version):
                return updated

            logger.warning(
                f"LedgerService: concurrent update for '{username}' "
                f"(attempt {attempt}/{self.max_retries}), retrying"
            )

        raise ConcurrentUpdateError("Your data changed while saving. Please try again.")
