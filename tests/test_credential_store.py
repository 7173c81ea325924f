from __future__ import annotations

import pytest

from conftest import refresh_token_stored

from finance_tracker.errors import ConflictError, LedgerCorruptError, NotFoundError
from finance_tracker.models import User
from finance_tracker.schemas import Entry, Ledger


def test_create_and_get_normalizes_username(services):
    services.store.create("Alice", "hash")

    stored = services.store.get("ALICE")

    assert stored.username == "alice"
    assert stored.password_hash == "hash"
    assert stored.ledger == Ledger.empty()
    assert stored.version == 0


def test_create_duplicate(services):
    services.store.create("alice", "hash")

    with pytest.raises(ConflictError):
        services.store.create("ALICE", "other")


def test_get_unknown_user(services):
    assert services.store.get("nobody") is None
    assert services.store.get("") is None
    assert not services.store.exists("nobody")


def test_set_ledger_bumps_version(services):
    services.store.create("alice", "hash")
    ledger = Ledger(incomes=[Entry(name="Salary", amount=10)], expenses=[])

    assert services.store.set_ledger("Alice", ledger, expected_version=0)

    stored = services.store.get("alice")
    assert stored.ledger == ledger
    assert stored.version == 1


def test_set_ledger_with_stale_version(services):
    services.store.create("alice", "hash")
    services.store.set_ledger("alice", Ledger.empty())

    assert services.store.set_ledger("alice", Ledger.empty(), expected_version=0) is False


def test_set_ledger_for_unknown_user(services):
    with pytest.raises(NotFoundError):
        services.store.set_ledger("nobody", Ledger.empty())


def test_delete_removes_user_and_tokens(services):
    services.store.create("alice", "hash")
    refresh = services.tokens.issue_refresh_token("alice")

    assert services.store.delete("Alice")
    assert not services.store.exists("alice")
    assert not refresh_token_stored(services, refresh)
    assert services.store.delete("alice") is False


def test_malformed_stored_ledger(services):
    with services.database.session() as session:
        session.add(User(username="alice", password_hash="hash", data={"expenses": []}, version=0))

    with pytest.raises(LedgerCorruptError):
        services.store.get("alice")
