"""
Persistence wrapper for user credentials and ledger documents.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from finance_tracker.database import Database
from finance_tracker.errors import ConflictError, LedgerCorruptError, NotFoundError
from finance_tracker.models import RefreshToken, User
from finance_tracker.schemas import Ledger
from finance_tracker.utils.validators import normalize_username

logger = logging.getLogger(__name__)


@dataclass
class StoredUser:
    username: str
    password_hash: str
    ledger: Ledger
    version: int


class CredentialStore:
    """
    Usernames are lowercased before every lookup and write, so they act
    as case-insensitive identifiers.
    """

    def __init__(self, database: Database):
        self.database = database

    def create(self, username: str, password_hash: str, ledger: Optional[Ledger] = None) -> None:
        normalized = self._normalize(username)
        ledger = ledger or Ledger.empty()
        try:
            with self.database.session() as session:
                session.add(User(
                    username=normalized,
                    password_hash=password_hash,
                    data=ledger.to_document(),
                    version=0,
                ))
        except IntegrityError:
            raise ConflictError("Username has already been taken.")
        logger.info(f"CredentialStore: created user '{normalized}'")

    def get(self, username: str) -> Optional[StoredUser]:
        normalized = normalize_username(username)
        if not normalized:
            return None
        with self.database.session() as session:
            row = session.execute(
                select(User).where(User.username == normalized)
            ).scalar_one_or_none()
            if row is None:
                return None
            return StoredUser(
                username=row.username,
                password_hash=row.password_hash,
                ledger=self._load_ledger(row),
                version=row.version,
            )

    def exists(self, username: str) -> bool:
        normalized = normalize_username(username)
        if not normalized:
            return False
        with self.database.session() as session:
            row = session.execute(
                select(User.id).where(User.username == normalized)
            ).first()
            return row is not None

    def set_ledger(self, username: str, ledger: Ledger, expected_version: Optional[int] = None) -> bool:
        """
        Replace the whole ledger document.

        With `expected_version` the write only happens if nobody else wrote
        since that version was read; returns False when the write lost.
        """
        normalized = self._normalize(username)
        stmt = update(User).where(User.username == normalized)
        if expected_version is not None:
            stmt = stmt.where(User.version == expected_version)
        stmt = stmt.values(data=ledger.to_document(), version=User.version + 1)

        with self.database.session() as session:
            result = session.execute(stmt)
            if result.rowcount > 0:
                return True

        if expected_version is None or not self.exists(normalized):
            raise NotFoundError("User not found!")
        return False

    def delete(self, username: str) -> bool:
        """Remove a user and all of their refresh tokens."""
        normalized = self._normalize(username)
        with self.database.session() as session:
            session.execute(delete(RefreshToken).where(RefreshToken.username == normalized))
            result = session.execute(delete(User).where(User.username == normalized))
            deleted = result.rowcount > 0
        if deleted:
            logger.info(f"CredentialStore: deleted user '{normalized}'")
        return deleted

    # Internal helpers -------------------------------------------------

    def _normalize(self, username: str) -> str:
        normalized = normalize_username(username)
        if not normalized:
            raise NotFoundError("User not found!")
        return normalized

    def _load_ledger(self, row: User) -> Ledger:
        try:
            return Ledger.model_validate(row.data)
        except PydanticValidationError as exc:
            logger.error(f"CredentialStore: stored ledger for '{row.username}' is invalid: {exc}")
            raise LedgerCorruptError("User data does not exist or is malformed")
