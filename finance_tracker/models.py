"""
Database models for user credentials, ledgers and refresh tokens.
"""
from datetime import date

from sqlalchemy import JSON, Column, Date, Integer, String

from finance_tracker.database import Base


class User(Base):
    """
    A registered user. `data` holds the whole ledger document.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Always stored lowercased.
    username = Column(String(64), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    data = Column(JSON, nullable=False)
    # Bumped on every ledger write; used for conditional updates.
    version = Column(Integer, nullable=False, default=0)


class RefreshToken(Base):
    """
    A persisted refresh token. Presence in this table is what makes it valid.
    """

    __tablename__ = "refresh_tokens"

    token = Column(String(512), primary_key=True)
    username = Column(String(64), nullable=False, index=True)
    created = Column(Date, nullable=False, default=date.today)
