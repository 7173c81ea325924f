"""
Access/refresh token issuing, verification and rotation.

Access tokens are short-lived JWTs. Refresh tokens carry no expiry: they are
valid exactly as long as a row for them exists in `refresh_tokens`, so store
membership, not the signature, decides whether a session can be renewed.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from sqlalchemy import delete, select

from finance_tracker.database import Database
from finance_tracker.errors import TokenExpiredError, TokenInvalidError, TokenRevokedError
from finance_tracker.models import RefreshToken

ALGORITHM = "HS256"


@dataclass
class TokenPair:
    """Access and refresh token pair"""
    access_token: str
    refresh_token: str
    access_expires_at: datetime


@dataclass
class AccessClaims:
    username: str
    jti: str
    exp: datetime


class TokenService:
    def __init__(
        self,
        database: Database,
        access_secret: str,
        refresh_secret: str,
        access_token_expire_minutes: int = 15,
    ):
        if len(access_secret) < 32 or len(refresh_secret) < 32:
            raise ValueError("Token secrets must be at least 32 characters")

        self.logger = logging.getLogger("finance_tracker.token_service")
        self.database = database
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)

    # Issuing ----------------------------------------------------------

    def issue_access_token(self, username: str, expires_in: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        exp = now + (expires_in if expires_in is not None else self.access_token_expire)
        claims = {
            "username": username.lower(),
            "jti": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "token_type": "access",
        }
        return jwt.encode(claims, self.access_secret, algorithm=ALGORITHM)

    def issue_refresh_token(self, username: str) -> str:
        """Sign a refresh token and persist it. No `exp` claim is encoded."""
        now = datetime.now(timezone.utc)
        claims = {
            "username": username.lower(),
            "jti": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "token_type": "refresh",
        }
        token = jwt.encode(claims, self.refresh_secret, algorithm=ALGORITHM)
        with self.database.session() as session:
            session.add(RefreshToken(token=token, username=username.lower()))
        return token

    def start_session(self, username: str) -> TokenPair:
        """
        Revoke every prior refresh token for the user, then issue a fresh pair.
        At most one refresh token is active per user afterwards.
        """
        revoked = self.revoke_all(username)
        access_token = self.issue_access_token(username)
        refresh_token = self.issue_refresh_token(username)
        self.logger.info(
            f"Session started for {username.lower()} (revoked {revoked} prior refresh tokens)"
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=datetime.now(timezone.utc) + self.access_token_expire,
        )

    # Verification -----------------------------------------------------

    def verify_access(self, token: str) -> AccessClaims:
        """
        Raises:
            TokenExpiredError: signature is valid but the token expired
            TokenInvalidError: malformed, bad signature or wrong token type
        """
        if not token:
            raise TokenInvalidError("Missing access token")
        try:
            payload = jwt.decode(
                token,
                self.access_secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "username"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Access token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid access token: {e}")

        if payload.get("token_type") != "access":
            raise TokenInvalidError("Token is not an access token")

        return AccessClaims(
            username=payload["username"],
            jti=payload.get("jti", ""),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def verify_refresh(self, token: str) -> str:
        """Check the refresh token signature and return its username."""
        try:
            payload = jwt.decode(
                token,
                self.refresh_secret,
                algorithms=[ALGORITHM],
                options={"require": ["username"]},
            )
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid refresh token: {e}")

        if payload.get("token_type") != "refresh":
            raise TokenInvalidError("Token is not a refresh token")
        return payload["username"]

    def rotate_on_expiry(self, refresh_token: str) -> Tuple[str, str]:
        """
        Mint a new access token from a stored refresh token.
        Returns (username, new_access_token).

        Raises:
            TokenRevokedError: token is not in the store
            TokenInvalidError: token is stored but its signature is bad
        """
        if not refresh_token:
            raise TokenRevokedError("Missing refresh token")

        with self.database.session() as session:
            stored_username = session.execute(
                select(RefreshToken.username).where(RefreshToken.token == refresh_token)
            ).scalar_one_or_none()

        if stored_username is None:
            raise TokenRevokedError("Refresh token has been revoked")

        username = self.verify_refresh(refresh_token)
        if username != stored_username:
            raise TokenInvalidError("Refresh token does not belong to this user")

        self.logger.info(f"Access token rotated for {username}")
        return username, self.issue_access_token(username)

    # Revocation -------------------------------------------------------

    def revoke_all(self, username: str) -> int:
        with self.database.session() as session:
            result = session.execute(
                delete(RefreshToken).where(RefreshToken.username == username.lower())
            )
            return result.rowcount or 0

