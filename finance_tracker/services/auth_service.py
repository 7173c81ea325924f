"""
Signup, login and logout on top of the credential store and token service.
"""
from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from finance_tracker.errors import NotFoundError, ValidationError
from finance_tracker.schemas import Ledger
from finance_tracker.services.credential_store import CredentialStore
from finance_tracker.services.token_service import TokenPair, TokenService
from finance_tracker.utils.validators import validate_password, validate_username

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, store: CredentialStore, tokens: TokenService):
        self.store = store
        self.tokens = tokens

    def signup(self, username, password) -> str:
        """
        Create a user with an empty ledger. Returns the stored username.

        Raises ValidationError on bad input and ConflictError if the name is taken.
        """
        normalized = validate_username(username)
        validate_password(password)
        self.store.create(normalized, generate_password_hash(password), Ledger.empty())
        logger.info(f"AuthService: signup for '{normalized}'")
        return normalized

    def login(self, username, password) -> TokenPair:
        """
        Check credentials, revoke prior refresh tokens and issue a new pair.
        """
        normalized = validate_username(username)
        validate_password(password)

        user = self.store.get(normalized)
        if user is None:
            raise NotFoundError("User not found!")
        if not check_password_hash(user.password_hash, password):
            logger.info(f"AuthService: rejected credentials for '{normalized}'")
            raise ValidationError("Credentials do not match!")

        return self.tokens.start_session(normalized)

    def logout(self, username: str) -> int:
        revoked = self.tokens.revoke_all(username)
        logger.info(f"AuthService: logout for '{username.lower()}' ({revoked} tokens revoked)")
        return revoked
