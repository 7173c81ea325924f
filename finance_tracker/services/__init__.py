"""
Service layer exports.

Services are built once per application by `init_services` and looked up
from the current app with `get_services`.
"""
from dataclasses import dataclass

from flask import current_app

from finance_tracker.database import Database

from .auth_service import AuthService
from .credential_store import CredentialStore
from .ledger_service import LedgerService
from .token_service import TokenService

EXTENSION_KEY = "finance_tracker"


@dataclass
class Services:
    database: Database
    store: CredentialStore
    tokens: TokenService
    ledger: LedgerService
    auth: AuthService


def init_services(app, database: Database) -> Services:
    config = app.config
    store = CredentialStore(database)
    tokens = TokenService(
        database,
        access_secret=config["ACCESS_TOKEN_SECRET"],
        refresh_secret=config["REFRESH_TOKEN_SECRET"],
        access_token_expire_minutes=config["ACCESS_TOKEN_EXPIRE_MINUTES"],
    )
    services = Services(
        database=database,
        store=store,
        tokens=tokens,
        ledger=LedgerService(
            store,
            size_limit=config["LEDGER_SIZE_LIMIT"],
            max_retries=config["LEDGER_UPDATE_RETRIES"],
        ),
        auth=AuthService(store, tokens),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "AuthService",
    "CredentialStore",
    "LedgerService",
    "Services",
    "TokenService",
    "get_services",
    "init_services",
]
