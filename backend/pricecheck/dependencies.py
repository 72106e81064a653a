"""
Shared API dependencies.
"""
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from pricecheck.config import Settings
from pricecheck.database import get_db
from pricecheck.errors import ForbiddenError
from pricecheck.services.auth import Identity, resolve_identity
from pricecheck.services.authorization import Capability, is_allowed
from pricecheck.services.catalog import CatalogStore
from pricecheck.services.inventory import InventoryLedger
from pricecheck.services.sessions import RefreshTokenStore
from pricecheck.services.shopping_list import ShoppingListResolver

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_store(request: Request) -> RefreshTokenStore:
    return request.app.state.token_store


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Identity:
    """Require a valid bearer token - raises 401 otherwise."""
    token = credentials.credentials if credentials else None
    return resolve_identity(db, token, settings)


def require(capability: Capability):
    """Build a dependency that admits only callers holding ``capability``."""

    def check_capability(identity: Identity = Depends(require_auth)) -> Identity:
        if not is_allowed(identity, capability):
            raise ForbiddenError()
        return identity

    return check_capability


def get_catalog(db: Session = Depends(get_db)) -> CatalogStore:
    return CatalogStore(db)


def get_ledger(db: Session = Depends(get_db)) -> InventoryLedger:
    return InventoryLedger(db)


def get_resolver(ledger: InventoryLedger = Depends(get_ledger)) -> ShoppingListResolver:
    return ShoppingListResolver(ledger)
