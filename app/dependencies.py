"""Shared dependencies: DB session, account manager, current account."""
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.config import Settings, get_settings
from app.database import get_db
from app.models.account import Account
from app.services.accounts import AccountManager
from app.services.assets import LocalAssetStore
from app.services.audit_log import AuditTrail
from app.services.notifications import EmailNotifier
from app.services.store import AccountStore

security = HTTPBearer(auto_error=False)


def get_notifier(settings: Settings = Depends(get_settings)) -> EmailNotifier:
    return EmailNotifier(settings)


def get_asset_store(settings: Settings = Depends(get_settings)) -> LocalAssetStore:
    return LocalAssetStore(settings)


def get_account_manager(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    notifier=Depends(get_notifier),
    assets=Depends(get_asset_store),
) -> AccountManager:
    audit = AuditTrail(
        db,
        ip_address=request.client.host if request.client else None,
        user_agent=(request.headers.get("user-agent") or "").strip() or None,
    )
    return AccountManager(AccountStore(db), notifier, settings=settings, assets=assets, audit=audit)


def get_current_account(
    manager: AccountManager = Depends(get_account_manager),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Account:
    token_str = (credentials.credentials or "").strip() if credentials else None
    return manager.authenticate(token_str)
