"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from app.models.account import Account, AccountKind
from app.models.audit_log import AuditLog

__all__ = [
    "Account",
    "AccountKind",
    "AuditLog",
]
