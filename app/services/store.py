"""Persistent store for account records, keyed by email."""
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.account import Account
from app.services.errors import ConflictError


class AccountStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Account | None:
        return self.db.query(Account).filter(Account.email == email).first()

    def find_by_id(self, account_id: int) -> Account | None:
        return self.db.query(Account).filter(Account.id == account_id).first()

    def save(self, account: Account) -> Account:
        """Insert or update. The store assigns id and timestamps on first save."""
        self.db.add(account)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError()
        self.db.refresh(account)
        return account

    def consume_code(self, account_id: int, expected_code: str, **changes) -> bool:
        """Apply changes and clear the pending code only if it still equals expected_code.

        Returns False when another request replaced or consumed the code first.
        """
        values = {**changes, "verification_code": None}
        result = self.db.execute(
            update(Account)
            .where(Account.id == account_id, Account.verification_code == expected_code)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount != 1:
            return False
        self.db.expire_all()
        return True
