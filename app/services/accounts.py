"""Account lifecycle: registration, email-code verification, login and password recovery.

Investors and property developers share one Account record and one set of
transitions; an AccountKindSpec says which profile fields a kind requires.
A pending verification code is single-use and serves both email verification
and password recovery. Consumption goes through AccountStore.consume_code so a
code replaced by a concurrent resend can no longer be used.
"""
import logging
from dataclasses import dataclass
from typing import Callable

from app.config import Settings, get_settings
from app.models.account import Account, AccountKind
from app.services.audit_log import AuditTrail, CATEGORY_FAILED_ATTEMPT, CATEGORY_STATUS_CHANGE
from app.services.auth import account_id_from_token, create_access_token, get_password_hash, verify_password
from app.services.errors import (
    ConflictError,
    DependencyError,
    ForbiddenError,
    InvalidCodeError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.services.notifications import send_password_reset_email, send_verification_code_email
from app.services.store import AccountStore
from app.services.validation import (
    require_fields,
    validate_email,
    validate_legal_id,
    validate_lengths,
    validate_password,
    validate_password_pair,
    validate_phone_number,
)
from app.services.verification import generate_verification_code

log = logging.getLogger("uvicorn.error")

IDENTITY_FIELDS = ("full_name", "legal_id", "phone_number")
COMPANY_FIELDS = (
    "company_name",
    "registration_number",
    "company_address",
    "url",
    "proof_of_incorporation",
    "tax_identification_number",
    "company_director_name",
    "director_id",
    "business_license_certificate",
    "ultimate_beneficial_owner",
)


# Column widths bound what registration accepts
FIELD_LIMITS = {
    c.name: c.type.length
    for c in Account.__table__.columns
    if c.name in ("email",) + IDENTITY_FIELDS + COMPANY_FIELDS + ("origin",) and getattr(c.type, "length", None)
}


@dataclass(frozen=True)
class AccountKindSpec:
    kind: AccountKind
    label: str
    required_fields: tuple
    optional_fields: tuple = ()

    @property
    def profile_fields(self) -> tuple:
        return self.required_fields + self.optional_fields


KIND_SPECS = {
    AccountKind.investor: AccountKindSpec(AccountKind.investor, "investor", IDENTITY_FIELDS, ("origin",)),
    AccountKind.developer: AccountKindSpec(AccountKind.developer, "property developer", IDENTITY_FIELDS + COMPANY_FIELDS),
}


@dataclass
class RegistrationResult:
    account: Account
    notification_sent: bool


class AccountManager:
    def __init__(
        self,
        store: AccountStore,
        notifier,
        settings: Settings | None = None,
        assets=None,
        audit: AuditTrail | None = None,
        code_factory: Callable[[], str] | None = None,
    ):
        self.store = store
        self.notifier = notifier
        self.settings = settings or get_settings()
        self.assets = assets
        self.audit = audit
        self.code_factory = code_factory or (lambda: generate_verification_code(self.settings.verification_code_length))

    def _record(self, category: str, title: str, message: str, **kwargs) -> None:
        if self.audit is not None:
            self.audit.record(category, title, message, **kwargs)

    def _find(self, kind: AccountKind, email: str) -> Account:
        # Same normalisation as register()
        account = self.store.find_by_email(email.strip())
        if account is None or account.kind != kind:
            raise NotFoundError()
        return account

    def register(self, kind: AccountKind, data: dict) -> RegistrationResult:
        """Create an unverified account and email it a verification code.

        Delivery failure does not undo the registration; the client recovers
        through resend_code.
        """
        spec = KIND_SPECS[kind]
        require_fields(data, ("email", "password", "confirm_password") + spec.required_fields)
        email = data["email"].strip()
        validate_email(email)
        validate_legal_id(data["legal_id"].strip())
        validate_phone_number(data["phone_number"].strip())
        validate_lengths({"email": email, **{n: data.get(n) for n in spec.profile_fields}}, FIELD_LIMITS)
        validate_password_pair(data["password"], data["confirm_password"])
        if self.store.find_by_email(email) is not None:
            raise ConflictError()

        code = self.code_factory()
        profile = {}
        for name in spec.profile_fields:
            value = data.get(name)
            profile[name] = value.strip() if isinstance(value, str) and value.strip() else None
        account = Account(
            email=email,
            kind=kind,
            hashed_password=get_password_hash(data["password"]),
            verified=False,
            verification_code=code,
            **profile,
        )
        account = self.store.save(account)
        log.info("[Auth] Registered %s account id=%s", spec.label, account.id)

        sent = send_verification_code_email(self.notifier, email, code)
        if not sent:
            log.warning("[Auth] Verification email not delivered for account id=%s; client must resend", account.id)
        return RegistrationResult(account=account, notification_sent=sent)

    def verify(self, kind: AccountKind, email: str | None, code: str | None) -> Account:
        if not email or not code:
            raise ValidationError("Email and verification code are required.")
        account = self._find(kind, email)
        if account.verification_code is None or account.verification_code != code:
            self._record(
                CATEGORY_FAILED_ATTEMPT,
                "Email verification failed",
                f"Wrong verification code for account {account.id}.",
                account=account,
                meta={"kind": kind, "reason": "invalid_code"},
            )
            raise InvalidCodeError()
        if not self.store.consume_code(account.id, code, verified=True):
            raise InvalidCodeError()
        account = self.store.find_by_id(account.id)
        self._record(CATEGORY_STATUS_CHANGE, "Email verified", f"Account {account.id} verified.", account=account, meta={"kind": kind})
        log.info("[Auth] Account id=%s verified", account.id)
        return account

    def _issue_code(self, kind: AccountKind, email: str | None, send, failure_message: str) -> Account:
        if not email:
            raise ValidationError("Email is required.")
        account = self._find(kind, email)
        code = self.code_factory()
        if not send(self.notifier, account.email, code):
            raise DependencyError(failure_message)
        # Overwrites any earlier pending code
        account.verification_code = code
        return self.store.save(account)

    def resend_code(self, kind: AccountKind, email: str | None) -> Account:
        return self._issue_code(kind, email, send_verification_code_email, "Failed to send verification email.")

    def request_password_reset(self, kind: AccountKind, email: str | None) -> Account:
        """Issue a recovery code. The verified flag is left as it is."""
        return self._issue_code(kind, email, send_password_reset_email, "Failed to send forget password key.")

    def complete_password_reset(
        self, kind: AccountKind, email: str | None, code: str | None, new_password: str | None
    ) -> Account:
        if not email or not code or not new_password:
            raise ValidationError("All fields are required.")
        account = self._find(kind, email)
        if account.verification_code is None or account.verification_code != code:
            self._record(
                CATEGORY_FAILED_ATTEMPT,
                "Password reset failed",
                f"Wrong reset code for account {account.id}.",
                account=account,
                meta={"kind": kind, "reason": "invalid_code"},
            )
            raise InvalidCodeError("Invalid verification code.")
        validate_password(new_password)
        if not self.store.consume_code(account.id, code, hashed_password=get_password_hash(new_password)):
            raise InvalidCodeError("Invalid verification code.")
        account = self.store.find_by_id(account.id)
        self._record(CATEGORY_STATUS_CHANGE, "Password reset", f"Password replaced for account {account.id}.", account=account)
        return account

    def login(self, kind: AccountKind, email: str | None, password: str | None) -> str:
        if not email or not password:
            raise ValidationError("Enter the required fields.")
        account = self._find(kind, email)
        if not account.verified:
            raise ForbiddenError("Please verify your email before logging in.")
        if not verify_password(password, account.hashed_password):
            self._record(
                CATEGORY_FAILED_ATTEMPT,
                "Login failed",
                f"Failed login attempt for account {account.id}.",
                account=account,
                meta={"kind": kind, "reason": "incorrect_password"},
            )
            raise UnauthorizedError("Incorrect password.")
        return create_access_token(account.id, self.settings)

    def authenticate(self, token: str | None) -> Account:
        account_id = account_id_from_token(token, self.settings)
        account = self.store.find_by_id(account_id)
        if account is None:
            raise ForbiddenError("Invalid or expired token.")
        return account

    def investor_profile(self, account_id: int) -> Account:
        account = self.store.find_by_id(account_id)
        if account is None or account.kind != AccountKind.investor:
            raise NotFoundError()
        return account

    def upload_profile_image(self, account: Account, filename: str, content: bytes) -> Account:
        if self.assets is None:
            raise DependencyError("File uploads are not available.")
        account.profile_image_ref = self.assets.save(filename, content)
        return self.store.save(account)
