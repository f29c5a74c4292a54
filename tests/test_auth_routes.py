"""HTTP surface, in-process via TestClient."""
import jwt
from sqlalchemy.exc import OperationalError

from app.config import get_settings
from app.dependencies import get_account_manager, get_asset_store
from app.main import app
from app.models.account import Account
from app.models.audit_log import AuditLog
from app.services.accounts import AccountManager
from app.services.assets import LocalAssetStore
from app.services.store import AccountStore
from tests.conftest import STRONG_PASSWORD, developer_payload, investor_payload


def _account(db, email):
    db.expire_all()
    return db.query(Account).filter(Account.email == email).first()


def _register_and_verify(client, notifier, email="alice@x.com"):
    assert client.post("/auth/sign-up", json=investor_payload(email)).status_code == 201
    code = notifier.last_code(email)
    assert client.post("/auth/verification", json={"email": email, "code": code}).status_code == 200
    return code


def _login(client, email="alice@x.com", password=STRONG_PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_register_verify_login_scenario(client, notifier):
    r = client.post("/auth/sign-up", json=investor_payload("alice@x.com"))
    assert r.status_code == 201
    body = r.json()
    assert body["account"]["email"] == "alice@x.com"
    assert body["account"]["verified"] is False
    assert body["verificationEmailSent"] is True

    code = notifier.last_code("alice@x.com")
    assert len(code) == 4
    assert client.post("/auth/verification", json={"email": "alice@x.com", "code": code}).status_code == 200

    r = _login(client)
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"
    assert r.json()["access_token"]

    r = client.post("/auth/verification", json={"email": "alice@x.com", "code": code})
    assert r.status_code == 400


def test_register_response_hides_secrets(client):
    account = client.post("/auth/sign-up", json=investor_payload()).json()["account"]
    for key in ("hashedPassword", "hashed_password", "password", "verificationCode", "verification_code"):
        assert key not in account


def test_mismatched_passwords_create_nothing(client, notifier, db):
    r = client.post("/auth/sign-up", json=investor_payload("bob@x.com", confirmPassword="Passw0rd?"))
    assert r.status_code == 400
    assert r.json()["detail"] == "Password does not match."
    assert _account(db, "bob@x.com") is None
    assert notifier.messages == []


def test_missing_fields(client):
    r = client.post("/auth/sign-up", json={"email": "alice@x.com"})
    assert r.status_code == 400
    assert r.json()["detail"] == "All fields are required."


def test_malformed_body_is_400(client):
    r = client.post("/auth/sign-up", json={"email": ["not", "a", "string"]})
    assert r.status_code == 400


def test_duplicate_registration(client):
    assert client.post("/auth/sign-up", json=investor_payload()).status_code == 201
    r = client.post("/auth/sign-up", json=investor_payload())
    assert r.status_code == 400
    assert "already in use" in r.json()["detail"]


def test_registration_kept_when_email_fails(client, notifier, db):
    notifier.fail = True
    r = client.post("/auth/sign-up", json=investor_payload())
    assert r.status_code == 201
    assert r.json()["verificationEmailSent"] is False
    assert _account(db, "alice@x.com").verification_code is not None


def test_verify_unknown_account(client):
    r = client.post("/auth/verification", json={"email": "nobody@x.com", "code": "AAAA"})
    assert r.status_code == 404


def test_wrong_code_is_audited(client, db):
    client.post("/auth/sign-up", json=investor_payload())
    r = client.post("/auth/verification", json={"email": "alice@x.com", "code": "0000"})
    assert r.status_code == 400
    db.expire_all()
    entry = db.query(AuditLog).filter(AuditLog.category == "failed_attempt").one()
    assert entry.actor_email == "alice@x.com"
    assert entry.meta["reason"] == "invalid_code"


def test_login_unverified_is_403(client):
    client.post("/auth/sign-up", json=investor_payload())
    assert _login(client).status_code == 403


def test_login_wrong_password_is_401(client, notifier):
    _register_and_verify(client, notifier)
    assert _login(client, password="Wr0ng!pass").status_code == 401


def test_login_unknown_is_404(client):
    assert _login(client, email="nobody@x.com").status_code == 404


def test_login_missing_fields_is_400(client):
    assert client.post("/auth/login", json={"email": "alice@x.com"}).status_code == 400


def test_resend_code(client, notifier, monkeypatch):
    issued = iter(["AAAA", "BBBB"])
    monkeypatch.setattr("app.services.accounts.generate_verification_code", lambda length: next(issued))
    client.post("/auth/sign-up", json=investor_payload())
    assert notifier.last_code("alice@x.com") == "AAAA"
    assert client.post("/auth/resend-code", json={"email": "alice@x.com"}).status_code == 200
    assert notifier.last_code("alice@x.com") == "BBBB"
    assert client.post("/auth/verification", json={"email": "alice@x.com", "code": "AAAA"}).status_code == 400
    assert client.post("/auth/verification", json={"email": "alice@x.com", "code": "BBBB"}).status_code == 200


def test_resend_failure_is_500(client, notifier):
    client.post("/auth/sign-up", json=investor_payload())
    notifier.fail = True
    r = client.post("/auth/resend-code", json={"email": "alice@x.com"})
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to send verification email."


def test_resend_requires_email(client):
    assert client.post("/auth/resend-code", json={}).status_code == 400


def test_reset_request_unknown_email(client):
    assert client.post("/auth/reset-password", json={"email": "nobody@x.com"}).status_code == 404


def test_password_reset_flow(client, notifier, db):
    _register_and_verify(client, notifier)
    assert client.post("/auth/reset-password", json={"email": "alice@x.com"}).status_code == 200
    code = notifier.last_code("alice@x.com")
    assert notifier.messages[-1][1] == "Forget Password Request"

    before = _account(db, "alice@x.com").hashed_password
    r = client.post(
        "/auth/new-password",
        json={"email": "alice@x.com", "verificationCode": "WRONG", "newPassword": "N3w!Passw"},
    )
    assert r.status_code == 400
    assert _account(db, "alice@x.com").hashed_password == before

    r = client.post(
        "/auth/new-password",
        json={"email": "alice@x.com", "verificationCode": code, "newPassword": "N3w!Passw"},
    )
    assert r.status_code == 200
    assert _login(client, password="N3w!Passw").status_code == 200
    assert _login(client).status_code == 401


def test_new_password_unknown_email(client):
    r = client.post(
        "/auth/new-password",
        json={"email": "nobody@x.com", "verificationCode": "AAAA", "newPassword": "N3w!Passw"},
    )
    assert r.status_code == 404


def test_developer_flow(client, notifier, db):
    r = client.post("/auth/register-property-developer", json=developer_payload())
    assert r.status_code == 201
    assert r.json()["account"]["kind"] == "developer"
    assert r.json()["account"]["URL"] == "https://harbour.example"

    # Investor endpoints do not see developer accounts
    assert _login(client, email="dev@x.com").status_code == 404
    assert client.post("/auth/login-developer", json={"email": "dev@x.com", "password": STRONG_PASSWORD}).status_code == 403

    code = notifier.last_code("dev@x.com")
    assert client.post("/auth/developer-verification", json={"email": "dev@x.com", "code": code}).status_code == 200
    assert _account(db, "dev@x.com").verified is True
    r = client.post("/auth/login-developer", json={"email": "dev@x.com", "password": STRONG_PASSWORD})
    assert r.status_code == 200

    assert client.post("/auth/reset-developer-password", json={"email": "dev@x.com"}).status_code == 200
    code = notifier.last_code("dev@x.com")
    r = client.post(
        "/auth/reset-new-password",
        json={"email": "dev@x.com", "verificationCode": code, "newPassword": "N3w!Passw"},
    )
    assert r.status_code == 200
    assert client.post("/auth/developer-resend-code", json={"email": "dev@x.com"}).status_code == 200


def test_developer_missing_company_field(client):
    payload = developer_payload()
    del payload["ultimateBeneficialOwner"]
    assert client.post("/auth/register-property-developer", json=payload).status_code == 400


def test_investor_profile(client, db):
    account_id = client.post("/auth/sign-up", json=investor_payload()).json()["account"]["id"]
    r = client.get(f"/auth/investor-profile/{account_id}")
    assert r.status_code == 200
    assert r.json() == {"fullName": "Alice Investor", "email": "alice@x.com", "origin": "Kenya"}
    assert client.get(f"/auth/investor-profile/{account_id + 1}").status_code == 404


def test_protected_route(client, notifier, settings):
    _register_and_verify(client, notifier)
    token = _login(client).json()["access_token"]

    assert client.get("/auth/protected-route").status_code == 401
    forged = jwt.encode({"sub": "1"}, "not-the-secret", algorithm="HS256")
    assert client.get("/auth/protected-route", headers={"Authorization": f"Bearer {forged}"}).status_code == 403
    r = client.get("/auth/protected-route", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == "alice@x.com"
    assert me["verified"] is True


def test_profile_image_upload(client, notifier, tmp_path, db):
    _register_and_verify(client, notifier)
    token = _login(client).json()["access_token"]
    r = client.post(
        "/auth/profile-image",
        files={"file": ("me.png", b"\x89PNG fake", "image/png")},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 200
    ref = r.json()["profileImageRef"]
    assert ref.endswith(".png")
    assert (tmp_path / "uploads" / ref).read_bytes() == b"\x89PNG fake"
    assert _account(db, "alice@x.com").profile_image_ref == ref


def test_profile_image_requires_token(client):
    r = client.post("/auth/profile-image", files={"file": ("me.png", b"data", "image/png")})
    assert r.status_code == 401


def test_empty_upload_rejected(client, notifier):
    _register_and_verify(client, notifier)
    token = _login(client).json()["access_token"]
    r = client.post(
        "/auth/profile-image",
        files={"file": ("me.png", b"", "image/png")},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 400


def test_padded_email_round_trip(client, notifier, db):
    padded = "  alice@x.com "
    assert client.post("/auth/sign-up", json=investor_payload(padded)).status_code == 201
    assert _account(db, "alice@x.com") is not None
    code = notifier.last_code("alice@x.com")
    assert client.post("/auth/verification", json={"email": padded, "code": code}).status_code == 200
    assert _login(client, email=padded).status_code == 200
    assert client.post("/auth/reset-password", json={"email": padded}).status_code == 200


def test_overlong_field_is_400(client, db):
    r = client.post("/auth/sign-up", json=investor_payload(legalId="A" * 101))
    assert r.status_code == 400
    assert r.json()["detail"] == "Legal id must be at most 100 characters."
    assert _account(db, "alice@x.com") is None


class _RecordingAssetStore(LocalAssetStore):
    def __init__(self, settings):
        super().__init__(settings)
        self.received = []

    def save(self, filename, content):
        self.received.append(len(content))
        return super().save(filename, content)


def test_upload_over_limit_is_rejected_without_buffering(client, notifier, settings, tmp_path):
    _register_and_verify(client, notifier)
    token = _login(client).json()["access_token"]
    small = settings.model_copy(update={"max_upload_bytes": 10, "upload_dir": str(tmp_path / "uploads")})
    assets = _RecordingAssetStore(small)
    app.dependency_overrides[get_settings] = lambda: small
    app.dependency_overrides[get_asset_store] = lambda: assets

    r = client.post(
        "/auth/profile-image",
        files={"file": ("big.png", b"x" * 2_000_000, "image/png")},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "File is too large."
    assert assets.received == [11]
    assert not (tmp_path / "uploads").exists()


class _BrokenStore(AccountStore):
    def find_by_email(self, email):
        raise OperationalError("SELECT accounts", {}, Exception("connection to 10.0.0.5 refused"))


def test_store_failure_is_generic_500(client, notifier, db, settings):
    app.dependency_overrides[get_account_manager] = lambda: AccountManager(_BrokenStore(db), notifier, settings=settings)
    r = client.post("/auth/verification", json={"email": "alice@x.com", "code": "AAAA"})
    assert r.status_code == 500
    assert r.json() == {"detail": "Server error."}
    assert "10.0.0.5" not in r.text
