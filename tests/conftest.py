"""Shared fixtures: in-memory SQLite, recording notifier, TestClient."""
import os

# Must be set before app.config / app.database are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["MAILGUN_API_KEY"] = ""
os.environ["SENDGRID_API_KEY"] = ""

import re

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.database import Base, SessionLocal, engine
from app.dependencies import get_asset_store, get_notifier
from app.main import app
from app.services.assets import LocalAssetStore
from app.services.store import AccountStore

STRONG_PASSWORD = "Passw0rd!"


class RecordingNotifier:
    """Collects outgoing messages; set fail=True to simulate a provider outage."""

    def __init__(self):
        self.messages = []
        self.fail = False

    def send(self, to_email, subject, body):
        if self.fail:
            return False
        self.messages.append((to_email, subject, body))
        return True

    def last_code(self, to_email):
        for to, _, body in reversed(self.messages):
            if to == to_email:
                return re.search(r"([A-Z1-9]+)\s*$", body).group(1)
        return None


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db):
    return AccountStore(db)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, notifier, tmp_path, settings):
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_asset_store] = lambda: LocalAssetStore(
        settings.model_copy(update={"upload_dir": str(tmp_path / "uploads")})
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def investor_payload(email="alice@x.com", **overrides):
    payload = {
        "fullName": "Alice Investor",
        "legalId": "AB12345",
        "origin": "Kenya",
        "email": email,
        "phoneNumber": "+254712345678",
        "password": STRONG_PASSWORD,
        "confirmPassword": STRONG_PASSWORD,
    }
    payload.update(overrides)
    return payload


def developer_payload(email="dev@x.com", **overrides):
    payload = {
        "fullName": "Dana Developer",
        "legalId": "CD67890",
        "email": email,
        "phoneNumber": "+447700900123",
        "password": STRONG_PASSWORD,
        "confirmPassword": STRONG_PASSWORD,
        "companyName": "Harbour Developments",
        "registrationNumber": "REG-4411",
        "companyAddress": "1 Harbour Road",
        "URL": "https://harbour.example",
        "proofOfIncorporation": "incorporation.pdf",
        "taxIdentificationNumber": "TIN-9981",
        "companyDirectorName": "Dana Director",
        "directorId": "DIR12345",
        "businessLicenseCertificate": "license.pdf",
        "ultimateBeneficialOwner": "Dana Director",
    }
    payload.update(overrides)
    return payload
