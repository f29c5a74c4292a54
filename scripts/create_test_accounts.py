"""
Create a verified test investor and a verified test property developer.
Use when verification emails are not configured so you can log in and test the app.

Run from project root:
  python scripts/create_test_accounts.py

Credentials are printed at the end.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import Base, SessionLocal, engine
from app.models.account import Account, AccountKind
from app.services.auth import get_password_hash

PASSWORD = "Password123!"

ACCOUNTS = [
    {
        "email": "investor@accounts.local",
        "kind": AccountKind.investor,
        "full_name": "Test Investor",
        "legal_id": "AB12345",
        "phone_number": "+15551234567",
        "origin": "USA",
    },
    {
        "email": "developer@accounts.local",
        "kind": AccountKind.developer,
        "full_name": "Test Developer",
        "legal_id": "CD67890",
        "phone_number": "+15557654321",
        "company_name": "Test Developments Ltd",
        "registration_number": "REG-001",
        "company_address": "1 Harbour Road",
        "url": "https://developer.example",
        "proof_of_incorporation": "incorporation.pdf",
        "tax_identification_number": "TIN-001",
        "company_director_name": "Dana Director",
        "director_id": "DIR12345",
        "business_license_certificate": "license.pdf",
        "ultimate_beneficial_owner": "Dana Director",
    },
]


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for fields in ACCOUNTS:
            if db.query(Account).filter(Account.email == fields["email"]).first():
                print(f"Account already exists: {fields['email']}")
                continue
            db.add(Account(hashed_password=get_password_hash(PASSWORD), verified=True, verification_code=None, **fields))
            print(f"Created {fields['kind'].value}: {fields['email']}")
        db.commit()

        print("\n--- Test accounts (use when verification email is not set up) ---")
        for fields in ACCOUNTS:
            print(f"{fields['kind'].value}:")
            print(f"  Email:    {fields['email']}")
            print(f"  Password: {PASSWORD}")
        print("\nDone.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
