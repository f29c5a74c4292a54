"""Account: one record for both investors and property developers."""
from sqlalchemy import Column, Integer, String, Enum as SQLEnum, DateTime, Boolean
from sqlalchemy.sql import func
from app.database import Base
import enum


class AccountKind(str, enum.Enum):
    investor = "investor"
    developer = "developer"


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    kind = Column(SQLEnum(AccountKind), nullable=False)

    full_name = Column(String(255), nullable=True)
    legal_id = Column(String(100), nullable=True)
    phone_number = Column(String(20), nullable=True)
    origin = Column(String(100), nullable=True)

    # Meaning follows kind: investor-verified or developer-verified
    verified = Column(Boolean, default=False, nullable=False)
    # Single-use; shared by email verification and password recovery
    verification_code = Column(String(16), nullable=True)

    # Developer company information
    company_name = Column(String(255), nullable=True)
    registration_number = Column(String(100), nullable=True)
    company_address = Column(String(500), nullable=True)
    url = Column(String(500), nullable=True)
    proof_of_incorporation = Column(String(500), nullable=True)
    tax_identification_number = Column(String(100), nullable=True)

    # Developer director information
    company_director_name = Column(String(255), nullable=True)
    director_id = Column(String(100), nullable=True)
    business_license_certificate = Column(String(500), nullable=True)
    ultimate_beneficial_owner = Column(String(255), nullable=True)

    profile_image_ref = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
