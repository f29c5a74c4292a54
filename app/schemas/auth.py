"""Account request/response schemas. JSON uses camelCase; snake_case is accepted too."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.account import AccountKind


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InvestorRegister(CamelModel):
    """Missing fields are reported by the account manager, so everything is optional here."""
    full_name: str | None = None
    legal_id: str | None = None
    origin: str | None = None
    email: str | None = None
    phone_number: str | None = None
    password: str | None = None
    confirm_password: str | None = None


class DeveloperRegister(CamelModel):
    full_name: str | None = None
    legal_id: str | None = None
    email: str | None = None
    phone_number: str | None = None
    password: str | None = None
    confirm_password: str | None = None

    company_name: str | None = None
    registration_number: str | None = None
    company_address: str | None = None
    url: str | None = Field(default=None, alias="URL")
    proof_of_incorporation: str | None = None
    tax_identification_number: str | None = None

    company_director_name: str | None = None
    director_id: str | None = None
    business_license_certificate: str | None = None
    ultimate_beneficial_owner: str | None = None


class VerifyRequest(CamelModel):
    email: str | None = None
    code: str | None = None


class EmailRequest(CamelModel):
    """Resend code / reset-password request."""
    email: str | None = None


class NewPasswordRequest(CamelModel):
    email: str | None = None
    verification_code: str | None = None
    new_password: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class AccountResponse(CamelModel):
    """Public view of an account: no password hash, no pending code."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    email: str
    kind: AccountKind
    verified: bool
    full_name: str | None = None
    legal_id: str | None = None
    phone_number: str | None = None
    origin: str | None = None

    company_name: str | None = None
    registration_number: str | None = None
    company_address: str | None = None
    url: str | None = Field(default=None, alias="URL")
    proof_of_incorporation: str | None = None
    tax_identification_number: str | None = None
    company_director_name: str | None = None
    director_id: str | None = None
    business_license_certificate: str | None = None
    ultimate_beneficial_owner: str | None = None

    profile_image_ref: str | None = None
    created_at: datetime | None = None


class RegisterResponse(CamelModel):
    message: str
    account: AccountResponse
    verification_email_sent: bool = True


class InvestorProfileResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    full_name: str | None = None
    email: str
    origin: str | None = None


class MessageResponse(BaseModel):
    message: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
