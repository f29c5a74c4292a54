"""Account routes for investors and property developers."""
from fastapi import APIRouter, Depends, File, UploadFile

from app.dependencies import get_account_manager, get_current_account
from app.models.account import Account, AccountKind
from app.schemas.auth import (
    AccountResponse,
    DeveloperRegister,
    EmailRequest,
    InvestorProfileResponse,
    InvestorRegister,
    LoginRequest,
    MessageResponse,
    NewPasswordRequest,
    RegisterResponse,
    Token,
    VerifyRequest,
)
from app.services.accounts import AccountManager

router = APIRouter(prefix="/auth", tags=["auth"])


def _register_response(result, message: str) -> RegisterResponse:
    if not result.notification_sent:
        message = f"{message} We could not send the verification code; use resend to request a new one."
    return RegisterResponse(
        message=message,
        account=AccountResponse.model_validate(result.account),
        verification_email_sent=result.notification_sent,
    )


# --- Investor ---

@router.post("/sign-up", response_model=RegisterResponse, status_code=201)
def register_investor(data: InvestorRegister, manager: AccountManager = Depends(get_account_manager)):
    result = manager.register(AccountKind.investor, data.model_dump())
    return _register_response(result, "Account created successfully. Verification code sent to provided email.")


@router.post("/verification", response_model=MessageResponse)
def verify_investor(data: VerifyRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.verify(AccountKind.investor, data.email, data.code)
    return MessageResponse(message="Email verification successful.")


@router.post("/resend-code", response_model=MessageResponse)
def resend_investor_code(data: EmailRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.resend_code(AccountKind.investor, data.email)
    return MessageResponse(message="Verification code sent successfully.")


@router.post("/reset-password", response_model=MessageResponse)
def reset_investor_password(data: EmailRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.request_password_reset(AccountKind.investor, data.email)
    return MessageResponse(message="Forget key send successfully.")


@router.post("/new-password", response_model=MessageResponse)
def new_investor_password(data: NewPasswordRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.complete_password_reset(AccountKind.investor, data.email, data.verification_code, data.new_password)
    return MessageResponse(message="Password updated successfully.")


@router.post("/login", response_model=Token)
def login_investor(data: LoginRequest, manager: AccountManager = Depends(get_account_manager)):
    return Token(access_token=manager.login(AccountKind.investor, data.email, data.password))


@router.get("/investor-profile/{account_id}", response_model=InvestorProfileResponse)
def investor_profile(account_id: int, manager: AccountManager = Depends(get_account_manager)):
    return InvestorProfileResponse.model_validate(manager.investor_profile(account_id))


# --- Property developer ---

@router.post("/register-property-developer", response_model=RegisterResponse, status_code=201)
def register_developer(data: DeveloperRegister, manager: AccountManager = Depends(get_account_manager)):
    result = manager.register(AccountKind.developer, data.model_dump())
    return _register_response(
        result, "Property developer registered successfully. Verification code sent to the provided email."
    )


@router.post("/developer-verification", response_model=MessageResponse)
def verify_developer(data: VerifyRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.verify(AccountKind.developer, data.email, data.code)
    return MessageResponse(message="Email verification successful.")


@router.post("/developer-resend-code", response_model=MessageResponse)
def resend_developer_code(data: EmailRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.resend_code(AccountKind.developer, data.email)
    return MessageResponse(message="Verification code sent successfully.")


@router.post("/reset-developer-password", response_model=MessageResponse)
def reset_developer_password(data: EmailRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.request_password_reset(AccountKind.developer, data.email)
    return MessageResponse(message="Forget key send successfully.")


@router.post("/reset-new-password", response_model=MessageResponse)
def new_developer_password(data: NewPasswordRequest, manager: AccountManager = Depends(get_account_manager)):
    manager.complete_password_reset(AccountKind.developer, data.email, data.verification_code, data.new_password)
    return MessageResponse(message="Password updated successfully.")


@router.post("/login-developer", response_model=Token)
def login_developer(data: LoginRequest, manager: AccountManager = Depends(get_account_manager)):
    return Token(access_token=manager.login(AccountKind.developer, data.email, data.password))


# --- Authenticated ---

@router.post("/profile-image", response_model=AccountResponse)
async def upload_profile_image(
    file: UploadFile = File(...),
    account: Account = Depends(get_current_account),
    manager: AccountManager = Depends(get_account_manager),
):
    # One byte past the limit is enough for the asset store to reject it
    content = await file.read(manager.settings.max_upload_bytes + 1)
    return AccountResponse.model_validate(manager.upload_profile_image(account, file.filename or "", content))


@router.get("/protected-route", response_model=MessageResponse)
def protected_route(account: Account = Depends(get_current_account)):
    return MessageResponse(message="This is a protected route. User authenticated!")


@router.get("/me", response_model=AccountResponse)
def me(account: Account = Depends(get_current_account)):
    return AccountResponse.model_validate(account)
