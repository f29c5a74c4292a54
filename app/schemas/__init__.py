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
