"""One-time codes for email verification and password recovery."""
import secrets

# No "0": codes issued by earlier deployments use this alphabet
CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ123456789"
DEFAULT_CODE_LENGTH = 4


def generate_verification_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    if length < 1:
        raise ValueError("Verification code length must be positive")
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
