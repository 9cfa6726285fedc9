# shop/services/credential_service.py
from passlib.context import CryptContext

from shop.domain.errors import ValidationError, IntegrationError
from shop.utils.settings import BCRYPT_ROUNDS

MIN_PASSWORD_LENGTH = 7
PASSWORD_SYMBOLS = set("!@#$%^&*()_+-=[]{};':\"\\|,.<>/?")

#rule order is the reporting order
_POLICY = (
    (lambda p: len(p) >= MIN_PASSWORD_LENGTH,
     f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."),
    (lambda p: any("A" <= c <= "Z" for c in p),
     "Password must contain at least one uppercase letter."),
    (lambda p: any(c in PASSWORD_SYMBOLS for c in p),
     "Password must contain at least one special character."),
    (lambda p: any("0" <= c <= "9" for c in p),
     "Password must contain at least one number."),
)


def password_policy_violation(password: str) -> str | None:
    """First failed rule (length, uppercase, symbol, digit) or None."""
    for rule, message in _POLICY:
        if not rule(password):
            return message
    return None


def check_password_policy(password: str) -> None:
    violation = password_policy_violation(password)
    if violation:
        raise ValidationError(violation)


class CredentialService:
    """
    One-way hashing of passwords and security answers.
    bcrypt salts every call, so equal inputs give different digests.
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        try:
            return self.context.hash(plaintext)
        except (ValueError, TypeError) as e:
            raise IntegrationError(f"Hashing failed: {e}") from e

    def verify(self, plaintext: str, digest: str) -> bool:
        try:
            return self.context.verify(plaintext, digest)
        except (ValueError, TypeError) as e:
            raise IntegrationError(f"Hash verification failed: {e}") from e
