# shop/domain/errors.py
"""
Domain exceptions.

Services raise these; routers map them onto HTTP statuses. They subclass the
built-in exceptions so callers that only know ValueError / PermissionError
keep working.
"""


class ValidationError(ValueError):
    """Missing or malformed input."""


class NotFoundError(ValueError):
    """Entity absent, or present but owned by someone else."""


class ConflictError(ValueError):
    """Duplicate email, name or slug."""


class InsufficientStockError(ValueError):
    def __init__(self, message: str, available: int):
        super().__init__(message)
        self.available = available


class AuthenticationError(PermissionError):
    pass


class AuthorizationError(PermissionError):
    pass


class IntegrationError(RuntimeError):
    """Hashing, signing or storage collaborator failed."""
