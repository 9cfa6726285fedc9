# shop/services/access_service.py
from sqlalchemy.orm import Session

from shop.data.models.user import UserModel
from shop.domain.enums import Role
from shop.domain.errors import AuthenticationError, AuthorizationError
from shop.repos.user_repo import UserRepo
from shop.services.token_service import TokenService
from shop.utils.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


class AccessService:
    """
    -identity from the bearer credential
    -role re-read from the users table on every check
    """

    def __init__(self, db: Session, tokens: TokenService | None = None):
        self.users = UserRepo(db)
        self.tokens = tokens or TokenService()

    def authenticate(self, authorization: str | None) -> UserModel:
        if not authorization or not authorization.strip():
            raise AuthenticationError("Token missing")

        token = authorization.strip()
        #"Bearer <jwt>" or the bare token
        if token.lower().startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):].strip()

        user_id = self.tokens.subject(token)
        user = self.users.get_user(user_id)
        if not user:
            raise AuthenticationError("Invalid or expired token")
        return user

    def require_admin(self, user: UserModel) -> UserModel:
        if user.role != Role.ADMIN.value:
            logger.info(f"User {user.id} denied admin access")
            raise AuthorizationError("Access denied")
        return user
