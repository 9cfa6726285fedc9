from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from shop.data.models.user import UserModel
from shop.repos.user_repo import UserRepo, normalize_email
from shop.domain.enums import Role
from shop.domain.errors import ValidationError, NotFoundError, ConflictError, AuthenticationError
from shop.domain.schemas import RegisterIn, ProfileUpdateIn, UserOut, LoginOut
from shop.services.credential_service import CredentialService, check_password_policy
from shop.services.token_service import TokenService
from shop.utils.logging import get_logger

logger = get_logger(__name__)

REGISTER_REQUIRED = ("name", "email", "password", "phone", "address", "answer")


class UserService:
    def __init__(
        self,
        db: Session,
        credentials: CredentialService | None = None,
        tokens: TokenService | None = None,
    ):
        self.repo = UserRepo(db)
        self.credentials = credentials or CredentialService()
        self.tokens = tokens or TokenService()

    def register(self, payload: RegisterIn) -> UserOut:
        for field in REGISTER_REQUIRED:
            value = getattr(payload, field)
            if value is None or not str(value).strip():
                raise ValidationError(f"{field.capitalize()} is required")

        check_password_policy(payload.password)

        if self.repo.get_by_email(payload.email):
            raise ConflictError("User already exists, please login")

        user = UserModel(
            name=payload.name.strip(),
            email=normalize_email(payload.email),
            phone=payload.phone,
            address=payload.address,
            password=self.credentials.hash(payload.password),
            answer=self.credentials.hash(payload.answer),
            role=Role(payload.role).value,
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError as e:
            #concurrent registration with the same email
            self.repo.rollback()
            raise ConflictError("User already exists, please login") from e

        logger.info(f"Registered user {created.id} with role {created.role}")
        return UserOut.model_validate(created)

    def login(self, email: str | None, password: str | None) -> LoginOut:
        if not email or not password:
            raise ValidationError("Invalid email or password")

        user = self.repo.get_by_email(email)
        if not user:
            raise NotFoundError("User is not registered")

        if not self.credentials.verify(password, user.password):
            raise AuthenticationError("Invalid email or password")

        token = self.tokens.issue(user.id)
        logger.info(f"User {user.id} logged in")
        return LoginOut(token=token, user=UserOut.model_validate(user))

    def forgot_password(self, email: str | None, answer: str | None, new_password: str | None) -> None:
        if not email:
            raise ValidationError("Email is required")
        if not answer:
            raise ValidationError("Answer is required")
        if not new_password:
            raise ValidationError("New password is required")

        check_password_policy(new_password)

        user = self.repo.get_by_email(email)
        #wrong email and wrong answer look the same
        if not user or not self.credentials.verify(answer, user.answer):
            raise NotFoundError("Wrong email or answer")

        user.password = self.credentials.hash(new_password)
        self.repo.save(user)
        logger.info(f"Password reset for user {user.id}")

    def update_profile(self, user_id: int, payload: ProfileUpdateIn) -> UserOut:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        if payload.password:
            check_password_policy(payload.password)
            user.password = self.credentials.hash(payload.password)

        #email is never changed here
        if payload.name:
            user.name = payload.name
        if payload.phone:
            user.phone = payload.phone
        if payload.address:
            user.address = payload.address

        updated = self.repo.save(user)
        logger.info(f"Profile updated for user {user_id}")
        return UserOut.model_validate(updated)

    def get_user(self, user_id: int) -> UserOut:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserOut.model_validate(user)
