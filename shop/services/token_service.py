# shop/services/token_service.py
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from shop.domain.errors import AuthenticationError
from shop.utils.settings import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_MINUTES


class TokenService:
    def __init__(
        self,
        secret: str = JWT_SECRET,
        algorithm: str = JWT_ALGORITHM,
        expire_minutes: int = JWT_EXPIRE_MINUTES,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int, expires_delta: timedelta | None = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expire_minutes))
        claims = {"sub": str(user_id), "exp": expire}
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def subject(self, token: str) -> int:
        """User id carried by the token; expired or forged tokens are rejected."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return int(payload["sub"])
        except (JWTError, KeyError, ValueError) as e:
            raise AuthenticationError("Invalid or expired token") from e
