import logging
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from ..config.settings import get_settings
from ..models.db import crud
from ..models.db.user import User
from ..security import create_access_token, decode_access_token, get_password_hash, verify_password
from ..utils.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..utils.validators import is_valid_email, utc_now

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login and session bookkeeping."""

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def _open_session(self, user: User) -> str:
        token = create_access_token(data={"sub": user.email, "uid": user.id, "role": user.role})
        expires_at = utc_now() + timedelta(minutes=self.settings.access_token_expire_minutes)
        crud.create_session(self.db, user_id=user.id, token=token, expires_at=expires_at)
        return token

    def register(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        if not email or not password:
            raise ValidationError("Email and password are required")
        if not is_valid_email(email):
            raise ValidationError("Invalid email address format")
        if len(password) < self.settings.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.settings.min_password_length} characters long"
            )
        if crud.get_user_by_email(self.db, email):
            raise ConflictError("User with this email already exists")

        user = crud.create_user(self.db, email=email, hashed_password=get_password_hash(password))
        logger.info("Registered user %s", user.id)
        return user, self._open_session(user)

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = crud.get_user_by_email(self.db, email)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning("Failed login attempt for %s", email)
            raise UnauthorizedError("Invalid email or password")
        if not user.is_active:
            logger.warning("Login attempt for inactive user %s", user.id)
            raise UnauthorizedError("Invalid email or password")

        token = self._open_session(user)
        crud.touch_last_login(self.db, user)
        logger.info("User %s logged in", user.id)
        return user, token

    def logout(self, token: str) -> None:
        if not crud.delete_session(self.db, token):
            raise NotFoundError("Session not found")
        logger.info("Session closed")

    def authenticate(self, token: Optional[str]) -> User:
        """Resolve a bearer token to its active user or raise UnauthorizedError."""
        if not token:
            raise UnauthorizedError("No token provided")

        payload = decode_access_token(token)
        if not payload or payload.get("uid") is None:
            raise UnauthorizedError("Invalid token")

        session = crud.get_session_by_token(self.db, token)
        if session is None:
            raise UnauthorizedError("Session not found")
        if session.expires_at <= utc_now():
            crud.delete_session(self.db, token)
            raise UnauthorizedError("Token expired")

        user = crud.get_user_by_id(self.db, payload["uid"])
        if user is None:
            raise UnauthorizedError("User not found")
        if not user.is_active:
            raise UnauthorizedError("Inactive user")
        return user

    def cleanup_expired_sessions(self) -> int:
        removed = crud.delete_expired_sessions(self.db, utc_now())
        if removed:
            logger.info("Removed %d expired session(s)", removed)
        return removed
