from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .user import User, UserSession
from ...utils.validators import normalize_email, utc_now


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, email: str, hashed_password: str, role: str = "user", is_active: bool = True) -> User:
    db_user = User(
        email=normalize_email(email),
        hashed_password=hashed_password,
        role=role,
        is_active=is_active,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def touch_last_login(db: Session, user: User) -> User:
    user.last_login_at = utc_now()
    db.commit()
    db.refresh(user)
    return user


def create_session(db: Session, user_id: int, token: str, expires_at: datetime) -> UserSession:
    db_session = UserSession(user_id=user_id, token=token, expires_at=expires_at)
    db.add(db_session)
    db.commit()
    db.refresh(db_session)
    return db_session


def get_session_by_token(db: Session, token: str) -> Optional[UserSession]:
    return db.query(UserSession).filter(UserSession.token == token).first()


def delete_session(db: Session, token: str) -> bool:
    deleted = db.query(UserSession).filter(UserSession.token == token).delete(synchronize_session=False)
    db.commit()
    return deleted > 0


def delete_expired_sessions(db: Session, now: datetime) -> int:
    deleted = db.query(UserSession).filter(UserSession.expires_at <= now).delete(synchronize_session=False)
    db.commit()
    return deleted
