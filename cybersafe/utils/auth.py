from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cybersafe.config import get_db, settings
from cybersafe.models.models import User
from cybersafe.services.module_catalog import known_module_ids
from cybersafe.services.progress_store import SqlProgressStore
from cybersafe.utils.logger import configure_logging
from cybersafe.utils.security import create_access_token, get_password_hash, verify_password, verify_token

logger = configure_logging()

COOKIE_NAME = "access_token"


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> User:
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    payload = verify_token(access_token)
    user = get_user_by_username(payload.sub, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return user


def set_auth_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=create_access_token(user.username),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax"
    )


def get_user_by_username(username: str, db: Session) -> User | None:
    return db.query(User).filter(User.username == username).first()


def create_user(*, username: str, password: str, fullname: str, gender: str, email: str, db: Session) -> User:
    """Create the user and a zero progress row for every catalog module."""
    logger.info("creating user username=%s", username)
    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        fullname=fullname,
        gender=gender,
        email=email,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(user)
    SqlProgressStore(db).seed(user.id, known_module_ids())
    return user


def authenticate_user(username: str, password: str, db: Session) -> User | None:
    user = get_user_by_username(username, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
