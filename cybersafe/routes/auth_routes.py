"""
Registration, login and session cookie endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cybersafe.config import get_db
from cybersafe.models.models import User as DbUser
from cybersafe.schemas.auth_schemas import LoginRequest, LogoutResponse, RegisterRequest
from cybersafe.schemas.user_schemas import User
from cybersafe.utils.auth import (
    authenticate_user,
    clear_auth_cookie,
    create_user,
    get_current_user,
    get_user_by_username,
    set_auth_cookie,
)
from cybersafe.utils.logger import configure_logging

logger = configure_logging()

auth_routes = APIRouter()


@auth_routes.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, response: Response, db: Session = Depends(get_db)) -> User:
    """Register a new user, seed their module progress and log them in."""
    if get_user_by_username(request.username, db):
        logger.info("registration rejected: username taken username=%s", request.username)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    try:
        user = create_user(
            username=request.username,
            password=request.password,
            fullname=request.fullname,
            gender=request.gender,
            email=request.email,
            db=db,
        )
    except IntegrityError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    set_auth_cookie(response, user)
    return User.model_validate(user)


@auth_routes.post("/login")
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)) -> User:
    """Authenticate and set the HTTP-only session cookie."""
    user = authenticate_user(request.username, request.password, db)
    if user is None:
        logger.info("login failed username=%s", request.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password"
        )
    set_auth_cookie(response, user)
    return User.model_validate(user)


@auth_routes.post("/logout")
def logout(response: Response) -> LogoutResponse:
    """Clear the authentication cookie."""
    clear_auth_cookie(response)
    return LogoutResponse(message="Logout successful")


@auth_routes.get("/user")
def get_current_user_info(current_user: DbUser = Depends(get_current_user)) -> User:
    return User.model_validate(current_user)
