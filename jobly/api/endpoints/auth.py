"""
Authentication endpoints.

- POST /register: Create a user account and return a token
- POST /login: Exchange username/password for a token

Tokens are JWTs with the username as `sub` and the user's `is_admin` flag.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.security import create_access_token
from jobly.crud import user as user_crud
from jobly.schemas.user import LoginRequest, TokenResponse, UserCreate

router = APIRouter(tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(request: UserCreate, db: Session = Depends(get_db)):
    """Register a new user account and return a token for immediate use."""
    user = user_crud.create(db, request.model_dump())
    return TokenResponse(token=create_access_token(user["username"], user["is_admin"]))


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate a user and return a token.

    Unknown usernames and wrong passwords get the same 400 response.
    """
    user = user_crud.authenticate(db, request.username, request.password)
    logger.info(f"User logged in: {user['username']}")
    return TokenResponse(token=create_access_token(user["username"], user["is_admin"]))
