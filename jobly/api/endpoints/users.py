"""
User endpoints.

Reads need any authenticated user; updates and deletes are self-service only
(the token's subject must match the {username} in the path).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import require_same_user, require_user
from jobly.core.security import create_access_token
from jobly.crud import user as user_crud
from jobly.schemas.company import MessageResponse
from jobly.schemas.user import TokenResponse, UserCreate, UserEnvelope, UserListResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201, response_model=TokenResponse)
def create_user(request: UserCreate, db: Session = Depends(get_db)):
    """Register a user and return a token for them."""
    user = user_crud.create(db, request.model_dump())
    return {"token": create_access_token(user["username"], user["is_admin"])}


@router.get("", response_model=UserListResponse, dependencies=[Depends(require_user)])
def list_users(db: Session = Depends(get_db)):
    """List all users as {username, first_name, last_name, email}."""
    return {"users": user_crud.get_all(db)}


@router.get("/{username}", response_model=UserEnvelope, dependencies=[Depends(require_user)])
def get_user(username: str, db: Session = Depends(get_db)):
    return {"user": user_crud.get_by_username(db, username)}


@router.patch("/{username}", response_model=UserEnvelope, dependencies=[Depends(require_same_user)])
def update_user(username: str, request: UserUpdate, db: Session = Depends(get_db)):
    """Update the supplied fields of your own account."""
    return {"user": user_crud.update(db, username, request.model_dump(exclude_unset=True))}


@router.delete("/{username}", response_model=MessageResponse, dependencies=[Depends(require_same_user)])
def delete_user(username: str, db: Session = Depends(get_db)):
    """Delete your own account."""
    return {"message": user_crud.delete(db, username)}
