"""
User service.

Passwords are hashed before they reach any statement, and no function here
returns the password column.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from jobly.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from jobly.core.logging_config import get_logger
from jobly.core.security import get_password_hash, verify_password
from jobly.crud.base import fetch_all, fetch_one, write
from jobly.sql.statements import sql_for_insert, sql_for_partial_update

logger = get_logger(__name__)

TABLE = "users"
KEY = "username"
SUMMARY_COLUMNS = ("username", "first_name", "last_name", "email")
COLUMNS = SUMMARY_COLUMNS + ("photo_url", "is_admin")


def not_found(username: str) -> NotFoundError:
    return NotFoundError(f"No user found with username: {username}")


def already_exists(username: Optional[str]) -> ConflictError:
    return ConflictError(f'User with username: "{username}" already exists')


def email_taken(email: Optional[str]) -> ConflictError:
    return ConflictError(f'User with email: "{email}" already exists')


def _conflicts(username: Optional[str], email: Optional[str]) -> Dict[str, ConflictError]:
    return {"username": already_exists(username), "email": email_taken(email)}


def _public(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {column: row[column] for column in COLUMNS}


def _hash_password(items: Mapping[str, Any]) -> Dict[str, Any]:
    record = dict(items)
    if record.get("password"):
        record["password"] = get_password_hash(record["password"])
    return record


def get_all(db: Session) -> List[Dict[str, Any]]:
    """List users as {username, first_name, last_name, email}."""
    return fetch_all(db, f"SELECT {', '.join(SUMMARY_COLUMNS)} FROM {TABLE} ORDER BY username")


def get_by_username(db: Session, username: str) -> Dict[str, Any]:
    """
    Raises:
        NotFoundError: No user has this username
    """
    user = fetch_one(db, f"SELECT {', '.join(COLUMNS)} FROM {TABLE} WHERE username=$1", [username])
    if user is None:
        raise not_found(username)
    return user


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Register a user. The plain-text password in `data` is hashed first.

    Raises:
        ConflictError: Username or email already taken
    """
    statement, values = sql_for_insert(TABLE, _hash_password(data), COLUMNS)
    rows = write(db, statement, values, unique=_conflicts(data.get("username"), data.get("email")))
    logger.info(f"New user registered: {rows[0]['username']}")
    return rows[0]


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        The user's public fields

    Raises:
        ValidationFailedError: Unknown username or wrong password
    """
    row = fetch_one(db, f"SELECT {', '.join(COLUMNS)}, password FROM {TABLE} WHERE username=$1", [username])
    if row is None or not verify_password(password, row["password"]):
        logger.info(f"Failed login for {username}")
        raise ValidationFailedError("Invalid username or password")
    return _public(row)


def update(db: Session, username: str, items: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Update only the supplied columns of a user; a new password is hashed.

    Raises:
        ValidationFailedError: Nothing to update
        NotFoundError: No user has this username
        ConflictError: New username or email already taken
    """
    statement, values = sql_for_partial_update(TABLE, _hash_password(items), KEY, username)
    rows = write(db, statement, values, unique=_conflicts(items.get("username", username), items.get("email")))
    if not rows:
        raise not_found(username)

    logger.info(f"Updated user {username}")
    return _public(rows[0])


def delete(db: Session, username: str) -> str:
    """
    Raises:
        NotFoundError: No user has this username
    """
    rows = write(db, f"DELETE FROM {TABLE} WHERE username=$1 RETURNING username", [username])
    if not rows:
        raise not_found(username)

    logger.info(f"Deleted user {username}")
    return "User deleted"
