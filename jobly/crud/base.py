"""
Statement execution shared by the entity services.

Storage failures are translated here, once: unique and foreign-key violations
become the domain error the caller supplies, anything else becomes a plain
JoblyError (500) carrying the driver's message.
"""

import enum
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import JoblyError
from jobly.core.logging_config import get_logger

logger = get_logger(__name__)

# A single error, or one per unique column when a table has several
UniqueErrors = Union[JoblyError, Mapping[str, JoblyError]]

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class ConstraintKind(str, enum.Enum):
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    OTHER = "other"


def constraint_kind(error: IntegrityError) -> ConstraintKind:
    """
    Classify an IntegrityError.

    Uses the SQLSTATE when the driver exposes one (psycopg2 `pgcode`,
    psycopg 3 `sqlstate`), otherwise the message text (SQLite).
    """
    orig = error.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION:
        return ConstraintKind.UNIQUE
    if code == FOREIGN_KEY_VIOLATION:
        return ConstraintKind.FOREIGN_KEY

    message = str(orig).lower()
    if "unique constraint" in message or "duplicate key" in message:
        return ConstraintKind.UNIQUE
    if "foreign key constraint" in message:
        return ConstraintKind.FOREIGN_KEY
    return ConstraintKind.OTHER


def driver_message(error: SQLAlchemyError) -> str:
    return str(getattr(error, "orig", None) or error).strip()


def violated_column(error: IntegrityError, columns: Sequence[str]) -> Optional[str]:
    """
    Which of `columns` a uniqueness violation is about, or None if it can't be told.

    Reads the constraint name (psycopg2 `diag.constraint_name`, e.g.
    "users_email_key") and the driver message (PostgreSQL
    "Key (email)=(...) already exists", SQLite "UNIQUE constraint failed: users.email").
    """
    diag = getattr(error.orig, "diag", None)
    text = f"{getattr(diag, 'constraint_name', None) or ''} {error.orig}"
    for column in columns:
        if f"_{column}_" in text or f"({column})" in text or f".{column}" in text:
            return column
    return None


def _unique_error(error: IntegrityError, unique: UniqueErrors) -> JoblyError:
    if isinstance(unique, JoblyError):
        return unique
    column = violated_column(error, list(unique))
    # Primary-key constraints ("users_pkey") name no column: the first entry is the key
    return unique[column] if column else next(iter(unique.values()))


@contextmanager
def translate_storage_errors(
    db: Session,
    unique: Optional[UniqueErrors] = None,
    foreign_key: Optional[JoblyError] = None,
) -> Iterator[None]:
    """
    Roll back and re-raise storage failures as domain errors.

    Args:
        db: Session to roll back on failure
        unique: Error raised for a uniqueness violation, or a mapping of
            column -> error when the table has more than one unique column
        foreign_key: Error raised for a foreign-key violation
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        kind = constraint_kind(e)
        if kind is ConstraintKind.UNIQUE and unique is not None:
            conflict = _unique_error(e, unique)
            logger.warning(f"Unique violation: {conflict.message}")
            raise conflict from e
        if kind is ConstraintKind.FOREIGN_KEY and foreign_key is not None:
            logger.warning(f"Foreign key violation: {foreign_key.message}")
            raise foreign_key from e
        logger.error(f"Integrity error: {driver_message(e)}")
        raise JoblyError(driver_message(e)) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage error: {driver_message(e)}")
        raise JoblyError(driver_message(e)) from e


def fetch_all(db: Session, statement: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """Run a read statement and return its rows as dicts."""
    with translate_storage_errors(db):
        result = execute(db, statement, values)
        return [dict(row) for row in result.mappings().all()]


def fetch_one(db: Session, statement: str, values: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
    rows = fetch_all(db, statement, values)
    return rows[0] if rows else None


def write(
    db: Session,
    statement: str,
    values: Sequence[Any],
    unique: Optional[UniqueErrors] = None,
    foreign_key: Optional[JoblyError] = None,
) -> List[Dict[str, Any]]:
    """
    Run a single mutating statement and commit.

    Returns the rows produced by its RETURNING clause; an empty list means
    no row matched.
    """
    with translate_storage_errors(db, unique=unique, foreign_key=foreign_key):
        result = execute(db, statement, values)
        rows = [dict(row) for row in result.mappings().all()]
        db.commit()
    return rows
