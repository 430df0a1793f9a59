import re
import sqlite3
from typing import Any, Dict, Sequence, Tuple

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, Result
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.config import settings

# Statements are written with PostgreSQL positional placeholders ($1, $2, ...)
_PLACEHOLDER = re.compile(r"\$(\d+)")


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # Single shared connection so every session sees the same in-memory db
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": 10,
        "max_overflow": 20,
    }


engine = create_engine(settings.SQLALCHEMY_DATABASE_URL, **_engine_options(settings.SQLALCHEMY_DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Make SQLite enforce foreign keys and match PostgreSQL's case-sensitive LIKE."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA case_sensitive_like=ON")
        cursor.close()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Create any missing tables.

    Models are imported here so they register with Base.metadata.
    """
    from jobly.models import company, job, user  # noqa: F401
    Base.metadata.create_all(bind=engine)


def bind_positional(statement: str, values: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite $n placeholders as named binds for SQLAlchemy's text().

    Examples:
        >>> bind_positional("SELECT * FROM jobs WHERE id=$1", [7])
        ('SELECT * FROM jobs WHERE id=:p1', {'p1': 7})
    """
    bound = _PLACEHOLDER.sub(lambda match: f":p{match.group(1)}", statement)
    params = {f"p{index}": value for index, value in enumerate(values, start=1)}
    return bound, params


def execute(db: Session, statement: str, values: Sequence[Any] = ()) -> Result:
    """
    Run a single statement built with positional placeholders.

    Args:
        db: Database session
        statement: SQL text using $1..$n placeholders
        values: Values in placeholder order

    Returns:
        SQLAlchemy Result for the statement
    """
    bound, params = bind_positional(statement, values)
    return db.execute(text(bound), params)
