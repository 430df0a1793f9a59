"""
Company service.

Builds company statements with the shared query builders and translates
storage failures into domain errors for the API layer.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from jobly.core.exceptions import ConflictError, NotFoundError
from jobly.core.logging_config import get_logger
from jobly.crud.base import fetch_all, fetch_one, write
from jobly.sql.filters import FilterField, ListQuery, OrderedRange, Predicate, build_filtered_select
from jobly.sql.statements import sql_for_insert, sql_for_partial_update

logger = get_logger(__name__)

TABLE = "companies"
KEY = "handle"
COLUMNS = ("handle", "name", "num_employees", "description", "logo_url")

COMPANY_LIST = ListQuery(
    table=TABLE,
    projection=("handle", "name"),
    fields=(
        FilterField("search", "name", Predicate.SEARCH),
        FilterField("min_employees", "num_employees", Predicate.MIN),
        FilterField("max_employees", "num_employees", Predicate.MAX),
    ),
    rules=(
        OrderedRange(
            "min_employees",
            "max_employees",
            "Bad Request: max_employee query string parameter must be greater than min_employee.",
        ),
    ),
)


def not_found(handle: str) -> NotFoundError:
    return NotFoundError(f'No company found with handle "{handle}"')


def already_exists(handle: str) -> ConflictError:
    return ConflictError(f'Company with handle: "{handle}" already exists')


def get_all(db: Session, criteria: Any = None) -> List[Dict[str, Any]]:
    """
    List companies as {handle, name}, optionally filtered.

    Raises:
        RangeInvalidError: min_employees > max_employees
    """
    statement, values = build_filtered_select(COMPANY_LIST, criteria)
    return fetch_all(db, statement, values)


def get_optional(db: Session, handle: str) -> Optional[Dict[str, Any]]:
    """Return the company row without its jobs, or None."""
    return fetch_one(db, f"SELECT {', '.join(COLUMNS)} FROM {TABLE} WHERE handle=$1", [handle])


def get_by_handle(db: Session, handle: str) -> Dict[str, Any]:
    """
    Return one company with its jobs (newest first).

    Raises:
        NotFoundError: No company has this handle
    """
    company = get_optional(db, handle)
    if company is None:
        raise not_found(handle)

    company["jobs"] = fetch_all(
        db,
        "SELECT title, company_handle FROM jobs WHERE company_handle=$1 ORDER BY date_posted desc",
        [handle],
    )
    return company


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Insert a company and return the stored row.

    Raises:
        ConflictError: A company with this handle already exists
    """
    statement, values = sql_for_insert(TABLE, data, COLUMNS)
    rows = write(db, statement, values, unique=already_exists(data.get("handle")))
    logger.info(f"Created company {rows[0]['handle']}")
    return rows[0]


def update(db: Session, handle: str, items: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Update only the supplied columns of a company.

    Raises:
        ValidationFailedError: Nothing to update
        NotFoundError: No company has this handle
        ConflictError: The new handle is taken
    """
    statement, values = sql_for_partial_update(TABLE, items, KEY, handle)
    rows = write(db, statement, values, unique=already_exists(items.get("handle", handle)))
    if not rows:
        raise not_found(handle)

    logger.info(f"Updated company {handle}")
    return {column: rows[0][column] for column in COLUMNS}


def delete(db: Session, handle: str) -> str:
    """
    Delete a company (and, by cascade, its jobs).

    Raises:
        NotFoundError: No company has this handle
    """
    rows = write(db, f"DELETE FROM {TABLE} WHERE handle=$1 RETURNING handle", [handle])
    if not rows:
        raise not_found(handle)

    logger.info(f"Deleted company {handle}")
    return "Company deleted"