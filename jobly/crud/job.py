"""
Job service.

Jobs reference a company by handle. Whether that company exists is left to
the foreign-key constraint: a violation is caught after the statement and
reported as a ReferenceViolationError naming the handle.
"""

from typing import Any, Dict, List, Mapping

from sqlalchemy.orm import Session

from jobly.core.exceptions import NotFoundError, ReferenceViolationError
from jobly.core.logging_config import get_logger
from jobly.crud import company as company_crud
from jobly.crud.base import fetch_all, fetch_one, write
from jobly.sql.filters import Bounded, FilterField, ListQuery, Predicate, build_filtered_select
from jobly.sql.statements import sql_for_insert, sql_for_partial_update

logger = get_logger(__name__)

TABLE = "jobs"
KEY = "id"
COLUMNS = ("id", "title", "salary", "equity", "company_handle")

JOB_LIST = ListQuery(
    table=TABLE,
    projection=("title", "company_handle"),
    fields=(
        FilterField("search", "title", Predicate.SEARCH),
        FilterField("min_salary", "salary", Predicate.MIN),
        FilterField("min_equity", "equity", Predicate.MIN),
    ),
    rules=(
        Bounded("min_equity", 0, 1, "invalid min_equity parameter value, must be between 0 and 1 inclusive."),
    ),
    order_by="date_posted desc",
)


def not_found(job_id: int) -> NotFoundError:
    return NotFoundError(f"No job found with id {job_id}")


def missing_company(handle: str) -> ReferenceViolationError:
    return ReferenceViolationError(f'No company exists corresponding to handle: "{handle}"')


def get_all(db: Session, criteria: Any = None) -> List[Dict[str, Any]]:
    """
    List jobs newest first, each wrapped as {"job": {title, company_handle}}.

    Raises:
        RangeInvalidError: min_equity outside [0, 1]
    """
    statement, values = build_filtered_select(JOB_LIST, criteria)
    return [{"job": row} for row in fetch_all(db, statement, values)]


def get_by_id(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Return one job including the company it belongs to.

    Raises:
        NotFoundError: No job has this id
    """
    job = fetch_one(db, f"SELECT {', '.join(COLUMNS)} FROM {TABLE} WHERE id=$1", [job_id])
    if job is None:
        raise not_found(job_id)

    job["company"] = company_crud.get_optional(db, job["company_handle"])
    return job


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Insert a job and return the stored row.

    Raises:
        ReferenceViolationError: company_handle matches no company
    """
    statement, values = sql_for_insert(TABLE, data, COLUMNS)
    rows = write(db, statement, values, foreign_key=missing_company(data.get("company_handle")))
    logger.info(f"Created job {rows[0]['id']} for {rows[0]['company_handle']}")
    return rows[0]


def update(db: Session, job_id: int, items: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Update only the supplied columns of a job.

    Raises:
        ValidationFailedError: Nothing to update
        NotFoundError: No job has this id
        ReferenceViolationError: New company_handle matches no company
    """
    statement, values = sql_for_partial_update(TABLE, items, KEY, job_id)
    rows = write(db, statement, values, foreign_key=missing_company(items.get("company_handle")))
    if not rows:
        raise not_found(job_id)

    logger.info(f"Updated job {job_id}")
    return {column: rows[0][column] for column in COLUMNS}


def delete(db: Session, job_id: int) -> str:
    """
    Raises:
        NotFoundError: No job has this id
    """
    rows = write(db, f"DELETE FROM {TABLE} WHERE id=$1 RETURNING id", [job_id])
    if not rows:
        raise not_found(job_id)

    logger.info(f"Deleted job {job_id}")
    return "Job deleted"
