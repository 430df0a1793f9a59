from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import require_admin_user, require_user
from jobly.crud import job as job_crud
from jobly.schemas.company import MessageResponse
from jobly.schemas.job import (
    JobCreate,
    JobDetailEnvelope,
    JobEnvelope,
    JobFilters,
    JobListResponse,
    JobUpdate,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse, dependencies=[Depends(require_user)])
def list_jobs(filters: JobFilters = Depends(), db: Session = Depends(get_db)):
    """
    List jobs as {job: {title, company_handle}}, most recently posted first.

    Query params (all optional):
    - search: substring of the job title
    - min_salary: inclusive lower bound on salary
    - min_equity: inclusive lower bound on equity, must be within [0, 1]
    """
    return {"jobs": job_crud.get_all(db, filters)}


@router.post("", status_code=201, response_model=JobEnvelope, dependencies=[Depends(require_admin_user)])
def create_job(request: JobCreate, db: Session = Depends(get_db)):
    """Create a job for an existing company. Admin only."""
    return {"job": job_crud.create(db, request.model_dump())}


@router.get("/{job_id}", response_model=JobDetailEnvelope, dependencies=[Depends(require_user)])
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Return one job with the details of its company."""
    return {"job": job_crud.get_by_id(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope, dependencies=[Depends(require_admin_user)])
def update_job(job_id: int, request: JobUpdate, db: Session = Depends(get_db)):
    """Update the supplied fields of a job. Admin only."""
    return {"job": job_crud.update(db, job_id, request.model_dump(exclude_unset=True))}


@router.delete("/{job_id}", response_model=MessageResponse, dependencies=[Depends(require_admin_user)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """Delete a job. Admin only."""
    return {"message": job_crud.delete(db, job_id)}
