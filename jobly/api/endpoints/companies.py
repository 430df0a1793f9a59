from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import require_admin_user
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreate,
    CompanyDetailEnvelope,
    CompanyEnvelope,
    CompanyFilters,
    CompanyListResponse,
    CompanyUpdate,
    MessageResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.get("", response_model=CompanyListResponse)
def list_companies(filters: CompanyFilters = Depends(), db: Session = Depends(get_db)):
    """
    List companies as {handle, name}.

    Query params (all optional):
    - search: substring of the company name
    - min_employees / max_employees: inclusive bounds on num_employees

    A min_employees greater than max_employees is rejected with 400.
    """
    return {"companies": company_crud.get_all(db, filters)}


@router.post("", status_code=201, response_model=CompanyEnvelope, dependencies=[Depends(require_admin_user)])
def create_company(request: CompanyCreate, db: Session = Depends(get_db)):
    """Create a company. Admin only."""
    company = company_crud.create(db, request.model_dump())
    return {"company": company}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Return one company including its jobs, newest first."""
    return {"company": company_crud.get_by_handle(db, handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope, dependencies=[Depends(require_admin_user)])
def update_company(handle: str, request: CompanyUpdate, db: Session = Depends(get_db)):
    """Update the supplied fields of a company. Admin only."""
    company = company_crud.update(db, handle, request.model_dump(exclude_unset=True))
    return {"company": company}


@router.delete("/{handle}", response_model=MessageResponse, dependencies=[Depends(require_admin_user)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """Delete a company and its jobs. Admin only."""
    return {"message": company_crud.delete(db, handle)}
