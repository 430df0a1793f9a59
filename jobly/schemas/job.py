from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from jobly.schemas.company import CompanyResponse


class JobFilters(BaseModel):
    """
    Query-string criteria for GET /jobs.

    Bounds are raw strings; non-numeric values are ignored by the query builder.
    """
    search: Optional[str] = None
    min_salary: Optional[str] = None
    min_equity: Optional[str] = None


class JobCreate(BaseModel):
    """Schema for creating a job"""
    title: str = Field(..., min_length=1)
    salary: Optional[float] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1, description="Fraction of the company, 0 to 1")
    company_handle: str = Field(..., min_length=1)


class JobUpdate(BaseModel):
    """Schema for PATCH /jobs/{id}; only fields sent are updated"""
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[float] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: Optional[str] = Field(None, min_length=1)

    @field_validator("title", "company_handle")
    @classmethod
    def not_null(cls, v):
        """Columns that are NOT NULL may be omitted, but not set to null."""
        if v is None:
            raise ValueError("may not be null")
        return v


class JobResponse(BaseModel):
    id: int
    title: str
    salary: Optional[float] = None
    equity: Optional[float] = None
    company_handle: str


class JobDetail(JobResponse):
    company: CompanyResponse


class JobSummary(BaseModel):
    title: str
    company_handle: str


class JobListItem(BaseModel):
    job: JobSummary


class JobListResponse(BaseModel):
    jobs: List[JobListItem]


class JobEnvelope(BaseModel):
    job: JobResponse


class JobDetailEnvelope(BaseModel):
    job: JobDetail
