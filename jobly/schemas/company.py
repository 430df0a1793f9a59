"""
Pydantic schemas for companies.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

# num_employees is a 32-bit INTEGER column
MAX_EMPLOYEES = 2 ** 31 - 1


class CompanyFilters(BaseModel):
    """
    Query-string criteria for GET /companies.

    Kept as raw strings: the query builder decides what counts as a number,
    and a non-numeric bound is treated as absent.
    """
    search: Optional[str] = None
    min_employees: Optional[str] = None
    max_employees: Optional[str] = None


class CompanyCreate(BaseModel):
    """Schema for creating a company"""
    handle: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1)
    num_employees: Optional[int] = Field(None, ge=0, le=MAX_EMPLOYEES)
    description: Optional[str] = None
    logo_url: Optional[str] = None


class CompanyUpdate(BaseModel):
    """Schema for PATCH /companies/{handle}; only fields sent are updated"""
    handle: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1)
    num_employees: Optional[int] = Field(None, ge=0, le=MAX_EMPLOYEES)
    description: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator("handle", "name")
    @classmethod
    def not_null(cls, v):
        """Columns that are NOT NULL may be omitted, but not set to null."""
        if v is None:
            raise ValueError("may not be null")
        return v


class CompanySummary(BaseModel):
    handle: str
    name: str


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    handle: str
    name: str
    num_employees: Optional[int] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None


class CompanyJob(BaseModel):
    title: str
    company_handle: str


class CompanyDetail(CompanyResponse):
    jobs: List[CompanyJob] = []


class CompanyListResponse(BaseModel):
    companies: List[CompanySummary]


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetail


class MessageResponse(BaseModel):
    message: str
