from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.schemas.base import CamelModel, StrictCamelModel


class CompanyCreateRequest(StrictCamelModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = Field(None, pattern=r"^https?://\S+$")


class CompanyUpdateRequest(StrictCamelModel):
    """
    Schema for a partial company update.

    Only the fields present in the request body are written; the handle is
    immutable.
    """
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = Field(None, pattern=r"^https?://\S+$")

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        """Columns that are NOT NULL cannot be cleared"""
        if v is None:
            raise ValueError("may not be null")
        return v


class CompanyResponse(CamelModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyJob(CamelModel):
    """Job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None


class CompanyDetail(CompanyResponse):
    jobs: List[CompanyJob] = []


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetail


class CompanyListEnvelope(BaseModel):
    companies: List[CompanyResponse]


class CompanyDeleteResponse(BaseModel):
    deleted: str
