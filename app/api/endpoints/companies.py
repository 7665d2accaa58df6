import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, get_admin_user
from app.core.sql import prune_filters
from app.crud import company as company_crud
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyEnvelope,
    CompanyDetailEnvelope,
    CompanyListEnvelope,
    CompanyDeleteResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=CompanyEnvelope)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """
    Create a company. Admin only.

    Returns 400 if the handle or name is already in use.
    """
    company = company_crud.create(db, request)
    logger.info(f"Company {company['handle']} created by {admin.username}")
    return {"company": company}


@router.get("/", response_model=CompanyListEnvelope)
def list_companies(
    name: Optional[str] = None,
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    db: Session = Depends(get_db)
):
    """
    List companies, optionally filtered.

    Args:
        name: Case-insensitive substring of the company name
        minEmployees: Minimum number of employees
        maxEmployees: Maximum number of employees (must not be below minEmployees)
    """
    filters = prune_filters({
        "name": name,
        "minEmployees": min_employees,
        "maxEmployees": max_employees,
    })
    return {"companies": company_crud.find_all(db, filters)}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company and its jobs."""
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """
    Partially update a company. Admin only.

    Fields can be: { name, description, numEmployees, logoUrl }.
    An empty body is rejected with 400.
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return {"company": company_crud.update(db, handle, data)}


@router.delete("/{handle}", response_model=CompanyDeleteResponse)
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """Delete a company and its jobs. Admin only."""
    company_crud.remove(db, handle)
    return {"deleted": handle}
