import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, get_admin_user
from app.core.sql import prune_filters
from app.crud import job as job_crud
from app.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobEnvelope,
    JobDetailEnvelope,
    JobListEnvelope,
    JobDeleteResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """
    Create a job posting. Admin only.

    The company named by `companyHandle` must exist.
    """
    job = job_crud.create(db, request)
    logger.info(f"Job {job['id']} created by {admin.username}")
    return {"job": job}


@router.get("/", response_model=JobListEnvelope)
def list_jobs(
    title: Optional[str] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: Session = Depends(get_db)
):
    """
    List jobs, optionally filtered.

    Args:
        title: Case-insensitive substring of the job title
        minSalary: Minimum salary
        hasEquity: If true, only jobs with non-zero equity; false does not filter
    """
    filters = prune_filters({
        "title": title,
        "minSalary": min_salary,
        "hasEquity": has_equity,
    })
    return {"jobs": job_crud.find_all(db, filters)}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job and the company that posted it."""
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """
    Partially update a job. Admin only.

    Fields can be: { title, salary, equity }. An empty body is rejected with 400.
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return {"job": job_crud.update(db, job_id, data)}


@router.delete("/{job_id}", response_model=JobDeleteResponse)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """Delete a job by ID. Admin only."""
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
