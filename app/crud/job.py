"""
CRUD operations for jobs.

Like app.crud.company, jobs are read and written with hand-written SQL; the
dynamic SET and WHERE fragments come from app.core.sql.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import run_query
from app.core.exceptions import BadRequestError, NotFoundError
from app.core.sql import SqlFragment, sql_for_filter, sql_for_partial_update
from app.schemas.job import JobCreateRequest

logger = logging.getLogger(__name__)

# title, salary and equity share their column names with the API
JOB_COLUMNS: Dict[str, str] = {}

JOB_FILTERS = {
    "title": "title ILIKE ",
    "minSalary": "salary >= ",
    "hasEquity": "equity > ",
}

_RETURNING = 'id, title, salary, equity, company_handle AS "companyHandle"'


def create(db: Session, job_data: JobCreateRequest) -> Dict[str, Any]:
    """
    Create a job for an existing company.

    Returns { id, title, salary, equity, companyHandle }

    Raises:
        BadRequestError: If the company does not exist or the row violates a
            table constraint
    """
    company = run_query(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [job_data.company_handle]
    ).first()
    if not company:
        raise BadRequestError(f"No company: {job_data.company_handle}")

    try:
        result = run_query(
            db,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {_RETURNING}""",
            [job_data.title, job_data.salary, job_data.equity, job_data.company_handle]
        )
        job = dict(result.mappings().one())
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating job for {job_data.company_handle}: {e.orig}")
        raise BadRequestError(f"Invalid job data for company: {job_data.company_handle}")

    logger.info(f"Created job {job['id']}: {job['title']} ({job['companyHandle']})")
    return job


def filter_clause(filters: Optional[Mapping[str, Any]]) -> SqlFragment:
    """
    Build the WHERE clause for a job search.

    `hasEquity` is a flag: when true only jobs with non-zero equity match,
    when false it does not filter at all. `title` matches case-insensitive
    substrings.
    """
    filters = dict(filters or {})

    if filters.pop("hasEquity", None):
        filters["hasEquity"] = 0

    return sql_for_filter(filters, JOB_FILTERS, fuzzy_fields=("title",))


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by id.

    Args:
        db: Database session
        filters: Optional `title`, `minSalary` and `hasEquity`
    """
    where, values = filter_clause(filters)

    result = run_query(
        db,
        f"""SELECT {_RETURNING}
            FROM jobs
            {where}
            ORDER BY id""",
        values
    )
    return [dict(row) for row in result.mappings()]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Return a job with the company that posted it.

    Returns { id, title, salary, equity, company }
        where company is { handle, name, description, numEmployees, logoUrl }

    Raises:
        NotFoundError: If no such job
    """
    row = run_query(
        db,
        f"""SELECT {_RETURNING}
            FROM jobs
            WHERE id = $1""",
        [job_id]
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No job: {job_id}")

    job = dict(row)
    company = run_query(
        db,
        """SELECT handle,
                  name,
                  description,
                  num_employees AS "numEmployees",
                  logo_url AS "logoUrl"
           FROM companies
           WHERE handle = $1""",
        [job.pop("companyHandle")]
    ).mappings().one()
    job["company"] = dict(company)

    return job


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Data can include: { title, salary, equity }

    Raises:
        BadRequestError: If `data` is empty or violates a table constraint
        NotFoundError: If no such job
    """
    set_cols, values = sql_for_partial_update(data, JOB_COLUMNS)
    id_idx = f"${len(values) + 1}"

    try:
        row = run_query(
            db,
            f"""UPDATE jobs
                SET {set_cols}
                WHERE id = {id_idx}
                RETURNING {_RETURNING}""",
            [*values, job_id]
        ).mappings().first()
        job = dict(row) if row else None
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating job {job_id}: {e.orig}")
        raise BadRequestError(f"Invalid job data: {', '.join(data)}")

    if not job:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return job


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job.

    Raises:
        NotFoundError: If no such job
    """
    row = run_query(
        db,
        "DELETE FROM jobs WHERE id = $1 RETURNING id",
        [job_id]
    ).first()
    db.commit()

    if not row:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Deleted job {job_id}")
