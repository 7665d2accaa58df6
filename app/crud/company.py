"""
CRUD operations for companies.

Statements are hand-written SQL executed through run_query; the SET list of
updates and the WHERE clause of searches come from app.core.sql.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import run_query
from app.core.exceptions import BadRequestError, NotFoundError
from app.core.sql import sql_for_filter, sql_for_partial_update
from app.schemas.company import CompanyCreateRequest

logger = logging.getLogger(__name__)

# API field -> column, for partial updates
COMPANY_COLUMNS = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

# API filter -> predicate prefix, for searches
COMPANY_FILTERS = {
    "name": "name ILIKE ",
    "minEmployees": "num_employees >= ",
    "maxEmployees": "num_employees <= ",
}

_RETURNING = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'


def create(db: Session, company_data: CompanyCreateRequest) -> Dict[str, Any]:
    """
    Create a company.

    Raises:
        BadRequestError: If the handle (or name) is already taken
    """
    duplicate = run_query(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [company_data.handle]
    ).first()
    if duplicate:
        raise BadRequestError(f"Duplicate company: {company_data.handle}")

    try:
        result = run_query(
            db,
            f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {_RETURNING}""",
            [
                company_data.handle,
                company_data.name,
                company_data.description,
                company_data.num_employees,
                company_data.logo_url,
            ]
        )
        company = dict(result.mappings().one())
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating company {company_data.handle}: {e.orig}")
        raise BadRequestError(f"Duplicate company: {company_data.name}")

    logger.info(f"Created company {company['handle']}")
    return company


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name.

    Args:
        db: Database session
        filters: Optional `name` (case-insensitive substring), `minEmployees`
            and `maxEmployees`

    Employee bounds may be ints or numeric strings.

    Raises:
        BadRequestError: If an employee bound is not an integer, or
            minEmployees is greater than maxEmployees
    """
    filters = dict(filters or {})

    for key in ("minEmployees", "maxEmployees"):
        if filters.get(key) is not None:
            try:
                filters[key] = int(filters[key])
            except (TypeError, ValueError):
                raise BadRequestError(f"{key} must be an integer")

    min_employees = filters.get("minEmployees")
    max_employees = filters.get("maxEmployees")
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("minEmployees cannot be greater than maxEmployees")

    where, values = sql_for_filter(filters, COMPANY_FILTERS, fuzzy_fields=("name",))

    result = run_query(
        db,
        f"""SELECT {_RETURNING}
            FROM companies
            {where}
            ORDER BY name""",
        values
    )
    return [dict(row) for row in result.mappings()]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Return a company together with its jobs (ordered by id).

    Raises:
        NotFoundError: If no such company
    """
    row = run_query(
        db,
        f"""SELECT {_RETURNING}
            FROM companies
            WHERE handle = $1""",
        [handle]
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No company: {handle}")

    company = dict(row)
    jobs = run_query(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle]
    )
    company["jobs"] = [dict(job) for job in jobs.mappings()]

    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company with the fields present in `data`.

    Data can include: name, description, numEmployees, logoUrl

    Raises:
        BadRequestError: If `data` is empty
        NotFoundError: If no such company
    """
    set_cols, values = sql_for_partial_update(data, COMPANY_COLUMNS)
    handle_idx = f"${len(values) + 1}"

    try:
        row = run_query(
            db,
            f"""UPDATE companies
                SET {set_cols}
                WHERE handle = {handle_idx}
                RETURNING {_RETURNING}""",
            [*values, handle]
        ).mappings().first()
        company = dict(row) if row else None
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating company {handle}: {e.orig}")
        raise BadRequestError(f"Duplicate company: {data.get('name')}")

    if not company:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return company


def remove(db: Session, handle: str) -> None:
    """
    Delete a company and, through the foreign key cascade, its jobs.

    Raises:
        NotFoundError: If no such company
    """
    row = run_query(
        db,
        "DELETE FROM companies WHERE handle = $1 RETURNING handle",
        [handle]
    ).first()
    db.commit()

    if not row:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Deleted company {handle}")
