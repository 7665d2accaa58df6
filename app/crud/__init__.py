"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern. Statements are hand-written SQL; see
app.core.sql for how partial updates and search filters are assembled.
"""

from app.crud import company, job, user

__all__ = ["company", "job", "user"]
