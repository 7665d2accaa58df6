"""
User model for authentication.

Users authenticate with username/password and receive a JWT. Admin users may
create, update and delete companies and jobs.
"""

from sqlalchemy import Column, String, Text, Boolean, false
from app.core.database import Base


class User(Base):
    """User account. `password` holds the bcrypt hash, never the raw password."""
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, default=False, server_default=false(), nullable=False)

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
