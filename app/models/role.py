"""ORM model for role reference data."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class Role(Base):
    """
    Named role assigned to users at registration.

    Looked up case-insensitively; seeded by migrations (USER, ADMIN).
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(64), nullable=False, unique=True)
