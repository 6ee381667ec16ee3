"""
SQLAlchemy declarative base.

All ORM models inherit from Base so Alembic can discover their tables.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base class for all models."""
