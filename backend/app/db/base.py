"""
SQLAlchemy declarative base shared by every VertiGo model.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass
