"""
Declarative base and shared columns for Bar Archive models.

Every table gets an integer primary key plus created/updated timestamps.
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

from bar_archive.utils.datetime_utils import utc_now

Base = declarative_base()


class BaseModel(Base):
    """
    Abstract parent of all mapped classes.

    Provides:
    - id: integer primary key
    - created_at / updated_at: UTC timestamps maintained on insert/update
    - to_dict(): column values as plain Python data
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Column name -> value, with datetimes rendered as ISO strings."""
        data = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            data[column.name] = value.isoformat() if isinstance(value, datetime) else value
        return data

    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        if name is not None:
            return f"{type(self).__name__}(id={self.id}, name='{name}')"
        return f"{type(self).__name__}(id={self.id})"
